"""Recommendation engine that turns low-scoring factors into prioritized advice."""

import logging
from collections.abc import Iterable, Sequence

from analyzers.base import Recommendation, ScoreFactor
from recommendations.rules import recommendation_for_factor

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Generates recommendations from analyzer output.

    The engine:
    1. Flattens factors from all analyzers, in analyzer order
    2. Creates one recommendation per under-threshold factor
    3. Deduplicates by lower-cased title, keeping the higher priority
    4. Sorts by priority; ties keep their original order
    """

    def generate(
        self, per_platform_factors: Iterable[Sequence[ScoreFactor]]
    ) -> list[Recommendation]:
        """
        Build recommendations for a set of analyzer factor lists.

        Args:
            per_platform_factors: One factor sequence per analyzer

        Returns:
            Deduplicated, priority-sorted recommendations
        """
        return self.prioritize(self.from_factors(per_platform_factors))

    def from_factors(
        self, per_platform_factors: Iterable[Sequence[ScoreFactor]]
    ) -> list[Recommendation]:
        recommendations = []
        for factors in per_platform_factors:
            for factor in factors:
                recommendation = recommendation_for_factor(factor)
                if recommendation is not None:
                    recommendations.append(recommendation)
        return recommendations

    def prioritize(self, recommendations: Iterable[Recommendation]) -> list[Recommendation]:
        """Deduplicate by title and sort critical -> low."""
        seen: dict[str, Recommendation] = {}

        for rec in recommendations:
            key = rec.title.lower()
            existing = seen.get(key)
            # Replacing a dict value keeps the first occurrence's position
            if existing is None or rec.priority.rank < existing.priority.rank:
                seen[key] = rec

        deduplicated = sorted(seen.values(), key=lambda r: r.priority.rank)
        logger.debug(f"Prioritized {len(deduplicated)} recommendations")
        return deduplicated


def build_recommendations(
    per_platform_factors: Iterable[Sequence[ScoreFactor]],
) -> list[Recommendation]:
    """Convenience function to build recommendations from analyzer factors."""
    return RecommendationEngine().generate(per_platform_factors)


def deduplicate_recommendations(
    recommendations: Iterable[Recommendation],
) -> list[Recommendation]:
    """Convenience function to dedupe and sort already-built recommendations."""
    return RecommendationEngine().prioritize(recommendations)
