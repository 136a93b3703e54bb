"""
Visibility engine.

Pipeline: ContentInput -> extract() -> platform analyzers (fan-out) ->
citation override -> aggregator + recommendations -> VisibilityReport.
"""

import dataclasses
import logging
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone

from analyzers.base import (
    BaseAnalyzer,
    Platform,
    PlatformScore,
    Priority,
    Recommendation,
)
from analyzers.bing_copilot import BingCopilotAnalyzer
from analyzers.chatgpt import ChatGPTAnalyzer
from analyzers.claude import ClaudeAnalyzer
from analyzers.content import ContentInput, StructuralFeatures
from analyzers.extractor import extract
from analyzers.gemini import GeminiAnalyzer
from analyzers.google_aio import GoogleAIOAnalyzer
from analyzers.perplexity import PerplexityAnalyzer
from analyzers import factors as f
from citations.base import CitationCheckResult
from citations.checker import HybridCitationChecker
from config import settings
from recommendations.engine import deduplicate_recommendations
from scoring.aggregator import combine, resolve_weights

logger = logging.getLogger(__name__)


def default_analyzers() -> list[BaseAnalyzer]:
    return [
        GoogleAIOAnalyzer(),
        ChatGPTAnalyzer(),
        PerplexityAnalyzer(),
        BingCopilotAnalyzer(),
        ClaudeAnalyzer(),
        GeminiAnalyzer(),
    ]


@dataclass(frozen=True)
class AnalysisOptions:
    """
    Per-call options.

    `platforms` limits which analyzers run and which platforms are
    aggregated; unknown names are ignored. `weights` overrides individual
    default platform weights. `keywords` seed citation queries.
    """

    platforms: tuple[str, ...] | None = None
    weights: Mapping[str, float] | None = None
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoreBreakdown:
    """Platform-independent category scores."""

    entity_density: int
    quotability: int
    answer_structure: int
    schema_presence: int
    freshness: int
    authority: int


@dataclass(frozen=True)
class MissingElement:
    element: str
    importance: Priority
    description: str
    suggestion: str


@dataclass(frozen=True)
class VisibilityReport:
    url: str
    combined_score: int
    per_platform: tuple[PlatformScore, ...]
    structural_features: StructuralFeatures
    recommendations: tuple[Recommendation, ...]
    breakdown: ScoreBreakdown
    missing_elements: tuple[MissingElement, ...]
    analyzed_at: datetime
    analysis_duration_ms: int
    platforms: tuple[Platform, ...] = field(default=())

    def platform_score(self, platform: Platform) -> PlatformScore | None:
        for score in self.per_platform:
            if score.platform == platform:
                return score
        return None


class VisibilityEngine:
    """
    Scores a page for every AI platform and combines the results.

    Heuristic analyzers always run. When a citation checker is supplied,
    its per-platform results replace the heuristic score for those
    platforms; a platform whose check failed keeps its heuristic score.
    """

    def __init__(
        self,
        analyzers: Iterable[BaseAnalyzer] | None = None,
        citation_checker: HybridCitationChecker | None = None,
        max_workers: int | None = None,
    ):
        analyzers = list(analyzers) if analyzers is not None else default_analyzers()
        self.analyzers: dict[Platform, BaseAnalyzer] = {}
        for analyzer in analyzers:
            if analyzer.platform in self.analyzers:
                raise ValueError(f"Duplicate analyzer for platform {analyzer.platform.value}")
            self.analyzers[analyzer.platform] = analyzer
        self.citation_checker = citation_checker
        self.max_workers = max_workers or settings.analysis_max_workers

    @classmethod
    def from_settings(cls, with_citations: bool = True) -> "VisibilityEngine":
        checker = HybridCitationChecker.from_settings() if with_citations else None
        return cls(citation_checker=checker)

    def analyze(
        self, content: ContentInput, options: AnalysisOptions | None = None
    ) -> VisibilityReport:
        """
        Run a full visibility analysis.

        Args:
            content: Page to score; only url, title and raw_text are required
            options: Platform subset, weight overrides and citation keywords

        Returns:
            VisibilityReport
        """
        options = options or AnalysisOptions()
        started = time.perf_counter()
        analyzed_at = datetime.now(timezone.utc)
        platforms = self.resolve_platforms(options.platforms)

        names = ", ".join(p.value for p in platforms) or "no platforms"
        logger.info(f"Analyzing {content.url} for {names}")

        features = extract(content)
        heuristic, citations = self._run_platforms(content, features, platforms, options)

        per_platform = tuple(
            self._apply_citation(heuristic[p], citations.get(p)) for p in platforms
        )

        weights = resolve_weights(options.weights)
        combined = combine(
            {s.platform: s.score for s in per_platform}, weights, subset=platforms
        )

        recommendations = deduplicate_recommendations(
            rec for score in per_platform for rec in score.recommendations
        )

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(f"Analysis of {content.url} complete: score={combined} ({duration_ms}ms)")

        return VisibilityReport(
            url=content.url,
            combined_score=combined,
            per_platform=per_platform,
            structural_features=features,
            recommendations=tuple(recommendations),
            breakdown=build_breakdown(content, features),
            missing_elements=tuple(find_missing_elements(features)),
            analyzed_at=analyzed_at,
            analysis_duration_ms=duration_ms,
            platforms=platforms,
        )

    def resolve_platforms(self, requested: Iterable[str] | None) -> tuple[Platform, ...]:
        """Known platforms with an analyzer, in request order; unknown names are dropped."""
        if requested is None:
            return tuple(self.analyzers)

        platforms = []
        for name in requested:
            try:
                platform = Platform(name)
            except ValueError:
                logger.warning(f"Ignoring unknown platform: {name}")
                continue
            if platform not in self.analyzers:
                logger.warning(f"No analyzer registered for platform: {platform.value}")
                continue
            if platform not in platforms:
                platforms.append(platform)
        return tuple(platforms)

    def _run_platforms(
        self,
        content: ContentInput,
        features: StructuralFeatures,
        platforms: tuple[Platform, ...],
        options: AnalysisOptions,
    ) -> tuple[dict[Platform, PlatformScore], dict[Platform, CitationCheckResult]]:
        if not platforms:
            return {}, {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            citation_future = None
            if self.citation_checker is not None:
                citation_future = pool.submit(
                    self.citation_checker.check_all,
                    content.url,
                    list(options.keywords),
                    platforms,
                )
            futures = {
                p: pool.submit(self.analyzers[p].analyze, content, features) for p in platforms
            }
            heuristic = {p: future.result() for p, future in futures.items()}
            citations = citation_future.result() if citation_future is not None else {}

        return heuristic, citations

    def _apply_citation(
        self, score: PlatformScore, citation: CitationCheckResult | None
    ) -> PlatformScore:
        """A real check replaces the heuristic score; the two are never averaged."""
        if citation is None:
            return score
        return dataclasses.replace(
            score,
            score=citation.score,
            heuristic_score=score.score,
            is_real_check=True,
            confidence=citation.confidence,
            citation=citation,
        )


# =============================================================================
# Report extras
# =============================================================================


def build_breakdown(content: ContentInput, features: StructuralFeatures) -> ScoreBreakdown:
    structure = features.content_structure
    links = features.external_link_count
    return ScoreBreakdown(
        entity_density=f.entity_density_score(len(features.entities), features.word_count),
        quotability=features.quotability_score,
        answer_structure=f.answer_structure_score(structure),
        schema_presence=f.schema_score(features.schema_presence),
        freshness=f.freshness_score(content.published_at, content.last_modified),
        authority=f.authority_score(
            structure.has_expert_attribution, features.has_credentials, links > 0, links
        ),
    )


MISSING_ELEMENT_CHECKS = [
    (
        "has_direct_answer",
        MissingElement(
            element="Direct Answer",
            importance=Priority.CRITICAL,
            description="First paragraph should directly answer the main query",
            suggestion="Lead with a clear, concise answer in the first 100-150 words",
        ),
    ),
    (
        "has_key_takeaways",
        MissingElement(
            element="Key Takeaways",
            importance=Priority.HIGH,
            description="Summary section for quick reference",
            suggestion="Add a 'Key Takeaways' or 'TL;DR' section near the top",
        ),
    ),
    (
        "has_faq_section",
        MissingElement(
            element="FAQ Section",
            importance=Priority.HIGH,
            description="Question-answer format is highly cited by AI",
            suggestion="Add 3-5 common questions with concise answers",
        ),
    ),
    (
        "has_statistics",
        MissingElement(
            element="Statistics & Data",
            importance=Priority.MEDIUM,
            description="Specific numbers increase credibility and citations",
            suggestion="Include relevant statistics, percentages, or data points",
        ),
    ),
    (
        "has_expert_attribution",
        MissingElement(
            element="Expert Attribution",
            importance=Priority.MEDIUM,
            description="Expert quotes and credentials boost authority",
            suggestion="Add author credentials or expert quotes",
        ),
    ),
]

MISSING_SCHEMA = MissingElement(
    element="Schema Markup",
    importance=Priority.HIGH,
    description="Structured data helps AI understand content",
    suggestion="Add Article, FAQ, or HowTo schema markup",
)


def find_missing_elements(features: StructuralFeatures) -> list[MissingElement]:
    structure = features.content_structure
    missing = [
        element for flag, element in MISSING_ELEMENT_CHECKS if not getattr(structure, flag)
    ]
    schema = features.schema_presence
    if not (schema.has_json_ld or schema.types_found):
        missing.append(MISSING_SCHEMA)
    return missing


# Convenience function
def run_visibility_analysis(
    content: ContentInput, options: AnalysisOptions | None = None
) -> VisibilityReport:
    """Heuristic-only analysis with the default analyzers."""
    engine = VisibilityEngine()
    return engine.analyze(content, options)
