"""Perplexity AI analyzer."""

import logging
import re

from analyzers.base import (
    BaseAnalyzer,
    Platform,
    PlatformScore,
    Priority,
    Recommendation,
    ScoreFactor,
)
from analyzers.content import ContentInput, ContentStructure, StructuralFeatures
from analyzers import factors as f

logger = logging.getLogger(__name__)

QUOTABLE_STATEMENT_PATTERN = re.compile(
    r"\d+%|\d+\s*(?:million|billion)|study|research|according to", re.IGNORECASE
)
SENTENCE_BREAK = re.compile(r"[.!?]+")

ORIGINAL_DATA_MARKERS = (
    "our data",
    "we surveyed",
    "our research",
    "case study",
    "original",
    "proprietary",
)
RESEARCH_MARKERS = ("our research", "we found", "our study")
EXPERIENCE_MARKERS = ("in my experience", "i've tested", "we tested")
SURVEY_MARKERS = ("survey", "interviewed")

MIN_SOURCE_LINKS = 3


class PerplexityAnalyzer(BaseAnalyzer):
    """
    Scores content for Perplexity AI.

    Perplexity always shows its sources, so it favors pages that are worth
    citing: specific claims, outbound references, and original data.
    """

    WEIGHTS = {
        "citation_worthiness": 0.25,
        "coverage": 0.20,
        "entity_density": 0.15,
        "authority": 0.20,
        "original_content": 0.10,
        "freshness": 0.10,
    }

    @property
    def platform(self) -> Platform:
        return Platform.PERPLEXITY

    def analyze(self, content: ContentInput, features: StructuralFeatures) -> PlatformScore:
        structure = features.content_structure
        lowered = features.lowered_text
        has_original_data = any(m in lowered for m in ORIGINAL_DATA_MARKERS)
        links = features.external_link_count

        factors = [
            self._citation_factor(content.raw_text, links, has_original_data),
            self._coverage_factor(content, structure, features.word_count),
            f.entity_density_factor(
                len(features.entities), features.word_count, self.WEIGHTS["entity_density"]
            ),
            f.authority_factor(
                structure.has_expert_attribution,
                features.has_credentials,
                links > 0,
                links,
                self.WEIGHTS["authority"],
            ),
            self._originality_factor(lowered),
            f.freshness_factor(
                content.published_at, content.last_modified, self.WEIGHTS["freshness"]
            ),
        ]

        extras = []
        if links < MIN_SOURCE_LINKS:
            extras.append(
                Recommendation(
                    priority=Priority.MEDIUM,
                    title="Add more authoritative sources",
                    description=(
                        "Perplexity values well-sourced content. Link to 3-5 "
                        "authoritative external sources."
                    ),
                    impact_estimate="+10-15 points",
                )
            )
        if not has_original_data:
            extras.append(
                Recommendation(
                    priority=Priority.HIGH,
                    title="Include original data or research",
                    description=(
                        "Perplexity prioritizes pages with unique data, statistics, or "
                        "original research. Add surveys, case studies, or proprietary "
                        "insights."
                    ),
                    impact_estimate="+15-20 points",
                )
            )

        result = f.platform_score(self.platform, factors, extras)
        logger.debug(f"Perplexity score for {content.url}: {result.score}")
        return result

    def _citation_factor(
        self, text: str, external_links: int, has_original_data: bool
    ) -> ScoreFactor:
        statements = sum(
            1 for s in SENTENCE_BREAK.split(text) if QUOTABLE_STATEMENT_PATTERN.search(s)
        )

        score = min(40, statements * 8)
        if external_links > 0:
            score += 15
        score += min(15, external_links * 5)
        if has_original_data:
            score += 20
        score += min(10, statements * 2)

        return f.additive_factor(
            "Citation Worthiness",
            score,
            self.WEIGHTS["citation_worthiness"],
            "Specific, quotable claims with proper sourcing that Perplexity can cite",
        )

    def _coverage_factor(
        self, content: ContentInput, structure: ContentStructure, word_count: int
    ) -> ScoreFactor:
        if word_count >= 2500:
            score = 30
        elif word_count >= 1500:
            score = 25
        elif word_count >= 1000:
            score = 15
        else:
            score = 5

        score += min(25, len(content.headings) * 5)

        aspects = [
            structure.has_statistics,
            structure.has_expert_attribution,
            structure.has_definitions,
            structure.has_how_to_section,
            structure.has_faq_section,
        ]
        score += sum(aspects) * 9

        return f.additive_factor(
            "Comprehensive Coverage",
            score,
            self.WEIGHTS["coverage"],
            "In-depth coverage of the topic from multiple angles",
        )

    def _originality_factor(self, lowered: str) -> ScoreFactor:
        score = 50
        if any(m in lowered for m in RESEARCH_MARKERS):
            score += 25
        if "case study" in lowered:
            score += 15
        if any(m in lowered for m in EXPERIENCE_MARKERS):
            score += 10
        if any(m in lowered for m in SURVEY_MARKERS):
            score += 20

        return f.additive_factor(
            "Original Content",
            score,
            self.WEIGHTS["original_content"],
            "Unique research, data, or insights not found elsewhere",
        )
