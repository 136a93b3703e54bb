"""Google AI Overviews analyzer."""

import dataclasses
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
from analyzers.content import (
    ContentInput,
    ContentStructure,
    Heading,
    Rating,
    StructuralFeatures,
)
from analyzers.extractor import first_paragraph, rate_paragraph_length
from analyzers import factors as f

logger = logging.getLogger(__name__)

EXPERIENCE_MARKERS = ("in my experience", "i've tested", "we found")
SENTENCE_BREAK = re.compile(r"[.!?]+")


class GoogleAIOAnalyzer(BaseAnalyzer):
    """
    Scores content for Google's AI-generated summaries.

    Checks:
    - Entity density
    - Answer structure (weighted highest)
    - FAQ / HowTo / Article schema
    - E-E-A-T signals
    - Content freshness
    - Featured snippet formatting
    """

    WEIGHTS = {
        "entity_density": 0.15,
        "answer_structure": 0.25,
        "schema": 0.20,
        "eeat": 0.20,
        "freshness": 0.10,
        "featured_snippet": 0.10,
    }

    @property
    def platform(self) -> Platform:
        return Platform.GOOGLE_AIO

    def analyze(self, content: ContentInput, features: StructuralFeatures) -> PlatformScore:
        structure = dataclasses.replace(
            features.content_structure,
            has_direct_answer=self._has_direct_answer(content.raw_text),
            heading_hierarchy=self._rate_headings(content.headings),
            paragraph_structure=rate_paragraph_length(
                features.paragraph_word_counts, good=(50, 150), fair=(30, 200)
            ),
        )

        factors = [
            f.entity_density_factor(
                len(features.entities), features.word_count, self.WEIGHTS["entity_density"]
            ),
            f.answer_structure_factor(structure, self.WEIGHTS["answer_structure"]),
            f.schema_factor(features.schema_presence, self.WEIGHTS["schema"]),
            self._eeat_factor(features, structure),
            f.freshness_factor(
                content.published_at, content.last_modified, self.WEIGHTS["freshness"]
            ),
            self._featured_snippet_factor(content, structure),
        ]

        extras = []
        if structure.has_faq_section and not features.schema_presence.faq_page:
            extras.append(
                Recommendation(
                    priority=Priority.HIGH,
                    title="Add FAQ Schema markup",
                    description=(
                        "You have FAQ content but no FAQ schema. Adding schema "
                        "significantly increases AI Overview visibility."
                    ),
                    impact_estimate="+15-20 points",
                    auto_fixable=True,
                    action_code="add_faq_schema",
                )
            )

        result = f.platform_score(self.platform, factors, extras)
        logger.debug(f"Google AIO score for {content.url}: {result.score}")
        return result

    def _has_direct_answer(self, text: str) -> bool:
        """The opening sentence alone must carry an answer."""
        sentences = [s for s in SENTENCE_BREAK.split(first_paragraph(text)) if s]
        return bool(sentences) and len(sentences[0]) > 50

    def _rate_headings(self, headings: tuple[Heading, ...]) -> Rating:
        h1_count = sum(1 for h in headings if h.level == 1)
        has_h2 = any(h.level == 2 for h in headings)

        if h1_count == 1 and has_h2:
            return Rating.GOOD
        if h1_count == 1 or has_h2:
            return Rating.FAIR
        return Rating.POOR

    def _eeat_factor(
        self, features: StructuralFeatures, structure: ContentStructure
    ) -> ScoreFactor:
        score = 0

        # Experience
        if any(m in features.lowered_text for m in EXPERIENCE_MARKERS):
            score += 20
        # Expertise
        if structure.has_expert_attribution:
            score += 25
        # Authority
        if structure.has_statistics:
            score += 20
        # Trust
        if structure.has_definitions:
            score += 15

        if features.word_count >= 1500:
            score += 20
        elif features.word_count >= 800:
            score += 10

        return f.additive_factor(
            "E-E-A-T Signals",
            score,
            self.WEIGHTS["eeat"],
            "Experience, Expertise, Authority, Trust indicators",
        )

    def _featured_snippet_factor(
        self, content: ContentInput, structure: ContentStructure
    ) -> ScoreFactor:
        score = 0
        text = content.raw_text

        if structure.has_direct_answer:
            score += 30
        if "1." in text or "•" in text or "-" in text:
            score += 20
        if "<table" in (content.raw_html or ""):
            score += 15
        if structure.has_definitions:
            score += 20
        if sum(1 for h in content.headings if h.level == 2) >= 3:
            score += 15

        return f.additive_factor(
            "Featured Snippet Ready",
            score,
            self.WEIGHTS["featured_snippet"],
            "Content formatted for Google Featured Snippets and AI Overviews",
        )
