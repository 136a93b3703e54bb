"""Bing Copilot analyzer."""

import dataclasses
import logging

from analyzers.base import (
    BaseAnalyzer,
    Platform,
    PlatformScore,
    Priority,
    Recommendation,
    ScoreFactor,
)
from analyzers.content import ContentInput, SchemaPresence, StructuralFeatures
from analyzers.extractor import has_direct_answer, rate_heading_count, rate_paragraph_count
from analyzers import factors as f

logger = logging.getLogger(__name__)

# Bing rewards concise openings more than the other platforms
DIRECT_ANSWER_WINDOW = (80, 300)

ANSWER_POINTS = {
    "direct_answer": 30,
    "key_takeaways": 0,
    "faq": 20,
    "how_to": 15,
    "step_by_step": 0,
    "statistics": 0,
    "definitions": 10,
    "heading_good": 15,
    "heading_fair": 10,
    "paragraph_good": 10,
    "paragraph_fair": 5,
}


class BingCopilotAnalyzer(BaseAnalyzer):
    """
    Scores content for Bing Copilot.

    Checks:
    - Schema.org markup, Open Graph and Twitter cards (weighted highest)
    - Entity clarity
    - Answer structure with a tight direct-answer window
    - Content quality
    - Freshness
    - Authority signals
    """

    WEIGHTS = {
        "schema": 0.25,
        "entity_clarity": 0.20,
        "answer_structure": 0.20,
        "content_quality": 0.15,
        "freshness": 0.10,
        "authority": 0.10,
    }

    @property
    def platform(self) -> Platform:
        return Platform.BING_COPILOT

    def analyze(self, content: ContentInput, features: StructuralFeatures) -> PlatformScore:
        min_chars, max_chars = DIRECT_ANSWER_WINDOW
        structure = dataclasses.replace(
            features.content_structure,
            has_direct_answer=has_direct_answer(content.raw_text, min_chars, max_chars),
            heading_hierarchy=rate_heading_count(content.headings, good=5, fair=2),
            paragraph_structure=rate_paragraph_count(content.raw_text, good=8, fair=4),
        )
        schema = self._schema_factor(features.schema_presence)
        links = features.external_link_count

        factors = [
            schema,
            self._entity_clarity_factor(features.entity_density),
            f.answer_structure_factor(
                structure, self.WEIGHTS["answer_structure"], points=ANSWER_POINTS
            ),
            self._content_quality_factor(structure, features.word_count),
            f.freshness_factor(
                content.published_at, content.last_modified, self.WEIGHTS["freshness"]
            ),
            f.authority_factor(
                structure.has_expert_attribution,
                features.has_credentials,
                links > 0,
                links,
                self.WEIGHTS["authority"],
            ),
        ]

        extras = []
        if schema.score < 50:
            extras.append(
                Recommendation(
                    priority=Priority.HIGH,
                    title="Add structured data markup",
                    description=(
                        "Bing Copilot strongly favors pages with Schema.org markup. "
                        "Add Article, FAQ, HowTo, or Product schema."
                    ),
                    impact_estimate="+15-25 points",
                    auto_fixable=True,
                    action_code="add_schema",
                )
            )
        if not structure.has_direct_answer:
            extras.append(
                Recommendation(
                    priority=Priority.HIGH,
                    title="Add a direct answer at the start",
                    description=(
                        "Begin your content with a clear, concise answer to the main "
                        "question. Bing Copilot often quotes the first paragraph."
                    ),
                    impact_estimate="+10-15 points",
                )
            )

        result = f.platform_score(self.platform, factors, extras)
        logger.debug(f"Bing Copilot score for {content.url}: {result.score}")
        return result

    def _schema_factor(self, schema: SchemaPresence) -> ScoreFactor:
        score = 0
        if schema.has_json_ld:
            score += 30
        score += len(schema.types_found) * 10
        if schema.open_graph:
            score += 10
        if schema.twitter_card:
            score += 5

        return f.additive_factor(
            "Schema & Structured Data",
            score,
            self.WEIGHTS["schema"],
            "Schema.org markup and structured data that Bing Copilot can parse",
        )

    def _entity_clarity_factor(self, density: float) -> ScoreFactor:
        if density >= 15:
            score = 100
        elif density >= 10:
            score = 85
        elif density >= 5:
            score = 70
        elif density >= 2:
            score = 55
        else:
            score = 50

        return f.additive_factor(
            "Entity Clarity",
            score,
            self.WEIGHTS["entity_clarity"],
            "Clear, well-defined entities that Bing can identify and link",
        )

    def _content_quality_factor(self, structure, word_count: int) -> ScoreFactor:
        score = 0
        if word_count >= 2000:
            score += 25
        elif word_count >= 1000:
            score += 20
        elif word_count >= 500:
            score += 10

        if structure.has_statistics:
            score += 20
        if structure.has_expert_attribution:
            score += 15
        if structure.has_key_takeaways:
            score += 15
        if structure.has_step_by_step:
            score += 15
        if structure.has_definitions:
            score += 10

        return f.additive_factor(
            "Content Quality",
            score,
            self.WEIGHTS["content_quality"],
            "High-quality, factual content with supporting evidence",
        )
