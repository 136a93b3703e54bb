"""ChatGPT / SearchGPT analyzer."""

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
from analyzers.content import ContentInput, ContentStructure, Rating, StructuralFeatures
from analyzers.extractor import rate_heading_count, rate_paragraph_length
from analyzers import factors as f

logger = logging.getLogger(__name__)

SPECIFIC_CLAIM_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b|\b\d+\s*(?:years?|months?|days?)\b")
LIST_PATTERN = re.compile(r"^\d+\.", re.MULTILINE)

LONG_PARAGRAPH_WORDS = 200


class ChatGPTAnalyzer(BaseAnalyzer):
    """
    Scores content for ChatGPT and SearchGPT.

    ChatGPT quotes content directly, so quotability and short,
    self-contained paragraphs matter more here than anywhere else.
    """

    WEIGHTS = {
        "quotability": 0.25,
        "entity_density": 0.20,
        "factual_density": 0.20,
        "answer_structure": 0.15,
        "freshness": 0.10,
        "extractability": 0.10,
    }

    @property
    def platform(self) -> Platform:
        return Platform.CHATGPT

    def analyze(self, content: ContentInput, features: StructuralFeatures) -> PlatformScore:
        structure = dataclasses.replace(
            features.content_structure,
            heading_hierarchy=rate_heading_count(content.headings, good=4, fair=2),
            paragraph_structure=rate_paragraph_length(
                features.paragraph_word_counts, good=(40, 120), fair=(30, 180)
            ),
        )
        avg_paragraph_words = features.avg_paragraph_words

        factors = [
            f.quotability_factor(
                avg_paragraph_words,
                structure.has_key_takeaways,
                len(features.quotable_snippets),
                self.WEIGHTS["quotability"],
            ),
            f.entity_density_factor(
                len(features.entities), features.word_count, self.WEIGHTS["entity_density"]
            ),
            self._factual_density_factor(content, structure),
            f.answer_structure_factor(structure, self.WEIGHTS["answer_structure"]),
            f.freshness_factor(
                content.published_at, content.last_modified, self.WEIGHTS["freshness"]
            ),
            self._extractability_factor(content, structure),
        ]

        extras = []
        if avg_paragraph_words > LONG_PARAGRAPH_WORDS:
            extras.append(
                Recommendation(
                    priority=Priority.HIGH,
                    title="Break up long paragraphs",
                    description=(
                        "ChatGPT quotes content directly. Paragraphs over 200 words are "
                        "rarely quoted. Aim for 50-150 word paragraphs."
                    ),
                    impact_estimate="+15-20 points",
                    auto_fixable=True,
                    action_code="split_paragraphs",
                )
            )
        if not structure.has_key_takeaways:
            extras.append(
                Recommendation(
                    priority=Priority.MEDIUM,
                    title="Add Key Takeaways section",
                    description=(
                        "A 'Key Takeaways' or 'TL;DR' section at the top provides "
                        "perfect quote material for ChatGPT."
                    ),
                    impact_estimate="+10-15 points",
                    auto_fixable=True,
                    action_code="add_key_takeaways",
                )
            )

        result = f.platform_score(self.platform, factors, extras)
        logger.debug(f"ChatGPT score for {content.url}: {result.score}")
        return result

    def _factual_density_factor(
        self, content: ContentInput, structure: ContentStructure
    ) -> ScoreFactor:
        score = 0
        if structure.has_statistics:
            score += 30
        if structure.has_expert_attribution:
            score += 25
        if structure.has_definitions:
            score += 20

        # Dates and durations
        claims = len(SPECIFIC_CLAIM_PATTERN.findall(content.raw_text))
        score += min(25, claims * 5)

        return f.additive_factor(
            "Factual Density",
            score,
            self.WEIGHTS["factual_density"],
            "Statistics, citations, and verifiable claims that ChatGPT can reference",
        )

    def _extractability_factor(
        self, content: ContentInput, structure: ContentStructure
    ) -> ScoreFactor:
        score = 0

        if structure.heading_hierarchy == Rating.GOOD:
            score += 25
        elif structure.heading_hierarchy == Rating.FAIR:
            score += 15

        if structure.paragraph_structure == Rating.GOOD:
            score += 25
        elif structure.paragraph_structure == Rating.FAIR:
            score += 15

        text = content.raw_text
        if "•" in text or "- " in text or LIST_PATTERN.search(text):
            score += 20
        if structure.has_key_takeaways:
            score += 20
        if structure.has_faq_section:
            score += 10

        return f.additive_factor(
            "LLM Extractability",
            score,
            self.WEIGHTS["extractability"],
            "How easily ChatGPT can extract and quote information",
        )
