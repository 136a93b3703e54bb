"""Claude-style search analyzer."""

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
    Entity,
    Heading,
    Rating,
    StructuralFeatures,
)
from analyzers.extractor import (
    count_occurrences,
    first_paragraph,
    has_direct_answer,
    split_paragraphs,
)
from analyzers import factors as f

logger = logging.getLogger(__name__)

AMBIGUOUS_PRONOUN_PATTERN = re.compile(
    r"(?:^|[.!?]\s+)\s*(?:It|They|This|That|These|Those)\s+", re.MULTILINE
)
CAPITALIZED_REFERENCE_PATTERN = re.compile(r"[A-Z][a-z]+(?:'s)?")

CONTEXT_INTRO_MARKERS = ("is a", "refers to", "this guide", "in this article")
TRANSITION_WORDS = (
    "therefore",
    "however",
    "consequently",
    "furthermore",
    "additionally",
    "in contrast",
    "as a result",
    "because",
)
CAUSE_EFFECT_MARKERS = (
    "because",
    "therefore",
    "as a result",
    "consequently",
    "leads to",
    "causes",
    "results in",
)
DEFINITION_PATTERNS = (
    "is defined as",
    "refers to",
    "means that",
    "is a type of",
    "is known as",
    "can be described as",
)
CONCLUSION_MARKERS = ("conclusion", "summary")

# Entities whose context score reflects a defining phrase ("X is", "X, which")
EXPLAINED_CONTEXT_SCORE = 80

MAX_AMBIGUOUS_PRONOUNS = 3


class ClaudeAnalyzer(BaseAnalyzer):
    """
    Scores content for Claude-style answer extraction.

    Favors explicit, self-contained writing: named subjects instead of
    leading pronouns, an introduction that sets context, and transitions
    that make the argument easy to follow.
    """

    WEIGHTS = {
        "semantic_clarity": 0.25,
        "context_completeness": 0.20,
        "logical_structure": 0.20,
        "entity_relationships": 0.15,
        "answer_structure": 0.10,
        "definitions": 0.10,
        "freshness": 0.10,
    }

    @property
    def platform(self) -> Platform:
        return Platform.CLAUDE

    def analyze(self, content: ContentInput, features: StructuralFeatures) -> PlatformScore:
        text = content.raw_text
        lowered = features.lowered_text
        structure = dataclasses.replace(
            features.content_structure,
            has_direct_answer=has_direct_answer(text, 100, 400),
            heading_hierarchy=self._rate_headings(content.headings),
            paragraph_structure=self._rate_transitions(text, lowered),
        )

        ambiguous_pronouns = len(AMBIGUOUS_PRONOUN_PATTERN.findall(text))
        opening = first_paragraph(text)
        has_context_intro = any(m in opening for m in CONTEXT_INTRO_MARKERS)

        factors = [
            self._semantic_clarity_factor(text, lowered, ambiguous_pronouns, has_context_intro),
            self._context_factor(content, structure),
            self._logical_structure_factor(structure),
            self._entity_relationship_factor(features.entities),
            f.answer_structure_factor(structure, self.WEIGHTS["answer_structure"]),
            self._definition_factor(lowered, features.entities),
            f.freshness_factor(
                content.published_at, content.last_modified, self.WEIGHTS["freshness"]
            ),
        ]

        extras = []
        if ambiguous_pronouns > MAX_AMBIGUOUS_PRONOUNS:
            extras.append(
                Recommendation(
                    priority=Priority.MEDIUM,
                    title="Reduce ambiguous pronouns",
                    description=(
                        "Replace 'it', 'they', 'this' with explicit references. Claude "
                        "extracts better when entities are named directly."
                    ),
                    impact_estimate="+5-10 points",
                    auto_fixable=True,
                    action_code="clarify_pronouns",
                )
            )
        if not has_context_intro:
            extras.append(
                Recommendation(
                    priority=Priority.HIGH,
                    title="Add context in introduction",
                    description=(
                        "Define the topic and scope in the first paragraph. Claude needs "
                        "context to accurately extract information."
                    ),
                    impact_estimate="+10-15 points",
                    auto_fixable=True,
                    action_code="add_context_intro",
                )
            )

        result = f.platform_score(self.platform, factors, extras)
        logger.debug(f"Claude score for {content.url}: {result.score}")
        return result

    def _rate_headings(self, headings: tuple[Heading, ...]) -> Rating:
        """Good needs at least four headings that never skip a level."""
        logical = True
        last_level = 0
        for heading in headings:
            if heading.level > last_level + 1:
                logical = False
                break
            last_level = heading.level

        if logical and len(headings) >= 4:
            return Rating.GOOD
        if len(headings) >= 2:
            return Rating.FAIR
        return Rating.POOR

    def _rate_transitions(self, text: str, lowered: str) -> Rating:
        if not split_paragraphs(text):
            return Rating.POOR

        transitions = count_occurrences(lowered, TRANSITION_WORDS)
        if transitions >= 5:
            return Rating.GOOD
        if transitions >= 2:
            return Rating.FAIR
        return Rating.POOR

    def _semantic_clarity_factor(
        self, text: str, lowered: str, ambiguous_pronouns: int, has_context_intro: bool
    ) -> ScoreFactor:
        score = 70 - ambiguous_pronouns * 5
        if has_context_intro:
            score += 15

        explicit_references = len(CAPITALIZED_REFERENCE_PATTERN.findall(text))
        score += min(10, explicit_references / 10)
        score += min(10, count_occurrences(lowered, CAUSE_EFFECT_MARKERS) * 2)

        return f.additive_factor(
            "Semantic Clarity",
            score,
            self.WEIGHTS["semantic_clarity"],
            "Clear, unambiguous language that Claude can extract accurately",
        )

    def _context_factor(self, content: ContentInput, structure: ContentStructure) -> ScoreFactor:
        score = 0

        if content.meta_description and len(content.meta_description) >= 50:
            score += 20
        if structure.has_definitions:
            score += 25
        if structure.has_expert_attribution:
            score += 20
        if len(first_paragraph(content.raw_text)) >= 100:
            score += 20

        paragraphs = split_paragraphs(content.raw_text)
        closing = paragraphs[-1].lower() if paragraphs else ""
        if any(m in closing for m in CONCLUSION_MARKERS):
            score += 15

        return f.additive_factor(
            "Context Completeness",
            score,
            self.WEIGHTS["context_completeness"],
            "Complete context for understanding without external references",
        )

    def _logical_structure_factor(self, structure: ContentStructure) -> ScoreFactor:
        score = 0

        if structure.heading_hierarchy == Rating.GOOD:
            score += 35
        elif structure.heading_hierarchy == Rating.FAIR:
            score += 20

        if structure.paragraph_structure == Rating.GOOD:
            score += 30
        elif structure.paragraph_structure == Rating.FAIR:
            score += 15

        if structure.has_step_by_step:
            score += 20
        if structure.has_faq_section:
            score += 15

        return f.additive_factor(
            "Logical Structure",
            score,
            self.WEIGHTS["logical_structure"],
            "Clear logical flow with proper hierarchy and transitions",
        )

    def _entity_relationship_factor(self, entities: tuple[Entity, ...]) -> ScoreFactor:
        score = min(30, len(entities) * 3)

        repeated = sum(1 for e in entities if e.mention_count > 1)
        score += min(30, repeated * 6)

        explained = sum(
            1 for e in entities[:10] if e.context_quality_score >= EXPLAINED_CONTEXT_SCORE
        )
        score += min(40, explained * 10)

        return f.additive_factor(
            "Entity Relationships",
            score,
            self.WEIGHTS["entity_relationships"],
            "Named entities with clear relationships and context",
        )

    def _definition_factor(self, lowered: str, entities: tuple[Entity, ...]) -> ScoreFactor:
        score = min(50, count_occurrences(lowered, DEFINITION_PATTERNS) * 12)

        defined = sum(1 for e in entities[:5] if f"{e.name.lower()} is" in lowered)
        score += defined * 10

        return f.additive_factor(
            "Definition Presence",
            score,
            self.WEIGHTS["definitions"],
            "Key terms and entities are defined before use",
        )
