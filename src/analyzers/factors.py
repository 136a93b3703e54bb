"""
Shared factor-scoring primitives.

Factor functions return a ScoreFactor. Platform analyzers pick the factors
they care about and override the weight; thresholds that differ per
platform are parameters rather than copies.
"""

from datetime import datetime, timezone

from analyzers.base import (
    Platform,
    PlatformScore,
    Recommendation,
    ScoreFactor,
    compose_score,
    round_score,
)
from analyzers.content import ContentStructure, Rating, SchemaPresence
from recommendations.engine import deduplicate_recommendations
from recommendations.rules import recommendation_for_factor

ENTITY_DENSITY = "Entity Density"
QUOTABILITY = "Quotability"
ANSWER_STRUCTURE = "Answer Structure"
SCHEMA_MARKUP = "Schema Markup"
CONTENT_FRESHNESS = "Content Freshness"
AUTHORITY_SIGNALS = "Authority Signals"

NEUTRAL_FRESHNESS = 50

# Points per structure signal; analyzers may pass their own table
DEFAULT_ANSWER_POINTS = {
    "direct_answer": 25,
    "key_takeaways": 15,
    "faq": 15,
    "how_to": 0,
    "step_by_step": 10,
    "statistics": 10,
    "definitions": 10,
    "heading_good": 10,
    "heading_fair": 5,
    "paragraph_good": 5,
    "paragraph_fair": 0,
}


def entity_density_score(entity_count: int, word_count: int) -> int:
    """
    Band-shaped curve: 100 for 5-15 entities per 1000 words, degrading
    on both sides.
    """
    density = entity_count / max(word_count, 1) * 1000

    if 5 <= density <= 15:
        score = 100.0
    elif 3 <= density < 5:
        score = 70 + (density - 3) * 15
    elif 15 < density <= 20:
        score = 100 - (density - 15) * 10
    elif density < 3:
        score = density * 23.3
    else:
        score = 50 - (density - 20) * 5

    return round_score(score)


def entity_density_factor(
    entity_count: int, word_count: int, weight: float = 0.15
) -> ScoreFactor:
    density = entity_count / max(word_count, 1) * 1000
    return ScoreFactor(
        name=ENTITY_DENSITY,
        score=entity_density_score(entity_count, word_count),
        weight=weight,
        description=(
            f"{entity_count} named entities in {word_count} words "
            f"({density:.1f}/1k words)"
        ),
    )


def quotability_factor(
    avg_paragraph_words: float,
    has_key_takeaways: bool,
    quotable_snippet_count: int,
    weight: float = 0.20,
    short_paragraph_points: int = 30,
    long_paragraph_points: int = 25,
) -> ScoreFactor:
    """Paragraph sweet spot is 50-150 words."""
    if 50 <= avg_paragraph_words <= 150:
        score = 40
    elif 30 <= avg_paragraph_words < 50:
        score = short_paragraph_points
    elif 150 < avg_paragraph_words <= 200:
        score = long_paragraph_points
    else:
        score = 15

    if has_key_takeaways:
        score += 20
    score += min(40, quotable_snippet_count * 8)

    return ScoreFactor(
        name=QUOTABILITY,
        score=round_score(score),
        weight=weight,
        description="Content structured for easy AI extraction and quoting",
    )


def answer_structure_score(
    structure: ContentStructure, points: dict[str, int] | None = None
) -> int:
    points = points or DEFAULT_ANSWER_POINTS
    score = 0

    if structure.has_direct_answer:
        score += points["direct_answer"]
    if structure.has_key_takeaways:
        score += points["key_takeaways"]
    if structure.has_faq_section:
        score += points["faq"]
    if structure.has_how_to_section:
        score += points["how_to"]
    if structure.has_step_by_step:
        score += points["step_by_step"]
    if structure.has_statistics:
        score += points["statistics"]
    if structure.has_definitions:
        score += points["definitions"]

    if structure.heading_hierarchy == Rating.GOOD:
        score += points["heading_good"]
    elif structure.heading_hierarchy == Rating.FAIR:
        score += points["heading_fair"]

    if structure.paragraph_structure == Rating.GOOD:
        score += points["paragraph_good"]
    elif structure.paragraph_structure == Rating.FAIR:
        score += points["paragraph_fair"]

    return round_score(score)


def answer_structure_factor(
    structure: ContentStructure,
    weight: float = 0.20,
    points: dict[str, int] | None = None,
) -> ScoreFactor:
    return ScoreFactor(
        name=ANSWER_STRUCTURE,
        score=answer_structure_score(structure, points),
        weight=weight,
        description="Content organized to directly answer user queries",
    )


def schema_score(
    schema: SchemaPresence,
    article_points: int = 25,
    faq_points: int = 35,
    how_to_points: int = 25,
    other_points: int = 15,
) -> int:
    score = 0
    if schema.article:
        score += article_points
    if schema.faq_page:
        score += faq_points
    if schema.how_to:
        score += how_to_points
    if schema.other:
        score += other_points
    return round_score(score)


def schema_factor(schema: SchemaPresence, weight: float = 0.15, **points) -> ScoreFactor:
    return ScoreFactor(
        name=SCHEMA_MARKUP,
        score=schema_score(schema, **points),
        weight=weight,
        description="Structured data helps AI understand and cite content",
    )


def days_since(reference: datetime, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - reference).days


def freshness_score(
    published_at: datetime | None,
    last_modified: datetime | None,
    now: datetime | None = None,
) -> int:
    """Step function of days since the last update; unknown dates are neutral."""
    reference = last_modified or published_at
    if reference is None:
        return NEUTRAL_FRESHNESS

    days = days_since(reference, now)
    if days <= 30:
        return 100
    if days <= 90:
        return 90
    if days <= 180:
        return 75
    if days <= 365:
        return 60
    if days <= 730:
        return 40
    return 25


def freshness_factor(
    published_at: datetime | None,
    last_modified: datetime | None,
    weight: float = 0.10,
    now: datetime | None = None,
) -> ScoreFactor:
    reference = last_modified or published_at
    if reference is None:
        description = "No publish/update date detected"
    else:
        description = f"Last updated {days_since(reference, now)} days ago"

    return ScoreFactor(
        name=CONTENT_FRESHNESS,
        score=freshness_score(published_at, last_modified, now),
        weight=weight,
        description=description,
    )


def authority_score(
    has_expert_attribution: bool,
    has_credentials: bool,
    has_source_links: bool,
    external_link_count: int,
) -> int:
    score = 0
    if has_expert_attribution:
        score += 35
    if has_credentials:
        score += 25
    if has_source_links:
        score += 20
    score += min(20, external_link_count * 4)
    return round_score(score)


def authority_factor(
    has_expert_attribution: bool,
    has_credentials: bool,
    has_source_links: bool,
    external_link_count: int,
    weight: float = 0.10,
) -> ScoreFactor:
    return ScoreFactor(
        name=AUTHORITY_SIGNALS,
        score=authority_score(
            has_expert_attribution, has_credentials, has_source_links, external_link_count
        ),
        weight=weight,
        description="Expert attribution, credentials, and source citations",
    )


def additive_factor(name: str, score: float, weight: float, description: str) -> ScoreFactor:
    """Build a platform-specific factor from an additive point total."""
    return ScoreFactor(name=name, score=round_score(score), weight=weight, description=description)


def platform_score(
    platform: Platform,
    factors: list[ScoreFactor],
    extra_recommendations: list[Recommendation] | None = None,
) -> PlatformScore:
    """
    Compose factors into a PlatformScore.

    Platform-specific recommendations are listed ahead of factor templates
    so they win ties after the priority sort.
    """
    recommendations = list(extra_recommendations or [])
    recommendations.extend(
        rec for rec in map(recommendation_for_factor, factors) if rec is not None
    )
    score = compose_score(factors)
    return PlatformScore(
        platform=platform,
        score=score,
        factors=tuple(factors),
        recommendations=tuple(deduplicate_recommendations(recommendations)),
        heuristic_score=score,
    )
