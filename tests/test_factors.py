"""Tests for shared factor scoring."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from analyzers import factors as f
from analyzers.base import (
    Platform,
    Priority,
    Recommendation,
    ScoreFactor,
    compose_score,
    round_score,
)
from analyzers.content import ContentStructure, Rating, SchemaPresence

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "entities, words, expected",
    [
        (10, 1000, 100),
        (5, 1000, 100),
        (15, 1000, 100),
        (4, 1000, 85),
        (2, 1000, 47),
        (0, 1000, 0),
        (18, 1000, 70),
        (30, 1000, 0),
    ],
)
def test_entity_density_curve(entities, words, expected):
    assert f.entity_density_score(entities, words) == expected


def test_entity_density_handles_zero_words():
    assert 0 <= f.entity_density_score(0, 0) <= 100


@pytest.mark.parametrize(
    "age_days, expected",
    [(10, 100), (60, 90), (120, 75), (300, 60), (500, 40), (1000, 25)],
)
def test_freshness_steps(age_days, expected):
    assert f.freshness_score(NOW - timedelta(days=age_days), None, now=NOW) == expected


def test_freshness_prefers_last_modified():
    published = NOW - timedelta(days=1000)
    modified = NOW - timedelta(days=5)
    assert f.freshness_score(published, modified, now=NOW) == 100


def test_freshness_is_neutral_without_dates():
    factor = f.freshness_factor(None, None)
    assert factor.score == f.NEUTRAL_FRESHNESS == 50
    assert factor.description == "No publish/update date detected"


def test_freshness_accepts_naive_datetimes():
    naive = datetime(2025, 5, 1)
    assert f.freshness_score(naive, None, now=NOW) == 90


def test_compose_score_normalizes_weights():
    factors = [
        ScoreFactor("a", 100, 2.0, ""),
        ScoreFactor("b", 40, 2.0, ""),
    ]
    assert compose_score(factors) == 70


def test_compose_score_rounds_half_up():
    factors = [ScoreFactor("a", 50, 1.0, ""), ScoreFactor("b", 51, 1.0, "")]
    assert compose_score(factors) == 51


def test_compose_score_zero_weight():
    assert compose_score([ScoreFactor("a", 90, 0.0, "")]) == 0
    assert compose_score([]) == 0


def test_round_score_clamps():
    assert round_score(150) == 100
    assert round_score(-3) == 0
    assert round_score(math.nan) == 0
    assert round_score(2.5) == 3


def test_authority_score():
    assert f.authority_score(True, True, True, 10) == 100
    assert f.authority_score(False, False, False, 0) == 0
    assert f.authority_score(True, False, True, 2) == 63


def test_schema_score_points():
    assert f.schema_score(SchemaPresence(faq_page=True)) == 35
    assert f.schema_score(SchemaPresence(article=True, organization=True)) == 40
    assert f.schema_score(SchemaPresence()) == 0


def test_answer_structure_score():
    assert f.answer_structure_score(ContentStructure()) == 0

    structure = ContentStructure(
        has_direct_answer=True,
        has_faq_section=True,
        heading_hierarchy=Rating.GOOD,
        paragraph_structure=Rating.FAIR,
    )
    assert f.answer_structure_score(structure) == 50


def test_quotability_factor():
    factor = f.quotability_factor(100, True, 3)
    assert factor.name == f.QUOTABILITY
    assert factor.score == 84

    assert f.quotability_factor(400, False, 0).score == 15
    assert f.quotability_factor(100, True, 10).score == 100


def test_platform_score_lists_extras_first():
    factors = [
        ScoreFactor(f.ENTITY_DENSITY, 20, 0.5, ""),
        ScoreFactor(f.CONTENT_FRESHNESS, 100, 0.5, ""),
    ]
    extra = Recommendation(
        priority=Priority.CRITICAL,
        title="Fix the intro",
        description="",
        impact_estimate="+5 points",
    )

    result = f.platform_score(Platform.CHATGPT, factors, [extra])

    assert result.platform == Platform.CHATGPT
    assert result.score == 60
    assert result.heuristic_score == 60
    assert not result.is_real_check
    assert [r.title for r in result.recommendations] == [
        "Fix the intro",
        "Add more named entities",
    ]
