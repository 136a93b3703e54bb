"""Tests for recommendation templates, deduplication and ordering."""

import pytest

from analyzers.base import Priority, Recommendation, ScoreFactor
from recommendations import (
    RecommendationEngine,
    build_recommendations,
    deduplicate_recommendations,
)
from recommendations.rules import (
    ALL_TEMPLATES,
    priority_for_score,
    recommendation_for_factor,
    template_for_factor,
)


def rec(title: str, priority: Priority, description: str = "") -> Recommendation:
    return Recommendation(
        priority=priority,
        title=title,
        description=description,
        impact_estimate="+10 points",
    )


@pytest.mark.parametrize(
    "score, expected",
    [
        (0, Priority.CRITICAL),
        (39, Priority.CRITICAL),
        (40, Priority.HIGH),
        (59, Priority.HIGH),
        (60, Priority.MEDIUM),
        (74, Priority.MEDIUM),
        (75, None),
        (100, None),
    ],
)
def test_priority_thresholds(score, expected):
    assert priority_for_score(score) == expected


def test_known_factor_uses_template():
    recommendation = recommendation_for_factor(ScoreFactor("Entity Density", 20, 0.15, ""))

    assert recommendation.priority == Priority.CRITICAL
    assert recommendation.title == "Add more named entities"
    assert recommendation.auto_fixable
    assert recommendation.action_code == "inject_entities"


def test_healthy_factor_has_no_recommendation():
    assert recommendation_for_factor(ScoreFactor("Quotability", 80, 0.2, "")) is None


def test_unknown_factor_falls_back_to_generic_copy():
    factor = ScoreFactor("Mystery Signal", 50, 0.1, "Something measured")
    template = template_for_factor(factor)

    assert template.title == "Improve mystery signal"
    assert template.description == "Something measured"
    assert template.impact_estimate == "+5-10 points"

    recommendation = recommendation_for_factor(factor)
    assert recommendation.priority == Priority.HIGH
    assert not recommendation.auto_fixable


def test_template_factor_names_are_unique():
    names = [t.factor for t in ALL_TEMPLATES]
    assert len(names) == len(set(names))


def test_dedup_keeps_highest_priority_at_first_position():
    recommendations = [
        rec("Add FAQ Schema markup", Priority.MEDIUM, "first"),
        rec("Add structured data", Priority.HIGH),
        rec("add faq schema markup", Priority.HIGH, "second"),
    ]

    result = deduplicate_recommendations(recommendations)

    assert [r.title.lower() for r in result] == [
        "add faq schema markup",
        "add structured data",
    ]
    assert result[0].priority == Priority.HIGH
    assert result[0].description == "second"


def test_dedup_keeps_first_on_equal_priority():
    result = deduplicate_recommendations(
        [rec("Same", Priority.HIGH, "a"), rec("same", Priority.HIGH, "b")]
    )
    assert len(result) == 1
    assert result[0].description == "a"


def test_prioritize_sorts_stably():
    result = RecommendationEngine().prioritize(
        [
            rec("low one", Priority.LOW),
            rec("high one", Priority.HIGH),
            rec("critical", Priority.CRITICAL),
            rec("high two", Priority.HIGH),
        ]
    )
    assert [r.title for r in result] == ["critical", "high one", "high two", "low one"]


def test_build_recommendations_across_platforms():
    per_platform = [
        [ScoreFactor("Schema Markup", 0, 0.2, ""), ScoreFactor("Quotability", 90, 0.2, "")],
        [ScoreFactor("Schema Markup", 50, 0.2, ""), ScoreFactor("Entity Density", 65, 0.1, "")],
    ]

    result = build_recommendations(per_platform)

    assert [(r.title, r.priority) for r in result] == [
        ("Add structured data", Priority.CRITICAL),
        ("Add more named entities", Priority.MEDIUM),
    ]
