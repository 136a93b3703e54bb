"""Recommendations package."""

from recommendations.engine import (
    RecommendationEngine,
    build_recommendations,
    deduplicate_recommendations,
)
from recommendations.rules import (
    ALL_TEMPLATES,
    RecommendationTemplate,
    priority_for_score,
    recommendation_for_factor,
)

__all__ = [
    "RecommendationEngine",
    "build_recommendations",
    "deduplicate_recommendations",
    "ALL_TEMPLATES",
    "RecommendationTemplate",
    "priority_for_score",
    "recommendation_for_factor",
]
