"""Beacon analyzers package.

Platform analyzer modules are imported directly (``analyzers.google_aio``
etc.) because they depend on the recommendations package, which in turn
depends on the types exported here.
"""

from analyzers.base import (
    BaseAnalyzer,
    Confidence,
    Platform,
    PlatformScore,
    Priority,
    Recommendation,
    ScoreFactor,
    compose_score,
    round_score,
)
from analyzers.content import ContentInput, Heading, StructuralFeatures
from analyzers.extractor import extract
from analyzers.urls import domain_matches, normalize_domain

__all__ = [
    "BaseAnalyzer",
    "Confidence",
    "Platform",
    "PlatformScore",
    "Priority",
    "Recommendation",
    "ScoreFactor",
    "compose_score",
    "round_score",
    "ContentInput",
    "Heading",
    "StructuralFeatures",
    "extract",
    "domain_matches",
    "normalize_domain",
]
