"""Score aggregation and the visibility engine."""

from scoring.aggregator import DEFAULT_PLATFORM_WEIGHTS, combine, resolve_weights
from scoring.engine import (
    AnalysisOptions,
    MissingElement,
    ScoreBreakdown,
    VisibilityEngine,
    VisibilityReport,
    run_visibility_analysis,
)

__all__ = [
    "DEFAULT_PLATFORM_WEIGHTS",
    "combine",
    "resolve_weights",
    "AnalysisOptions",
    "MissingElement",
    "ScoreBreakdown",
    "VisibilityEngine",
    "VisibilityReport",
    "run_visibility_analysis",
]
