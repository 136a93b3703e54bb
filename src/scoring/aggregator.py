"""Combine per-platform scores into one visibility score."""

import logging
from collections.abc import Iterable, Mapping

from analyzers.base import Platform, round_score

logger = logging.getLogger(__name__)

# Bing Copilot, Claude and Gemini are scored but carry no default weight
DEFAULT_PLATFORM_WEIGHTS: dict[Platform, float] = {
    Platform.GOOGLE_AIO: 0.45,
    Platform.CHATGPT: 0.35,
    Platform.PERPLEXITY: 0.20,
    Platform.BING_COPILOT: 0.0,
    Platform.CLAUDE: 0.0,
    Platform.GEMINI: 0.0,
}


def resolve_weights(overrides: Mapping[str, float] | None = None) -> dict[str, float]:
    """Default weights with caller overrides applied on top."""
    weights: dict[str, float] = dict(DEFAULT_PLATFORM_WEIGHTS)
    for platform, weight in (overrides or {}).items():
        weights[platform] = weight
    return weights


def combine(
    scores: Mapping[str, float],
    weights: Mapping[str, float] | None = None,
    subset: Iterable[str] | None = None,
) -> int:
    """
    Weighted average of platform scores.

    Args:
        scores: Score per platform; missing platforms count as 0
        weights: Weight per platform, used as given (defaults when omitted)
        subset: Platforms to include; defaults to every weighted platform

    Returns:
        Integer 0-100; 0 when the included weights sum to 0
    """
    weights = DEFAULT_PLATFORM_WEIGHTS if weights is None else weights
    if subset is None:
        included = list(weights)
    else:
        included = [p for p in dict.fromkeys(subset) if p in weights]

    total_weight = sum(max(0.0, weights[p] or 0.0) for p in included)
    if total_weight <= 0:
        return 0

    weighted = sum(
        (scores.get(p) or 0) * max(0.0, weights[p] or 0.0) for p in included
    )
    return round_score(weighted / total_weight)
