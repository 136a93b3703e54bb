"""Citation checking against external AI and search APIs."""

from citations.base import (
    CitationCheckResult,
    CitationSource,
    CitationSourceError,
    find_mentions,
    merge_results,
)
from citations.checker import HybridCitationChecker
from citations.sources import (
    GeminiGroundingSource,
    GoogleCustomSearchSource,
    OpenAIChatSource,
    PerplexitySource,
)

__all__ = [
    "CitationCheckResult",
    "CitationSource",
    "CitationSourceError",
    "find_mentions",
    "merge_results",
    "HybridCitationChecker",
    "GeminiGroundingSource",
    "GoogleCustomSearchSource",
    "OpenAIChatSource",
    "PerplexitySource",
]
