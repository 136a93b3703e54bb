"""Base analyzer interface and shared result types."""

import enum
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from analyzers.content import ContentInput, StructuralFeatures
    from citations.base import CitationCheckResult


class Platform(str, enum.Enum):
    """AI search surfaces the engine scores against."""

    GOOGLE_AIO = "google_aio"      # Google AI Overviews
    CHATGPT = "chatgpt"            # ChatGPT / SearchGPT
    PERPLEXITY = "perplexity"      # Perplexity AI
    BING_COPILOT = "bing_copilot"  # Bing Copilot
    CLAUDE = "claude"              # Claude-style search
    GEMINI = "gemini"              # Google Gemini


PLATFORM_LABELS = {
    Platform.GOOGLE_AIO: "Google AI Overviews",
    Platform.CHATGPT: "ChatGPT / SearchGPT",
    Platform.PERPLEXITY: "Perplexity AI",
    Platform.BING_COPILOT: "Bing Copilot",
    Platform.CLAUDE: "Claude",
    Platform.GEMINI: "Google Gemini",
}


class Priority(str, enum.Enum):
    """Recommendation priority, most urgent first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class Confidence(str, enum.Enum):
    """How much a platform score can be trusted."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ScoreFactor:
    """A single weighted input to a platform score."""

    name: str
    score: int  # 0-100
    weight: float  # Relative, normalized by total weight
    description: str


@dataclass(frozen=True)
class Recommendation:
    """An actionable improvement suggestion."""

    priority: Priority
    title: str
    description: str
    impact_estimate: str  # e.g. "+10-15 points"
    auto_fixable: bool = False
    action_code: str | None = None


@dataclass(frozen=True)
class PlatformScore:
    """
    Result of scoring one platform.

    `score` is the value used for aggregation. When a real citation check
    replaced the heuristic estimate, `is_real_check` is set and
    `heuristic_score` still holds what the analyzer computed.
    """

    platform: Platform
    score: int  # 0-100
    factors: tuple[ScoreFactor, ...]
    recommendations: tuple[Recommendation, ...]
    heuristic_score: int | None = None
    is_real_check: bool = False
    confidence: Confidence = Confidence.LOW
    citation: "CitationCheckResult | None" = field(default=None)


def round_score(value: float) -> int:
    """Round half-up and clamp to the 0-100 score range."""
    if math.isnan(value):
        return 0
    return max(0, min(100, math.floor(value + 0.5)))


def compose_score(factors: list[ScoreFactor] | tuple[ScoreFactor, ...]) -> int:
    """
    Weighted mean of factor scores.

    Weights are normalized by their total, so an analyzer may add or drop
    factors without rebalancing the others.
    """
    total_weight = sum(f.weight for f in factors)
    if total_weight <= 0:
        return 0
    weighted_sum = sum(f.score * f.weight for f in factors)
    return round_score(weighted_sum / total_weight)


class BaseAnalyzer(ABC):
    """Contract implemented once per platform. Analyzers hold no state."""

    @property
    @abstractmethod
    def platform(self) -> Platform:
        """Return the platform this analyzer scores."""
        pass

    @property
    def name(self) -> str:
        return PLATFORM_LABELS[self.platform]

    @abstractmethod
    def analyze(
        self, content: "ContentInput", features: "StructuralFeatures"
    ) -> PlatformScore:
        """
        Score content for this platform.

        Args:
            content: The page being analyzed
            features: Structural features extracted once for the page

        Returns:
            PlatformScore with factors and recommendations
        """
        pass
