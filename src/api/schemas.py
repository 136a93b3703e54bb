"""Pydantic schemas for API request/response validation."""

import dataclasses
import uuid
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from analyzers.base import Confidence, Platform, Priority
from analyzers.content import ContentInput, EntityType, Heading, Rating, SnippetKind
from analyzers.page import load_content
from db.models import AnalysisStatus
from scoring.engine import AnalysisOptions


# =============================================================================
# Request Schemas (what clients send to us)
# =============================================================================


class HeadingSchema(BaseModel):
    level: int = Field(..., ge=1, le=6)
    text: str


class AnalysisRequest(BaseModel):
    """
    Request body for an analysis.

    Only `url` is required. When `raw_text` is omitted the page is fetched
    and parsed; any other fields supplied here override the parsed values.
    """

    url: HttpUrl = Field(
        ...,
        description="The URL of the page to analyze",
        examples=["https://example.com/guide"],
    )
    title: str | None = None
    raw_text: str | None = Field(
        default=None,
        description="Page text with paragraphs separated by blank lines",
    )
    raw_html: str | None = None
    meta_description: str | None = None
    headings: list[HeadingSchema] | None = None
    published_at: datetime | None = None
    last_modified: datetime | None = None
    word_count: int | None = Field(default=None, ge=0)
    existing_schema_blocks: list[dict] | None = None

    keywords: list[str] = Field(
        default=[],
        max_length=20,
        description="Keywords used to build citation-check queries",
        examples=[["ai visibility", "generative engine optimization"]],
    )
    platforms: list[str] | None = Field(
        default=None,
        description="Platforms to score; unknown names are ignored",
        examples=[["google_aio", "chatgpt", "perplexity"]],
    )
    weights: dict[str, float] | None = Field(
        default=None,
        description="Per-platform weight overrides",
        examples=[{"bing_copilot": 0.15}],
    )

    @property
    def needs_fetch(self) -> bool:
        return self.raw_text is None

    def to_content_input(
        self, fetch: Callable[[str], ContentInput] | None = None
    ) -> ContentInput:
        """
        Build the ContentInput, fetching the page first if no text was sent.

        Raises:
            PageFetchError: If the page is needed but cannot be fetched
        """
        url = str(self.url)
        supplied = {
            "title": self.title,
            "raw_text": self.raw_text,
            "raw_html": self.raw_html,
            "meta_description": self.meta_description,
            "headings": (
                tuple(Heading(level=h.level, text=h.text) for h in self.headings)
                if self.headings is not None
                else None
            ),
            "published_at": self.published_at,
            "last_modified": self.last_modified,
            "word_count": self.word_count,
            "existing_schema_blocks": (
                tuple(self.existing_schema_blocks)
                if self.existing_schema_blocks is not None
                else None
            ),
        }
        overrides = {k: v for k, v in supplied.items() if v is not None}

        if self.needs_fetch:
            fetched = (fetch or load_content)(url)
            return dataclasses.replace(fetched, **overrides)

        overrides.setdefault("title", "")
        return ContentInput(url=url, **overrides)

    def to_options(self) -> AnalysisOptions:
        return AnalysisOptions(
            platforms=tuple(self.platforms) if self.platforms is not None else None,
            weights=self.weights,
            keywords=tuple(self.keywords),
        )


# =============================================================================
# Report Schemas (engine output, read from dataclasses)
# =============================================================================


class ReportModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ScoreFactorResponse(ReportModel):
    name: str
    score: int
    weight: float
    description: str


class RecommendationItem(ReportModel):
    priority: Priority
    title: str
    description: str
    impact_estimate: str
    auto_fixable: bool
    action_code: str | None


class CitationResponse(ReportModel):
    platform: Platform
    is_cited: bool
    matching_citation_urls: list[str]
    confidence: Confidence
    queries_tested: int
    queries_with_citation: int
    score: int


class PlatformScoreResponse(ReportModel):
    platform: Platform
    score: int
    heuristic_score: int | None
    is_real_check: bool
    confidence: Confidence
    factors: list[ScoreFactorResponse]
    recommendations: list[RecommendationItem]
    citation: CitationResponse | None


class EntityResponse(ReportModel):
    name: str
    type: EntityType
    mention_count: int
    context_quality_score: int


class QuotableSnippetResponse(ReportModel):
    text: str
    kind: SnippetKind
    char_offset: int
    quotability_score: int


class ContentStructureResponse(ReportModel):
    has_direct_answer: bool
    has_key_takeaways: bool
    has_faq_section: bool
    has_how_to_section: bool
    has_step_by_step: bool
    has_expert_attribution: bool
    has_statistics: bool
    has_definitions: bool
    heading_hierarchy: Rating
    paragraph_structure: Rating


class SchemaPresenceResponse(ReportModel):
    has_json_ld: bool
    article: bool
    faq_page: bool
    how_to: bool
    product: bool
    organization: bool
    person: bool
    breadcrumb_list: bool
    open_graph: bool
    twitter_card: bool
    types_found: list[str]


class StructuralFeaturesResponse(ReportModel):
    entities: list[EntityResponse]
    quotable_snippets: list[QuotableSnippetResponse]
    content_structure: ContentStructureResponse
    schema_presence: SchemaPresenceResponse
    word_count: int
    entity_density: float
    quotability_score: int
    external_link_count: int
    has_credentials: bool


class ScoreBreakdownResponse(ReportModel):
    entity_density: int
    quotability: int
    answer_structure: int
    schema_presence: int
    freshness: int
    authority: int


class MissingElementResponse(ReportModel):
    element: str
    importance: Priority
    description: str
    suggestion: str


class VisibilityReportResponse(ReportModel):
    """Full engine output for one page."""

    url: str
    combined_score: int
    per_platform: list[PlatformScoreResponse]
    structural_features: StructuralFeaturesResponse
    recommendations: list[RecommendationItem]
    breakdown: ScoreBreakdownResponse
    missing_elements: list[MissingElementResponse]
    analyzed_at: datetime
    analysis_duration_ms: int


# =============================================================================
# Stored Analysis Schemas (what we send back to clients)
# =============================================================================


class PlatformResultResponse(BaseModel):
    """Response schema for a stored platform result."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    platform: Platform
    score: int
    heuristic_score: int | None
    is_real_check: bool
    confidence: Confidence
    factors: list | None
    citation: dict | None


class StoredRecommendationResponse(BaseModel):
    """Response schema for a single stored recommendation."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    position: int
    priority: Priority
    title: str
    description: str
    impact_estimate: str
    auto_fixable: bool
    action_code: str | None


class AnalysisResponse(BaseModel):
    """Response schema for an analysis run (without nested results)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    url: str
    status: AnalysisStatus
    combined_score: int | None
    error_message: str | None
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None


class AnalysisDetailResponse(AnalysisResponse):
    """Response schema for an analysis run with full details."""

    platform_results: list[PlatformResultResponse] = []
    recommendations: list[StoredRecommendationResponse] = []
    report: dict | None = None


class AnalysisCreatedResponse(BaseModel):
    """Response when an analysis is successfully queued."""

    id: uuid.UUID
    url: str
    status: AnalysisStatus
    message: str = "Analysis queued successfully"


# =============================================================================
# List Response Wrappers
# =============================================================================


class AnalysisListResponse(BaseModel):
    """Response for listing multiple analyses."""

    analyses: list[AnalysisResponse]
    count: int


class RecommendationListResponse(BaseModel):
    """Response for listing recommendations."""

    recommendations: list[StoredRecommendationResponse]
    count: int


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = "healthy"
    service: str = "beacon-visibility"
    version: str = "0.1.0"
    citation_platforms: list[str] = []
