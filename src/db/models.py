"""SQLAlchemy database models for Beacon Visibility."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from analyzers.base import Confidence, Platform, Priority


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AnalysisStatus(str, enum.Enum):
    """Status of an analysis job."""

    PENDING = "pending"      # Queued, not yet started
    RUNNING = "running"      # Worker picked it up
    COMPLETED = "completed"  # Report stored
    FAILED = "failed"        # Fetch or analysis error


class AnalysisRun(Base):
    """
    A single visibility analysis of one page.

    Holds the original request so the worker can rebuild the ContentInput,
    the combined score, and the full serialized report. Per-platform
    results and recommendations are stored in their own tables for
    filtering.
    """

    __tablename__ = "analysis_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    url: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)

    status: Mapped[AnalysisStatus] = mapped_column(
        Enum(AnalysisStatus),
        default=AnalysisStatus.PENDING,
        nullable=False,
        index=True,
    )

    # ContentInput fields plus options, as submitted
    request_payload: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    combined_score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Serialized VisibilityReport (features, breakdown, missing elements)
    report: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    platform_results: Mapped[list["PlatformResult"]] = relationship(
        back_populates="analysis",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    recommendations: Mapped[list["Recommendation"]] = relationship(
        back_populates="analysis",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Recommendation.position",
    )


class PlatformResult(Base):
    """Score for one platform within an analysis run."""

    __tablename__ = "platform_results"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    analysis_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("analysis_runs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    platform: Mapped[Platform] = mapped_column(Enum(Platform), nullable=False)

    # Score used for aggregation (citation score when is_real_check)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    heuristic_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_real_check: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    confidence: Mapped[Confidence] = mapped_column(Enum(Confidence), nullable=False)

    # [{"name", "score", "weight", "description"}, ...]
    factors: Mapped[list | None] = mapped_column(JSONB, nullable=True)

    # Citation check details when a real check ran
    citation: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    analysis: Mapped["AnalysisRun"] = relationship(back_populates="platform_results")


class Recommendation(Base):
    """
    A deduplicated, prioritized recommendation for an analysis run.

    `position` preserves the report order (priority, then first appearance).
    """

    __tablename__ = "recommendations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    analysis_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("analysis_runs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    priority: Mapped[Priority] = mapped_column(Enum(Priority), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    impact_estimate: Mapped[str] = mapped_column(String(64), nullable=False)
    auto_fixable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    action_code: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    analysis: Mapped["AnalysisRun"] = relationship(back_populates="recommendations")
