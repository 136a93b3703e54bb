"""Repository pattern for database operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from analyzers.base import Priority
from db.models import AnalysisRun, AnalysisStatus, Recommendation


class AnalysisRunRepository:
    """Handles all AnalysisRun-related database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, url: str, request_payload: dict | None = None) -> AnalysisRun:
        """Create a pending analysis run."""
        run = AnalysisRun(
            url=url,
            status=AnalysisStatus.PENDING,
            request_payload=request_payload or {},
        )
        self.session.add(run)
        await self.session.flush()  # Assigns the ID without committing
        return run

    async def get_by_id(self, analysis_id: uuid.UUID) -> AnalysisRun | None:
        result = await self.session.execute(
            select(AnalysisRun).where(AnalysisRun.id == analysis_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int = 20) -> list[AnalysisRun]:
        """Get the most recent analysis runs."""
        result = await self.session.execute(
            select(AnalysisRun).order_by(AnalysisRun.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())


class RecommendationRepository:
    """Handles Recommendation database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_analysis(
        self,
        analysis_id: uuid.UUID,
        priority: Priority | None = None,
    ) -> list[Recommendation]:
        """Recommendations in report order, optionally filtered by priority."""
        query = select(Recommendation).where(Recommendation.analysis_id == analysis_id)
        if priority:
            query = query.where(Recommendation.priority == priority)
        query = query.order_by(Recommendation.position)
        result = await self.session.execute(query)
        return list(result.scalars().all())
