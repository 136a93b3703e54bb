"""Analysis API endpoints."""

import uuid
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from analyzers.base import Priority
from analyzers.page import PageFetchError
from api.schemas import (
    AnalysisCreatedResponse,
    AnalysisDetailResponse,
    AnalysisListResponse,
    AnalysisRequest,
    RecommendationListResponse,
    VisibilityReportResponse,
)
from db.repositories import AnalysisRunRepository, RecommendationRepository
from db.session import get_db_session
from scoring.engine import VisibilityEngine

from worker.tasks import run_visibility_analysis

router = APIRouter(prefix="/analyses", tags=["Analyses"])


@lru_cache
def get_engine() -> VisibilityEngine:
    """Engine shared across requests; citation sources come from settings."""
    return VisibilityEngine.from_settings()


@router.post(
    "/preview",
    response_model=VisibilityReportResponse,
    summary="Analyze a page now",
    description="Run the analysis inline and return the full report without storing it.",
)
def preview_analysis(
    request: AnalysisRequest,
    engine: VisibilityEngine = Depends(get_engine),
) -> VisibilityReportResponse:
    """
    Synchronous analysis.

    Declared as a plain function so FastAPI runs it in its threadpool;
    the engine blocks on analyzers and citation queries.
    """
    try:
        content = request.to_content_input()
    except PageFetchError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    report = engine.analyze(content, request.to_options())
    return VisibilityReportResponse.model_validate(report)


@router.post(
    "",
    response_model=AnalysisCreatedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue an analysis",
    description="Queue a visibility analysis. Returns immediately with the analysis ID.",
)
async def create_analysis(
    request: AnalysisRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AnalysisCreatedResponse:
    """
    Create an analysis job.

    The worker rebuilds the request from the stored payload. Poll
    GET /analyses/{id} for status.
    """
    repo = AnalysisRunRepository(db)
    run = await repo.create(
        url=str(request.url),
        request_payload=request.model_dump(mode="json"),
    )
    await db.commit()

    run_visibility_analysis.delay(str(run.id))

    return AnalysisCreatedResponse(
        id=run.id,
        url=run.url,
        status=run.status,
    )


@router.get(
    "",
    response_model=AnalysisListResponse,
    summary="List recent analyses",
    description="Get a list of recent analyses, newest first.",
)
async def list_analyses(
    limit: int = 20,
    db: AsyncSession = Depends(get_db_session),
) -> AnalysisListResponse:
    repo = AnalysisRunRepository(db)
    runs = await repo.list_recent(limit=limit)
    return AnalysisListResponse(
        analyses=runs,
        count=len(runs),
    )


@router.get(
    "/{analysis_id}",
    response_model=AnalysisDetailResponse,
    summary="Get analysis details",
    description="Get an analysis with per-platform results, recommendations and the stored report.",
)
async def get_analysis(
    analysis_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> AnalysisDetailResponse:
    repo = AnalysisRunRepository(db)
    run = await repo.get_by_id(analysis_id)

    if not run:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analysis {analysis_id} not found",
        )

    return AnalysisDetailResponse.model_validate(run)


@router.get(
    "/{analysis_id}/recommendations",
    response_model=RecommendationListResponse,
    summary="Get analysis recommendations",
    description="Get recommendations for an analysis, optionally filtered by priority.",
)
async def get_analysis_recommendations(
    analysis_id: uuid.UUID,
    priority: str | None = None,
    db: AsyncSession = Depends(get_db_session),
) -> RecommendationListResponse:
    run_repo = AnalysisRunRepository(db)
    run = await run_repo.get_by_id(analysis_id)
    if not run:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analysis {analysis_id} not found",
        )

    priority_enum = None
    if priority:
        try:
            priority_enum = Priority(priority.lower())
        except ValueError:
            valid = ", ".join(p.value for p in Priority)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid priority: {priority}. Must be one of: {valid}",
            )

    rec_repo = RecommendationRepository(db)
    recommendations = await rec_repo.get_by_analysis(analysis_id, priority=priority_enum)

    return RecommendationListResponse(
        recommendations=recommendations,
        count=len(recommendations),
    )
