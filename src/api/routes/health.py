"""Health check endpoint."""

from fastapi import APIRouter, Depends

from api.routes.analyses import get_engine
from api.schemas import HealthResponse
from scoring.engine import VisibilityEngine

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check that the service is up and which citation checks are configured.",
)
async def health_check(
    engine: VisibilityEngine = Depends(get_engine),
) -> HealthResponse:
    citation_platforms = []
    if engine.citation_checker is not None:
        citation_platforms = [p.value for p in engine.citation_checker.sources_by_platform()]
    return HealthResponse(citation_platforms=citation_platforms)
