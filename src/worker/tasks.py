"""Celery tasks for running stored visibility analyses."""

import uuid
from datetime import datetime, timezone

from celery.utils.log import get_task_logger
from sqlalchemy.orm import Session

from api.schemas import AnalysisRequest, VisibilityReportResponse
from db.models import AnalysisRun, AnalysisStatus, PlatformResult, Recommendation
from db.session import get_sync_session_factory
from scoring.engine import VisibilityEngine, VisibilityReport
from worker.celery_app import celery_app

logger = get_task_logger(__name__)


def get_sync_session() -> Session:
    """Get a synchronous database session for Celery tasks."""
    return get_sync_session_factory()()


@celery_app.task(bind=True, name="worker.tasks.run_visibility_analysis")
def run_visibility_analysis(self, analysis_id: str) -> dict:
    """
    Run the engine for a queued analysis and store the report.

    The ContentInput is rebuilt from the stored request payload, fetching
    the page when no text was submitted.
    """
    analysis_uuid = uuid.UUID(analysis_id)
    logger.info(f"Starting visibility analysis {analysis_id}")

    with get_sync_session() as session:
        run = session.get(AnalysisRun, analysis_uuid)
        if not run:
            logger.error(f"Analysis {analysis_id} not found")
            return {"error": f"Analysis {analysis_id} not found"}

        payload = dict(run.request_payload or {})
        run.status = AnalysisStatus.RUNNING
        run.started_at = datetime.now(timezone.utc)
        session.commit()

    try:
        request = AnalysisRequest.model_validate(payload)
        content = request.to_content_input()
        engine = VisibilityEngine.from_settings()
        report = engine.analyze(content, request.to_options())

        _save_report(analysis_uuid, report)
        logger.info(f"Analysis {analysis_id} completed: score={report.combined_score}")

        return {
            "analysis_id": analysis_id,
            "status": "completed",
            "combined_score": report.combined_score,
        }

    except Exception as e:
        logger.exception(f"Analysis {analysis_id} failed: {e}")

        with get_sync_session() as session:
            run = session.get(AnalysisRun, analysis_uuid)
            run.status = AnalysisStatus.FAILED
            run.error_message = str(e)
            run.completed_at = datetime.now(timezone.utc)
            session.commit()

        return {
            "analysis_id": analysis_id,
            "status": "failed",
            "error": str(e),
        }


def serialize_report(report: VisibilityReport) -> dict:
    """JSON-safe dict of the full report."""
    return VisibilityReportResponse.model_validate(report).model_dump(mode="json")


def _save_report(analysis_uuid: uuid.UUID, report: VisibilityReport) -> None:
    """Store per-platform rows, ordered recommendations and the report JSON."""
    data = serialize_report(report)

    with get_sync_session() as session:
        run = session.get(AnalysisRun, analysis_uuid)

        for score, stored in zip(report.per_platform, data["per_platform"]):
            session.add(
                PlatformResult(
                    analysis_id=analysis_uuid,
                    platform=score.platform,
                    score=score.score,
                    heuristic_score=score.heuristic_score,
                    is_real_check=score.is_real_check,
                    confidence=score.confidence,
                    factors=stored["factors"],
                    citation=stored["citation"],
                )
            )

        for position, rec in enumerate(report.recommendations):
            session.add(
                Recommendation(
                    analysis_id=analysis_uuid,
                    position=position,
                    priority=rec.priority,
                    title=rec.title,
                    description=rec.description,
                    impact_estimate=rec.impact_estimate,
                    auto_fixable=rec.auto_fixable,
                    action_code=rec.action_code,
                )
            )

        run.combined_score = report.combined_score
        run.report = data
        run.status = AnalysisStatus.COMPLETED
        run.completed_at = datetime.now(timezone.utc)
        session.commit()
