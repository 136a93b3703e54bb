"""Worker task tests with the sync session replaced by an in-memory fake."""

import uuid
from types import SimpleNamespace

import pytest

import api.schemas
import worker.tasks as tasks
from analyzers.page import PageFetchError
from db.models import AnalysisStatus, PlatformResult, Recommendation
from scoring.engine import VisibilityEngine


class FakeSyncSession:
    """Shares one store across sessions, like separate sessions on one database."""

    def __init__(self, store):
        self.store = store

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def get(self, model, key):
        return self.store["runs"].get(key)

    def add(self, obj):
        self.store["added"].append(obj)

    def commit(self):
        self.store["commits"] += 1


@pytest.fixture
def store(monkeypatch):
    store = {"runs": {}, "added": [], "commits": 0}
    monkeypatch.setattr(tasks, "get_sync_session", lambda: FakeSyncSession(store))
    monkeypatch.setattr(VisibilityEngine, "from_settings", classmethod(lambda cls: cls()))
    return store


def queue_run(store, payload):
    run = SimpleNamespace(
        id=uuid.uuid4(),
        request_payload=payload,
        status=AnalysisStatus.PENDING,
        started_at=None,
        completed_at=None,
        error_message=None,
        combined_score=None,
        report=None,
    )
    store["runs"][run.id] = run
    return run


def test_completed_analysis_stores_results(store, rich_content):
    run = queue_run(
        store,
        {"url": rich_content.url, "title": rich_content.title, "raw_text": rich_content.raw_text},
    )

    result = tasks.run_visibility_analysis.run(str(run.id))

    assert result["status"] == "completed"
    assert run.status == AnalysisStatus.COMPLETED
    assert run.started_at is not None
    assert run.completed_at is not None
    assert run.combined_score == result["combined_score"]
    assert run.report["combined_score"] == run.combined_score

    platform_rows = [o for o in store["added"] if isinstance(o, PlatformResult)]
    rec_rows = [o for o in store["added"] if isinstance(o, Recommendation)]
    assert len(platform_rows) == len(run.report["per_platform"])
    assert [r.position for r in rec_rows] == list(range(len(rec_rows)))


def test_fetch_failure_marks_run_failed(store, monkeypatch):
    def refuse(url):
        raise PageFetchError(f"Could not fetch {url}")

    monkeypatch.setattr(api.schemas, "load_content", refuse)
    run = queue_run(store, {"url": "https://example.com/missing"})

    result = tasks.run_visibility_analysis.run(str(run.id))

    assert result["status"] == "failed"
    assert run.status == AnalysisStatus.FAILED
    assert "Could not fetch" in run.error_message
    assert run.completed_at is not None
    assert store["added"] == []


def test_unknown_analysis_is_reported(store):
    result = tasks.run_visibility_analysis.run(str(uuid.uuid4()))

    assert "not found" in result["error"]
    assert store["commits"] == 0
