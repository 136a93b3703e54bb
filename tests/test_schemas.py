"""Tests for request conversion and report serialization."""

import json
from datetime import datetime, timezone

from analyzers.content import ContentInput, Heading
from api.schemas import AnalysisRequest, VisibilityReportResponse
from scoring.engine import VisibilityEngine
from worker.tasks import serialize_report


def test_request_with_text_builds_content_without_fetching():
    request = AnalysisRequest(
        url="https://example.com/guide",
        raw_text="Some text here.",
        headings=[{"level": 2, "text": "Intro"}],
        published_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        existing_schema_blocks=[{"@type": "Article"}],
    )

    def fetch(url):
        raise AssertionError("should not fetch")

    content = request.to_content_input(fetch)

    assert content.url == "https://example.com/guide"
    assert content.title == ""
    assert content.headings == (Heading(2, "Intro"),)
    assert content.existing_schema_blocks == ({"@type": "Article"},)
    assert content.published_at.year == 2025


def test_request_without_text_fetches_and_applies_overrides():
    fetched = ContentInput(
        url="https://example.com/guide",
        title="Fetched title",
        raw_text="Fetched text.",
        meta_description="Fetched description",
    )
    request = AnalysisRequest(url="https://example.com/guide", title="Caller title")

    content = request.to_content_input(lambda url: fetched)

    assert content.title == "Caller title"
    assert content.raw_text == "Fetched text."
    assert content.meta_description == "Fetched description"


def test_request_options():
    request = AnalysisRequest(
        url="https://example.com",
        raw_text="x",
        keywords=["geo", "aio"],
        platforms=["chatgpt"],
        weights={"chatgpt": 0.5},
    )
    options = request.to_options()

    assert options.keywords == ("geo", "aio")
    assert options.platforms == ("chatgpt",)
    assert options.weights == {"chatgpt": 0.5}
    assert AnalysisRequest(url="https://example.com").to_options().platforms is None


def test_report_serializes_to_json(rich_content):
    report = VisibilityEngine().analyze(rich_content)

    data = serialize_report(report)

    json.dumps(data)
    assert data["combined_score"] == report.combined_score
    assert len(data["per_platform"]) == len(report.per_platform)
    assert data["per_platform"][0]["platform"] == "google_aio"
    assert data["structural_features"]["word_count"] == report.structural_features.word_count
    assert VisibilityReportResponse.model_validate(data).combined_score == report.combined_score
