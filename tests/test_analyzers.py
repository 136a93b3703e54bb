"""Tests for the platform analyzers."""

import pytest

from analyzers.base import Confidence, Platform
from analyzers.bing_copilot import BingCopilotAnalyzer
from analyzers.chatgpt import ChatGPTAnalyzer
from analyzers.claude import ClaudeAnalyzer
from analyzers.content import ContentInput
from analyzers.extractor import extract
from analyzers.factors import CONTENT_FRESHNESS
from analyzers.gemini import GeminiAnalyzer, detect_media
from analyzers.google_aio import GoogleAIOAnalyzer
from analyzers.perplexity import PerplexityAnalyzer

ALL_ANALYZERS = [
    GoogleAIOAnalyzer,
    ChatGPTAnalyzer,
    PerplexityAnalyzer,
    BingCopilotAnalyzer,
    ClaudeAnalyzer,
    GeminiAnalyzer,
]


def titles(score):
    return [r.title for r in score.recommendations]


def analyze(analyzer_cls, content):
    return analyzer_cls().analyze(content, extract(content))


@pytest.mark.parametrize("analyzer_cls", ALL_ANALYZERS)
def test_scores_are_bounded(analyzer_cls, rich_content, sparse_content, empty_content):
    for content in (rich_content, sparse_content, empty_content):
        result = analyze(analyzer_cls, content)

        assert 0 <= result.score <= 100
        assert result.heuristic_score == result.score
        assert result.confidence == Confidence.LOW
        assert not result.is_real_check
        assert all(0 <= factor.score <= 100 for factor in result.factors)


@pytest.mark.parametrize("analyzer_cls", ALL_ANALYZERS)
def test_missing_dates_give_neutral_freshness(analyzer_cls, sparse_content):
    result = analyze(analyzer_cls, sparse_content)

    freshness = [f for f in result.factors if f.name == CONTENT_FRESHNESS]
    assert len(freshness) == 1
    assert freshness[0].score == 50


@pytest.mark.parametrize("analyzer_cls", ALL_ANALYZERS)
def test_structured_content_beats_sparse_content(analyzer_cls, rich_content, sparse_content):
    assert analyze(analyzer_cls, rich_content).score > analyze(analyzer_cls, sparse_content).score


@pytest.mark.parametrize("analyzer_cls", ALL_ANALYZERS)
def test_recommendation_titles_are_unique(analyzer_cls, sparse_content):
    result = analyze(analyzer_cls, sparse_content)
    lowered = [t.lower() for t in titles(result)]
    assert len(lowered) == len(set(lowered))


def test_platforms_are_distinct():
    platforms = [cls().platform for cls in ALL_ANALYZERS]
    assert platforms == list(Platform)


def test_factor_weights_match_declared_weights():
    result = analyze(GoogleAIOAnalyzer, ContentInput(url="https://a.com", title="", raw_text=""))
    assert sorted(f.weight for f in result.factors) == sorted(GoogleAIOAnalyzer.WEIGHTS.values())

    assert GoogleAIOAnalyzer.WEIGHTS["answer_structure"] == 0.25
    assert ChatGPTAnalyzer.WEIGHTS["quotability"] == 0.25
    assert ClaudeAnalyzer.WEIGHTS["semantic_clarity"] == 0.25


def test_google_recommends_faq_schema_for_unmarked_faq():
    content = ContentInput(
        url="https://example.com/faq",
        title="FAQ",
        raw_text="Frequently asked questions about our product and its pricing plans.",
    )
    assert "Add FAQ Schema markup" in titles(analyze(GoogleAIOAnalyzer, content))

    marked = ContentInput(
        url=content.url,
        title=content.title,
        raw_text=content.raw_text,
        existing_schema_blocks=({"@type": "FAQPage"},),
    )
    assert "Add FAQ Schema markup" not in titles(analyze(GoogleAIOAnalyzer, marked))


def test_chatgpt_flags_long_paragraphs():
    long_paragraph = " ".join(["word"] * 250)
    content = ContentInput(url="https://example.com", title="t", raw_text=long_paragraph)

    result = analyze(ChatGPTAnalyzer, content)

    assert "Break up long paragraphs" in titles(result)
    assert "Add Key Takeaways section" in titles(result)


def test_perplexity_asks_for_sources_and_original_data(sparse_content):
    result = analyze(PerplexityAnalyzer, sparse_content)

    assert "Add more authoritative sources" in titles(result)
    assert "Include original data or research" in titles(result)


def test_bing_rewards_schema(rich_content, sparse_content):
    rich = analyze(BingCopilotAnalyzer, rich_content)
    sparse = analyze(BingCopilotAnalyzer, sparse_content)

    assert "Add structured data markup" in titles(sparse)
    rich_schema = next(f for f in rich.factors if f.name == "Schema & Structured Data")
    sparse_schema = next(f for f in sparse.factors if f.name == "Schema & Structured Data")
    assert rich_schema.score > sparse_schema.score


def test_claude_flags_ambiguous_pronouns():
    text = (
        "It works well. This helps a lot. They like it. That is true. "
        "These are fine. Those are too."
    )
    content = ContentInput(url="https://example.com", title="t", raw_text=text)

    result = analyze(ClaudeAnalyzer, content)

    assert "Reduce ambiguous pronouns" in titles(result)
    assert "Add context in introduction" in titles(result)


def test_claude_accepts_context_intro(rich_content):
    result = analyze(ClaudeAnalyzer, rich_content)
    assert "Add context in introduction" not in titles(result)


def test_detect_media():
    html = (
        '<img src="a.png" alt="Chart of AI answer share by engine">'
        '<img src="b.png">'
        '<iframe src="https://www.youtube.com/embed/abc123"></iframe>'
    )
    media = detect_media(html)

    assert media.image_count == 2
    assert media.has_alt_text
    assert media.has_descriptive_alts
    assert media.has_video
    assert media.has_youtube

    assert not detect_media("").has_images
    assert not detect_media("<p>No media here</p>").has_video


def test_gemini_rewards_multimodal_content(rich_content):
    media = (
        '<img src="a.png" alt="Chart of AI answer share by engine">'
        '<video src="demo.mp4"></video>'
        '<iframe src="https://www.youtube.com/embed/abc123"></iframe>'
    )
    media_html = rich_content.raw_html.replace("</body>", media + "</body>")
    with_media = ContentInput(
        url=rich_content.url,
        title=rich_content.title,
        raw_text=rich_content.raw_text,
        raw_html=media_html,
        headings=rich_content.headings,
    )

    plain = analyze(GeminiAnalyzer, rich_content)
    rich = analyze(GeminiAnalyzer, with_media)

    plain_media = next(f for f in plain.factors if f.name == "Multimodal Content")
    rich_media = next(f for f in rich.factors if f.name == "Multimodal Content")
    assert plain_media.score == 0
    # 25 + 5 for one image, 10 + 10 for alt text, 20 video, 20 YouTube
    assert rich_media.score == 90
    assert plain_media.weight == 0.20

    ecosystem = next(f for f in rich.factors if f.name == "Google Ecosystem")
    # Base 50, YouTube 20, schema.org 15
    assert ecosystem.score == 85

    assert "Add quality images" in titles(plain)
    assert "Consider adding video content" in titles(plain)
    assert "Add quality images" not in titles(rich)
    assert "Consider adding video content" not in titles(rich)


def test_gemini_weights():
    assert GeminiAnalyzer.WEIGHTS["multimodal"] == 0.20
    assert GeminiAnalyzer.WEIGHTS["freshness"] == 0.15
    assert sum(GeminiAnalyzer.WEIGHTS.values()) == pytest.approx(1.0)
