"""Tests for fetching and parsing pages into ContentInput."""

from datetime import datetime, timezone

import httpx
import pytest

from analyzers.content import Heading
from analyzers.page import PageFetchError, fetch_page, load_content, parse_page

PAGE = """<!doctype html>
<html><head>
<title> GEO Guide </title>
<meta name="description" content="How to get cited by AI answer engines.">
<meta property="article:published_time" content="2025-01-10T08:00:00Z">
<meta property="article:modified_time" content="2025-03-01T12:30:00+00:00">
<script type="application/ld+json">{"@type": "Article", "headline": "GEO Guide"}</script>
<script type="application/ld+json">[{"@type": "FAQPage"}, "ignored"]</script>
<script type="application/ld+json">{not json</script>
<style>body { color: red; }</style>
</head>
<body>
<nav><a href="/">Home</a></nav>
<h1>What is GEO?</h1>
<p>GEO is the practice of optimizing content for AI answers.</p>
<h2>Steps</h2>
<ul><li><p>Lead with the answer.</p></li><li>Cite   your sources.</li></ul>
<footer>Copyright</footer>
</body></html>"""


def test_parse_page_metadata():
    content = parse_page("https://example.com/geo", PAGE)

    assert content.url == "https://example.com/geo"
    assert content.title == "GEO Guide"
    assert content.meta_description == "How to get cited by AI answer engines."
    assert content.published_at == datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc)
    assert content.last_modified == datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)
    assert content.raw_html == PAGE


def test_parse_page_schema_blocks_skip_malformed():
    content = parse_page("https://example.com/geo", PAGE)

    types = [block["@type"] for block in content.existing_schema_blocks]
    assert types == ["Article", "FAQPage"]


def test_parse_page_text_and_headings():
    content = parse_page("https://example.com/geo", PAGE)

    assert content.headings == (Heading(1, "What is GEO?"), Heading(2, "Steps"))
    assert content.raw_text.split("\n\n") == [
        "What is GEO?",
        "GEO is the practice of optimizing content for AI answers.",
        "Steps",
        "Lead with the answer.",
        "Cite your sources.",
    ]
    assert "Copyright" not in content.raw_text
    assert "Home" not in content.raw_text


def test_parse_page_falls_back_to_time_tag():
    html = '<html><body><time datetime="2024-12-24">Dec 24</time><p>Hello there.</p></body></html>'
    content = parse_page("https://example.com", html)

    assert content.published_at == datetime(2024, 12, 24)
    assert content.last_modified is None


def test_fetch_page_returns_body():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=PAGE)))
    assert fetch_page("https://example.com/geo", client) == PAGE


def test_fetch_page_error_status():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    with pytest.raises(PageFetchError):
        fetch_page("https://example.com/missing", client)


def test_fetch_page_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with pytest.raises(PageFetchError):
        fetch_page("https://example.com", client)


def test_load_content():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=PAGE)))
    content = load_content("https://example.com/geo", client)

    assert content.title == "GEO Guide"
    assert content.headings[0].level == 1
