# tests/conftest.py
"""
Shared fixtures.

* `src/` is put on sys.path so the flat packages import as in production.
* Content fixtures cover a well-structured article and a near-empty page.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_PATH = os.path.join(PROJECT_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

import pytest

from analyzers.content import ContentInput, Heading
from analyzers.extractor import extract


RICH_TEXT = """Generative engine optimization is a discipline that refers to structuring web content so that AI answer engines can find, understand and cite it. According to a 2024 study, 58% of searches now end with an AI-generated answer.

Key takeaways: lead with the answer, cite primary sources and keep pages fresh. Research from Stanford University shows that pages with clearly named entities are cited more often by answer engines.

Step 1: Lead with a direct answer in the opening paragraph. Step 2: Add FAQ schema to question sections. Step 3: Link to primary sources such as Google Search Central.

Frequently asked questions

What is an AI Overview? An AI Overview is a generated summary that Google shows above the organic results for many informational queries.

Dr. Jane Smith, a professor of information science with 15 years of experience, explains that citations depend on clarity. Therefore structure matters. However freshness matters too. As a result teams update content every quarter because stale pages lose citations.

In conclusion, content that answers directly and cites its sources earns more AI citations."""

RICH_HTML = """<html><head>
<title>What is generative engine optimization?</title>
<meta property="og:title" content="Generative engine optimization">
<meta name="twitter:card" content="summary">
<script type="application/ld+json">{"@context": "https://schema.org", "@type": "Article"}</script>
<script type="application/ld+json">{"@context": "https://schema.org", "@type": "FAQPage"}</script>
</head><body>
<a href="https://developers.google.com/search">Google Search Central</a>
<a href="https://www.stanford.edu/research">Stanford</a>
<a href="https://arxiv.org/abs/2311.09735">GEO paper</a>
<a href="https://example.com/about">About us</a>
<table><tr><td>Signal</td><td>Weight</td></tr></table>
</body></html>"""

RICH_HEADINGS = (
    Heading(1, "What is generative engine optimization?"),
    Heading(2, "Key takeaways"),
    Heading(2, "How to optimize for AI answers"),
    Heading(3, "Step by step"),
    Heading(2, "Frequently asked questions"),
)


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def rich_content(now):
    return ContentInput(
        url="https://www.example.com/guide",
        title="What is generative engine optimization?",
        raw_text=RICH_TEXT,
        raw_html=RICH_HTML,
        meta_description="A practical guide to getting your pages cited by AI answer engines.",
        headings=RICH_HEADINGS,
        published_at=now - timedelta(days=200),
        last_modified=now - timedelta(days=10),
    )


@pytest.fixture
def sparse_content():
    return ContentInput(
        url="https://example.com/note",
        title="Note",
        raw_text="short note about stuff",
    )


@pytest.fixture
def empty_content():
    return ContentInput(url="https://example.com/empty", title="", raw_text="")


@pytest.fixture
def rich_features(rich_content):
    return extract(rich_content)


@pytest.fixture
def sparse_features(sparse_content):
    return extract(sparse_content)
