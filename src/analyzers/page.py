"""Fetch a page and turn its HTML into a ContentInput."""

import json
import logging
from datetime import datetime

import httpx
from bs4 import BeautifulSoup

from analyzers.content import ContentInput, Heading
from config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; BeaconBot/1.0; +https://example.com/bot)"

BLOCK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "blockquote", "pre", "td", "th"]
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg", "nav", "footer"]


class PageFetchError(Exception):
    """Raised when a page cannot be fetched for analysis."""


def fetch_page(url: str, client: httpx.Client | None = None) -> str:
    """
    Fetch page HTML.

    Args:
        url: Page URL
        client: Optional pre-configured client (tests pass one with a mock transport)

    Returns:
        Response body as text

    Raises:
        PageFetchError: On transport errors or non-2xx responses
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=settings.http_timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    try:
        response = client.get(url)
        response.raise_for_status()
        return response.text
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch {url}: {e}")
        raise PageFetchError(f"Could not fetch {url}: {e}") from e
    finally:
        if owns_client:
            client.close()


def parse_page(url: str, html: str) -> ContentInput:
    """Parse HTML into a ContentInput."""
    soup = BeautifulSoup(html, "lxml")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    meta_desc = soup.find("meta", attrs={"name": "description"})
    meta_description = meta_desc.get("content") if meta_desc else None

    schema_blocks = _json_ld_blocks(soup)
    published_at = _meta_datetime(soup, "article:published_time") or _first_time_tag(soup)
    last_modified = _meta_datetime(soup, "article:modified_time")

    # Text extraction mutates the tree, so it runs last
    headings, raw_text = _extract_text(soup)

    return ContentInput(
        url=url,
        title=title,
        raw_text=raw_text,
        raw_html=html,
        meta_description=meta_description,
        headings=headings,
        published_at=published_at,
        last_modified=last_modified,
        existing_schema_blocks=tuple(schema_blocks),
    )


def load_content(url: str, client: httpx.Client | None = None) -> ContentInput:
    """Fetch and parse a page in one step."""
    logger.info(f"Fetching page for analysis: {url}")
    return parse_page(url, fetch_page(url, client))


def _extract_text(soup: BeautifulSoup) -> tuple[tuple[Heading, ...], str]:
    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()

    root = soup.body or soup
    headings = []
    blocks = []

    for element in root.find_all(BLOCK_TAGS):
        # Nested blocks (li > p) are collected through their innermost element
        if element.find(BLOCK_TAGS):
            continue
        text = " ".join(element.get_text(" ", strip=True).split())
        if not text:
            continue
        if element.name in HEADING_TAGS:
            headings.append(Heading(level=int(element.name[1]), text=text))
        blocks.append(text)

    return tuple(headings), "\n\n".join(blocks)


def _json_ld_blocks(soup: BeautifulSoup) -> list[dict]:
    blocks = []
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except json.JSONDecodeError:
            logger.debug("Skipping malformed JSON-LD block")
            continue
        if isinstance(data, list):
            blocks.extend(d for d in data if isinstance(d, dict))
        elif isinstance(data, dict):
            blocks.append(data)
    return blocks


def _meta_datetime(soup: BeautifulSoup, prop: str) -> datetime | None:
    tag = soup.find("meta", attrs={"property": prop})
    return _parse_datetime(tag.get("content")) if tag else None


def _first_time_tag(soup: BeautifulSoup) -> datetime | None:
    tag = soup.find("time", attrs={"datetime": True})
    return _parse_datetime(tag.get("datetime")) if tag else None


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
