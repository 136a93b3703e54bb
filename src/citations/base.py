"""Citation source contract and shared result type."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx
from pydantic import BaseModel, ValidationError

from analyzers.base import Confidence, Platform, round_score
from analyzers.urls import domain_matches
from config import settings

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"https?://[^\s<>()\[\]\"']+", re.IGNORECASE)
HOST_PATTERN = re.compile(r"\b(?:[a-z0-9-]+\.)+[a-z]{2,}\b", re.IGNORECASE)


class CitationSourceError(Exception):
    """Raised when a citation source cannot produce a result."""


@dataclass(frozen=True)
class CitationCheckResult:
    """
    Outcome of one or more citation queries against a single platform.

    A source's `query()` returns a single-query result; the checker merges
    those into one result per platform.
    """

    platform: Platform
    is_cited: bool
    matching_citation_urls: tuple[str, ...]
    confidence: Confidence
    queries_tested: int
    queries_with_citation: int

    @property
    def score(self) -> int:
        """Share of queries that cited the domain, 0-100."""
        if self.queries_tested <= 0:
            return 0
        return round_score(100 * self.queries_with_citation / self.queries_tested)


def confidence_for(cited_queries: int) -> Confidence:
    if cited_queries > 2:
        return Confidence.HIGH
    if cited_queries > 0:
        return Confidence.MEDIUM
    return Confidence.LOW


def merge_results(platform: Platform, results: list[CitationCheckResult]) -> CitationCheckResult:
    """Combine per-query results into one platform result."""
    cited = sum(1 for r in results if r.is_cited)

    urls: list[str] = []
    for result in results:
        for url in result.matching_citation_urls:
            if url not in urls:
                urls.append(url)

    return CitationCheckResult(
        platform=platform,
        is_cited=cited > 0,
        matching_citation_urls=tuple(urls),
        confidence=confidence_for(cited),
        queries_tested=len(results),
        queries_with_citation=cited,
    )


def find_mentions(text: str, domain: str) -> list[str]:
    """URLs or bare hostnames in free text that belong to `domain`."""
    mentions = []
    for match in URL_PATTERN.finditer(text):
        url = match.group(0).rstrip(".,;:")
        if domain_matches(url, domain) and url not in mentions:
            mentions.append(url)
    for match in HOST_PATTERN.finditer(text):
        host = match.group(0)
        if domain_matches(host, domain) and not any(host in m for m in mentions):
            mentions.append(host)
    return mentions


class CitationSource(ABC):
    """
    An external API that can tell whether an answer cites a domain.

    Subclasses set `platform` and the query templates, and implement
    `is_configured()` and `query()`. Transport and schema failures surface
    as CitationSourceError.
    """

    platform: Platform
    query_template = "What is {keyword}?"
    fallback_template = "What is {domain}?"

    def __init__(self, client: httpx.Client | None = None, timeout: float | None = None):
        self._client = client
        self.timeout = timeout if timeout is not None else settings.http_timeout

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when credentials for this source are present."""
        pass

    @abstractmethod
    def query(self, domain: str, query_text: str) -> CitationCheckResult:
        """
        Issue one query and report whether the answer cites `domain`.

        Raises:
            CitationSourceError: On transport errors, non-2xx responses or
                responses that do not match the provider schema
        """
        pass

    def build_queries(self, domain: str, keywords: list[str], limit: int) -> list[str]:
        queries = [self.query_template.format(keyword=kw) for kw in keywords[:limit] if kw]
        if not queries:
            queries.append(self.fallback_template.format(domain=domain))
        return queries

    def _request(self, method: str, url: str, schema: type[BaseModel], **kwargs) -> BaseModel:
        """Send a request and validate the JSON body against `schema`."""
        try:
            if self._client is not None:
                response = self._client.request(method, url, **kwargs)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(method, url, **kwargs)
            response.raise_for_status()
            return schema.model_validate(response.json())
        except httpx.HTTPError as e:
            raise CitationSourceError(f"{self.name} request failed: {e}") from e
        except ValidationError as e:
            raise CitationSourceError(f"{self.name} returned an unexpected payload: {e}") from e
        except ValueError as e:
            raise CitationSourceError(f"{self.name} returned invalid JSON: {e}") from e

    def _result(
        self, domain: str, citation_urls: list[str], answer_text: str = ""
    ) -> CitationCheckResult:
        """
        Single-query result. Structured citations give high confidence;
        a mention in the answer text only gives medium.
        """
        matching = [u for u in citation_urls if domain_matches(u, domain)]
        if matching:
            confidence = Confidence.HIGH
        else:
            matching = find_mentions(answer_text, domain)
            confidence = Confidence.MEDIUM if matching else Confidence.LOW

        cited = bool(matching)
        return CitationCheckResult(
            platform=self.platform,
            is_cited=cited,
            matching_citation_urls=tuple(dict.fromkeys(matching)),
            confidence=confidence,
            queries_tested=1,
            queries_with_citation=int(cited),
        )
