"""Hybrid citation checker: real citation queries with heuristic fallback."""

import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from analyzers.base import Platform
from analyzers.urls import normalize_domain
from citations.base import (
    CitationCheckResult,
    CitationSource,
    CitationSourceError,
    merge_results,
)
from citations.sources import (
    GeminiGroundingSource,
    GoogleCustomSearchSource,
    OpenAIChatSource,
    PerplexitySource,
)
from config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class HybridCitationChecker:
    """
    Runs citation queries for every platform that has a configured source.

    Queries for one platform run sequentially with a fixed delay between
    them; platforms run concurrently. A failing source yields no result
    for its platform so the caller falls back to the heuristic score.
    """

    def __init__(
        self,
        sources: Iterable[CitationSource],
        query_delay: float = 0.2,
        max_queries: int = 5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.sources = list(sources)
        self.query_delay = query_delay
        self.max_queries = max_queries
        self._sleep = sleep

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "HybridCitationChecker":
        """Build a checker with every source the settings provide keys for."""
        config = config or default_settings
        sources = [
            PerplexitySource(config.perplexity_api_key, config.perplexity_model),
            GeminiGroundingSource(config.google_ai_api_key, config.google_ai_model),
            GoogleCustomSearchSource(config.google_search_api_key, config.google_search_cx),
            OpenAIChatSource(config.openai_api_key, config.openai_model),
        ]
        return cls(
            sources,
            query_delay=config.citation_query_delay,
            max_queries=config.citation_max_queries,
        )

    def sources_by_platform(self) -> dict[Platform, CitationSource]:
        """First configured source per platform, in registration order."""
        selected: dict[Platform, CitationSource] = {}
        for source in self.sources:
            if source.platform not in selected and source.is_configured():
                selected[source.platform] = source
        return selected

    def check(
        self, source: CitationSource, domain: str, keywords: list[str] | None = None
    ) -> CitationCheckResult | None:
        """
        Run all queries for one source.

        Returns:
            Merged result, or None if any query failed or the source raised
        """
        domain = normalize_domain(domain)
        queries = source.build_queries(domain, keywords or [], self.max_queries)
        results = []

        try:
            for i, query_text in enumerate(queries):
                if i > 0 and self.query_delay > 0:
                    self._sleep(self.query_delay)
                result = source.query(domain, query_text)
                logger.debug(
                    f"{source.name} query {i + 1}/{len(queries)} cited={result.is_cited}"
                )
                results.append(result)
        except CitationSourceError as e:
            logger.warning(
                f"Citation check for {source.platform.value} failed, "
                f"using heuristic score: {e}"
            )
            return None
        except Exception:
            # Unexpected source errors degrade the platform the same way
            logger.exception(
                f"Citation source {source.name} raised unexpectedly, "
                f"using heuristic score for {source.platform.value}"
            )
            return None

        merged = merge_results(source.platform, results)
        logger.info(
            f"Citation check for {source.platform.value}: "
            f"{merged.queries_with_citation}/{merged.queries_tested} queries cited {domain}"
        )
        return merged

    def check_all(
        self,
        domain: str,
        keywords: list[str] | None = None,
        platforms: Iterable[Platform] | None = None,
    ) -> dict[Platform, CitationCheckResult]:
        """
        Check every requested platform that has a configured source.

        Platforms without a source, and platforms whose check failed, are
        absent from the result.
        """
        selected = self.sources_by_platform()
        if platforms is not None:
            wanted = set(platforms)
            selected = {p: s for p, s in selected.items() if p in wanted}
        if not selected:
            return {}

        with ThreadPoolExecutor(max_workers=len(selected)) as pool:
            futures = {
                platform: pool.submit(self.check, source, domain, keywords)
                for platform, source in selected.items()
            }
            results = {platform: future.result() for platform, future in futures.items()}

        return {p: r for p, r in results.items() if r is not None}
