from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from newslens.core.config import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PROVIDER_TIMEOUT,
    DEFAULT_THRESHOLD,
)
from newslens.core.exceptions import AggregationError
from newslens.domain.models import AggregateResponse, CanonicalArticle, NewsQuery, RawRecord
from newslens.services.cluster_svc import ClusterService
from newslens.services.normalize_svc import normalize_articles
from newslens.services.pagination_svc import paginate
from newslens.services.providers.base import NewsProvider
from newslens.services.ranking_svc import filter_and_rank
from newslens.services.synthesis_svc import SynthesisService
from newslens.storage.response_cache import ResponseCache

logger = logging.getLogger(__name__)

NO_ARTICLES_WARNING = "No articles found from any source."


class AggregationService:
    """
    Orchestrates one multi-source aggregation request.

    Fans out to every provider in parallel, normalises and pools the results,
    clusters them into stories, keeps multi-source stories, synthesises each
    one and returns the requested page. Provider and generation failures only
    add warnings; anything else is raised as ``AggregationError``.
    """

    def __init__(
        self,
        providers: Sequence[NewsProvider],
        cluster_service: ClusterService,
        synthesis_service: SynthesisService,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        page_size: int = DEFAULT_PAGE_SIZE,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        cache: ResponseCache[AggregateResponse] | None = None,
    ) -> None:
        self.providers = list(providers)
        self.cluster_service = cluster_service
        self.synthesis_service = synthesis_service
        self.threshold = threshold
        self.page_size = page_size
        self.provider_timeout = provider_timeout
        self.cache = cache

    async def _fetch_with_timeout(self, provider: NewsProvider, news_query: NewsQuery) -> list[RawRecord]:
        try:
            return await asyncio.wait_for(provider.fetch_or_raise(news_query), timeout=self.provider_timeout)
        except asyncio.TimeoutError as exc:
            raise TimeoutError(f"timed out after {self.provider_timeout:.0f}s") from exc

    async def fetch_all(self, news_query: NewsQuery) -> tuple[list[CanonicalArticle], list[str]]:
        """
        Fetch from all providers concurrently and pool the normalised articles.

        A provider that raises (``ProviderAPIError``, ``RateLimitError`` or
        anything else) or times out contributes nothing and a warning
        naming it. Pool order follows provider order.
        """
        warnings: list[str] = []
        results: list[Any] = await asyncio.gather(
            *(self._fetch_with_timeout(provider, news_query) for provider in self.providers),
            return_exceptions=True,
        )

        pool: list[CanonicalArticle] = []
        for provider, result in zip(self.providers, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("%s failed: %s", provider.display_name, result)
                warnings.append(f"{provider.display_name} API: {result}")
                continue
            normalized = normalize_articles(result, provider.name)
            logger.info("%s: %d raw, %d normalized", provider.display_name, len(result or []), len(normalized))
            pool.extend(normalized)

        logger.info("Total normalized: %d articles", len(pool))
        return pool, warnings

    async def aggregate(self, news_query: NewsQuery) -> AggregateResponse:
        """
        Run the full pipeline for one request.

        Args:
            news_query: Search text, optional country/category and page.

        Returns:
            The page of synthesised story groups with pagination metadata and
            any warnings. An empty article pool yields ``groups=[]`` plus a
            warning instead of an error.

        Raises:
            AggregationError: If clustering, ranking, synthesis or pagination
                fails unexpectedly.
        """
        cache_key = news_query.cache_key()
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info("Returning cached aggregation for %r", cache_key)
                return cached.model_copy(deep=True)

        logger.info(
            "Aggregate request: query=%r country=%r category=%r page=%s view=%s",
            news_query.query,
            news_query.country,
            news_query.category,
            news_query.page,
            news_query.view_type,
        )
        pool, warnings = await self.fetch_all(news_query)

        if not pool:
            return AggregateResponse(
                query=news_query.query,
                country=news_query.country,
                category=news_query.category,
                groups=[],
                warnings=warnings or [NO_ARTICLES_WARNING],
            )

        try:
            groups = self.cluster_service.cluster(pool, self.threshold)
            ranked = filter_and_rank(groups)
            synthesized, synthesis_warnings = await self.synthesis_service.synthesize_all(ranked)
            warnings.extend(synthesis_warnings)
            page = paginate(synthesized, news_query.page, self.page_size)
        except Exception as exc:
            logger.exception("Aggregation pipeline failed")
            raise AggregationError(str(exc) or "Failed to aggregate news") from exc

        response = AggregateResponse(
            query=news_query.query,
            country=news_query.country,
            category=news_query.category,
            groups=page.items,
            pagination=page.to_pagination(),
            warnings=warnings or None,
        )
        logger.info("Returning %d summarized groups (%s view)", len(page.items), news_query.view_type)

        if self.cache is not None:
            self.cache.set(cache_key, response.model_copy(deep=True))
        return response
