from __future__ import annotations

import logging
from typing import Any

import httpx

from newslens.core.config import DEFAULT_PROVIDER_TIMEOUT, Settings
from newslens.core.exceptions import APIError, ProviderAPIError, RateLimitError
from newslens.core.resilience import retry_after_seconds, retry_with_backoff
from newslens.domain.models import NewsQuery, RawRecord

logger = logging.getLogger(__name__)


class NewsProvider:
    """
    Base class for news provider clients.

    Subclasses build request parameters and extract the article list from the
    payload. ``fetch_or_raise`` reports failures as ``ProviderAPIError`` or
    ``RateLimitError`` so callers can surface them; ``fetch`` never raises and
    resolves every failure to an empty list.
    """

    name: str = ""
    display_name: str = ""
    requires_key: bool = False

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.timeout = float(getattr(settings, "PROVIDER_TIMEOUT_SECONDS", DEFAULT_PROVIDER_TIMEOUT))

    @property
    def api_key(self) -> str | None:
        return None

    def build_request(self, query: NewsQuery) -> tuple[str, dict[str, Any]]:
        raise NotImplementedError

    def extract_articles(self, payload: Any) -> list[RawRecord]:
        raise NotImplementedError

    @retry_with_backoff(retries=2, delay=0.5)
    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()

    async def _request(self, url: str, params: dict[str, Any]) -> Any:
        """Retried GET whose transport and decoding failures become domain errors."""
        try:
            return await self._get_json(url, params)
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 429:
                raise RateLimitError(self.display_name, retry_after=retry_after_seconds(exc)) from exc
            raise ProviderAPIError(
                f"returned status {status_code}", provider=self.name, status_code=status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderAPIError(f"request failed: {exc}", provider=self.name) from exc
        except ValueError as exc:
            raise ProviderAPIError("returned invalid JSON", provider=self.name) from exc

    async def fetch_or_raise(self, query: NewsQuery) -> list[RawRecord]:
        """
        Fetch raw article records for ``query``.

        A missing credential is a configuration choice, not a failure, and
        yields ``[]``.

        Raises:
            RateLimitError: The provider answered 429 after retries.
            ProviderAPIError: Any other HTTP, transport, JSON or payload-shape failure.
        """
        if self.requires_key and not self.api_key:
            logger.warning("%s: no API key provided, returning empty list", self.display_name)
            return []

        url, params = self.build_request(query)
        logger.info(
            "%s: fetching articles (query=%r, country=%r, category=%r)",
            self.display_name,
            query.query,
            query.country,
            query.category,
        )
        payload = await self._request(url, params)

        try:
            articles = self.extract_articles(payload)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ProviderAPIError(f"returned a malformed payload: {exc}", provider=self.name) from exc

        logger.info("%s: returned %d articles", self.display_name, len(articles))
        return articles

    async def fetch(self, query: NewsQuery) -> list[RawRecord]:
        """Fetch raw article records for ``query``; ``[]`` on any failure."""
        try:
            return await self.fetch_or_raise(query)
        except APIError as exc:
            logger.warning("%s API: %s", self.display_name, exc)
            return []
