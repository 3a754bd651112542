from __future__ import annotations

import logging
from typing import Any

from newslens.core.config import PROVIDER_PAGE_SIZE
from newslens.domain.models import NewsQuery, RawRecord, SourceId
from newslens.services.providers.base import NewsProvider

logger = logging.getLogger(__name__)

CATEGORY_MAP = {
    "sports": "sports",
    "business": "business",
    "technology": "technology",
    "politics": "politics",
    "health": "health",
    "science": "science",
    "entertainment": "entertainment",
    "general": "general",
}


class CurrentsProvider(NewsProvider):
    """Currents API: ``/search`` for queries, ``/latest-news`` otherwise."""

    BASE_URL = "https://api.currentsapi.services/v1"
    name = SourceId.CURRENTS.value
    display_name = "Currents"
    requires_key = True

    @property
    def api_key(self) -> str | None:
        return self.settings.CURRENTS_API_KEY

    def build_request(self, query: NewsQuery) -> tuple[str, dict[str, Any]]:
        params: dict[str, Any] = {
            "apiKey": self.api_key,
            "language": "en",
            "pageSize": PROVIDER_PAGE_SIZE,
        }
        if query.is_search:
            params["keywords"] = query.query.strip()
        if query.country:
            params["country"] = query.country.lower()
        if query.category:
            params["category"] = CATEGORY_MAP.get(query.category.lower(), query.category)

        endpoint = "search" if query.is_search else "latest-news"
        return f"{self.BASE_URL}/{endpoint}", params

    def extract_articles(self, payload: Any) -> list[RawRecord]:
        if not isinstance(payload, dict):
            return []
        status = payload.get("status")
        if status and status != "ok":
            logger.warning("Currents API error: %s", payload.get("message", "Unknown error"))
            return []
        articles = payload.get("news") or []
        if not articles and isinstance(payload.get("data"), list):
            articles = payload["data"]
        return [item for item in articles if isinstance(item, dict)]
