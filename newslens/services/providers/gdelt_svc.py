from __future__ import annotations

import logging
from typing import Any

from newslens.core.config import PROVIDER_PAGE_SIZE
from newslens.domain.models import NewsQuery, RawRecord, SourceId
from newslens.services.providers.base import NewsProvider

logger = logging.getLogger(__name__)

MATCH_ALL = "*"


def _looks_like_article(item: Any) -> bool:
    return isinstance(item, dict) and bool(item.get("url") or item.get("title") or item.get("articleurl"))


class GdeltProvider(NewsProvider):
    """GDELT DOC 2.0 article list. The free tier needs no API key."""

    BASE_URL = "https://api.gdeltproject.org/api/v2/doc/doc"
    name = SourceId.GDELT.value
    display_name = "GDELT"

    def build_request(self, query: NewsQuery) -> tuple[str, dict[str, Any]]:
        terms = (query.query or "").strip() or MATCH_ALL
        if query.country:
            clause = f"sourcecountry:{query.country.upper()}"
            terms = clause if terms == MATCH_ALL else f"{terms} {clause}"
        if query.category and query.category != MATCH_ALL:
            terms = query.category if terms == MATCH_ALL else f"{terms} {query.category}"

        params: dict[str, Any] = {
            "query": terms,
            "mode": "artlist",
            "maxrecords": PROVIDER_PAGE_SIZE,
            "format": "json",
            "sort": "date",
        }
        return self.BASE_URL, params

    def extract_articles(self, payload: Any) -> list[RawRecord]:
        """GDELT's payload shape varies: a bare list, ``articles``, or another list key."""
        if isinstance(payload, list):
            return [item for item in payload if isinstance(item, dict)]
        if not isinstance(payload, dict):
            return []
        if isinstance(payload.get("articles"), list):
            return [item for item in payload["articles"] if isinstance(item, dict)]
        for key, value in payload.items():
            if isinstance(value, list) and value and _looks_like_article(value[0]):
                logger.debug("GDELT articles found under %r", key)
                return [item for item in value if isinstance(item, dict)]
        logger.warning("GDELT: no articles found in response (keys: %s)", list(payload)[:5])
        return []
