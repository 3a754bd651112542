from __future__ import annotations

import logging
from typing import Any

from newslens.core.config import PROVIDER_PAGE_SIZE
from newslens.domain.models import NewsQuery, RawRecord, SourceId
from newslens.services.providers.base import NewsProvider

logger = logging.getLogger(__name__)

CATEGORY_SECTIONS = {
    "sports": "sport",
    "business": "business",
    "technology": "technology",
    "politics": "politics",
    "health": "health",
    "science": "science",
    "entertainment": "culture",
    "world": "world",
    "us": "us-news",
}

COUNTRY_NAMES = {
    "us": "United States",
    "gb": "United Kingdom",
    "ca": "Canada",
    "au": "Australia",
    "de": "Germany",
    "fr": "France",
    "it": "Italy",
    "es": "Spain",
    "jp": "Japan",
    "cn": "China",
    "in": "India",
    "br": "Brazil",
    "mx": "Mexico",
    "ru": "Russia",
    "kr": "South Korea",
}


def build_search_query(query: str, country: str | None) -> str:
    """Combine the free-text query with a quoted country clause when known."""
    search = (query or "").strip()
    country_name = COUNTRY_NAMES.get((country or "").lower())
    if not country_name:
        return search
    country_terms = " OR ".join(f'"{term}"' for term in (country_name, country.upper()))
    return f"({search}) AND ({country_terms})" if search else country_terms


class GuardianProvider(NewsProvider):
    """The Guardian Open Platform content search."""

    BASE_URL = "https://content.guardianapis.com/search"
    name = SourceId.GUARDIAN.value
    display_name = "Guardian"
    requires_key = True

    @property
    def api_key(self) -> str | None:
        return self.settings.GUARDIAN_API_KEY

    def build_request(self, query: NewsQuery) -> tuple[str, dict[str, Any]]:
        params: dict[str, Any] = {
            "api-key": self.api_key,
            "show-fields": "trailText,bodyText,thumbnail",
            "show-tags": "all",
            "page-size": PROVIDER_PAGE_SIZE,
            "order-by": "newest",
        }
        if query.category:
            params["section"] = CATEGORY_SECTIONS.get(query.category.lower(), query.category)
        search = build_search_query(query.query, query.country)
        if search:
            params["q"] = search
        return self.BASE_URL, params

    def extract_articles(self, payload: Any) -> list[RawRecord]:
        response = payload.get("response", {}) if isinstance(payload, dict) else {}
        if response.get("status") != "ok":
            logger.warning("Guardian API error: %s", response.get("message", "unknown status"))
            return []
        results = response.get("results") or []
        return [item for item in results if isinstance(item, dict)]
