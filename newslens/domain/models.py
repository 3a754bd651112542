from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from newslens.utils import parse_published_at


class SourceId(str, Enum):
    """Known news providers. Articles carry the plain string value."""

    GUARDIAN = "guardian"
    GDELT = "gdelt"
    CURRENTS = "currents"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the public response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CanonicalArticle(CamelModel):
    """The normalised article shape every provider maps into."""

    id: str
    source: str
    title: str
    url: str
    description: str = ""
    content: str = ""
    image_url: str = ""
    published_at: str = ""
    author: str = ""
    language: str = "en"

    @property
    def published_datetime(self) -> datetime | None:
        return parse_published_at(self.published_at)


class StoryGroup(CamelModel):
    """Articles believed to cover one event; ``articles[0]`` is the representative."""

    group_id: str
    articles: list[CanonicalArticle] = Field(default_factory=list)

    @property
    def representative(self) -> CanonicalArticle | None:
        return self.articles[0] if self.articles else None

    @property
    def sources(self) -> list[str]:
        """Distinct source ids in first-seen order."""
        return list(dict.fromkeys(article.source for article in self.articles))

    def latest_published_at(self) -> datetime | None:
        dates = [d for d in (a.published_datetime for a in self.articles) if d is not None]
        return max(dates) if dates else None


class GroupSynthesis(CamelModel):
    """Neutral title, summary and cross-source comparison for one story group."""

    group_id: str
    group_title: str
    summary: str
    detailed_comparison: str
    simple_comparison: str
    differences: list[str] = Field(default_factory=list)


class SynthesizedGroup(GroupSynthesis):
    """A synthesis together with the articles it was built from."""

    articles: list[CanonicalArticle] = Field(default_factory=list)


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_groups: int
    groups_per_page: int


class AggregateResponse(CamelModel):
    """Externally observable output of one aggregation run."""

    query: str = ""
    country: str | None = None
    category: str | None = None
    groups: list[SynthesizedGroup] = Field(default_factory=list)
    pagination: Pagination | None = None
    warnings: list[str] | None = None


class ArticleSummaryRequest(CamelModel):
    text: str = ""
    title: str = ""


class ArticleSummaryResponse(CamelModel):
    summary: str


class NewsQuery(BaseModel):
    query: str = ""
    country: str | None = None
    category: str | None = None
    page: int = 1

    @property
    def is_search(self) -> bool:
        return bool(self.query and self.query.strip())

    @property
    def is_category(self) -> bool:
        return bool(self.category and self.category.strip()) and not self.is_search

    @property
    def view_type(self) -> str:
        if self.is_search:
            return "search"
        return "category" if self.is_category else "other"

    def cache_key(self) -> str:
        return f"{self.query.strip().lower()}|{self.country or ''}|{self.category or ''}|{self.page}"


RawRecord = dict[str, Any]
