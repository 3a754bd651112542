from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from newslens.core.config import DEFAULT_PAGE_SIZE
from newslens.domain.models import Pagination

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T]
    current_page: int
    total_pages: int
    total_groups: int
    page_size: int

    def to_pagination(self) -> Pagination:
        return Pagination(
            current_page=self.current_page,
            total_pages=self.total_pages,
            total_groups=self.total_groups,
            groups_per_page=self.page_size,
        )


def clamp_page(page: Any, total_pages: int) -> int:
    try:
        requested = int(page)
    except (TypeError, ValueError):
        requested = 1
    return max(1, min(requested, total_pages))


def paginate(items: Sequence[T], page: Any = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice ``items`` into the requested page, clamping the page into range."""
    total = len(items)
    total_pages = max(1, math.ceil(total / page_size))
    current_page = clamp_page(page, total_pages)
    start = (current_page - 1) * page_size
    page_items = list(items[start:start + page_size])

    if len(page_items) > page_size:
        logger.error("Pagination limit violated: %d items, max is %d", len(page_items), page_size)
        page_items = page_items[:page_size]

    logger.info(
        "Page %d of %d: showing items %d-%d of %d",
        current_page,
        total_pages,
        start + 1 if page_items else 0,
        start + len(page_items),
        total,
    )
    return Page(
        items=page_items,
        current_page=current_page,
        total_pages=total_pages,
        total_groups=total,
        page_size=page_size,
    )
