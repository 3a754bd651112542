from __future__ import annotations

import logging
from datetime import datetime, timezone

from newslens.domain.models import StoryGroup

logger = logging.getLogger(__name__)

MIN_DISTINCT_SOURCES = 2
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def has_enough_sources(group: StoryGroup) -> bool:
    return len(group.sources) >= MIN_DISTINCT_SOURCES


def has_identical_titles(group: StoryGroup) -> bool:
    """True for a multi-article group whose titles are all the same non-empty text."""
    if len(group.articles) <= 1:
        return False
    titles = [(article.title or "").lower().strip() for article in group.articles]
    first = titles[0]
    return bool(first) and all(title == first for title in titles)


def latest_date(group: StoryGroup) -> datetime:
    return group.latest_published_at() or EPOCH


def filter_and_rank(groups: list[StoryGroup]) -> list[StoryGroup]:
    """Keep multi-source groups with distinct coverage, newest story first."""
    kept: list[StoryGroup] = []
    for group in groups:
        if not has_enough_sources(group):
            logger.info(
                "Filtering out group %s - only has %d source(s): %s",
                group.group_id,
                len(group.sources),
                ", ".join(group.sources),
            )
            continue
        if has_identical_titles(group):
            logger.info(
                "Filtering out group %s - all %d articles have identical title: %r",
                group.group_id,
                len(group.articles),
                group.articles[0].title[:50],
            )
            continue
        kept.append(group)

    logger.info("After filtering: %d groups (removed %d)", len(kept), len(groups) - len(kept))
    return sorted(kept, key=latest_date, reverse=True)
