from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from newslens.core.config import DEFAULT_THRESHOLD
from newslens.domain.models import CanonicalArticle, StoryGroup
from newslens.services.similarity_svc import DEFAULT_WEIGHTS, SimilarityWeights, calculate_similarity

logger = logging.getLogger(__name__)


class ClusterService:
    """Group articles from all providers into story groups in a single greedy pass."""

    def __init__(self, weights: SimilarityWeights = DEFAULT_WEIGHTS) -> None:
        self.weights = weights

    def cluster(
        self,
        articles: Sequence[CanonicalArticle],
        threshold: float = DEFAULT_THRESHOLD,
    ) -> list[StoryGroup]:
        """
        Assign every article to exactly one story group.

        Each article is compared against the representative (first article)
        of every existing group and joins the best match scoring at least
        ``threshold``; on a tie the earliest-created group wins. Otherwise it
        opens a new group. Groups are never merged or re-evaluated, so the
        outcome depends on input order.

        Args:
            articles: Combined pool from all providers, in provider order.
            threshold: Minimum similarity to join an existing group.

        Returns:
            Groups sorted by descending size; equal sizes keep creation order.
        """
        if not articles:
            return []

        groups: list[StoryGroup] = []
        for article in articles:
            best_group: StoryGroup | None = None
            best_similarity = 0.0

            for group in groups:
                similarity = calculate_similarity(article, group.articles[0], self.weights)
                if similarity >= threshold and (best_group is None or similarity > best_similarity):
                    best_group = group
                    best_similarity = similarity

            if best_group is not None:
                best_group.articles.append(article)
            else:
                groups.append(StoryGroup(group_id=f"group-{len(groups) + 1}", articles=[article]))

        groups.sort(key=lambda group: len(group.articles), reverse=True)

        logger.info("Grouped %d articles into %d groups", len(articles), len(groups))
        if logger.isEnabledFor(logging.DEBUG):
            for index, group in enumerate(groups, 1):
                breakdown = Counter(article.source for article in group.articles)
                logger.debug(
                    "Group %d (%s): %d articles [%s]",
                    index,
                    group.group_id,
                    len(group.articles),
                    ", ".join(f"{source}:{count}" for source, count in breakdown.items()),
                )
        return groups
