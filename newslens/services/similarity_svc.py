from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from newslens.core.config import (
    DEFAULT_DOMAIN_BONUS,
    DEFAULT_MAX_TERMS,
    DEFAULT_TIME_BONUS,
    DEFAULT_TIME_WINDOW_DAYS,
)
from newslens.domain.models import CanonicalArticle
from newslens.utils import extract_hostname

MIN_TERM_LENGTH = 4
SECONDS_PER_DAY = 24 * 60 * 60

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SimilarityWeights:
    """Tunable bonus weights; the text signal always dominates."""

    time_bonus: float = DEFAULT_TIME_BONUS
    domain_bonus: float = DEFAULT_DOMAIN_BONUS
    time_window_days: float = DEFAULT_TIME_WINDOW_DAYS
    max_terms: int = DEFAULT_MAX_TERMS


DEFAULT_WEIGHTS = SimilarityWeights()


def normalize_text(text: str | None) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    if not text:
        return ""
    lowered = _PUNCTUATION.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def extract_key_terms(text: str | None, max_terms: int = DEFAULT_MAX_TERMS) -> list[str]:
    """Most frequent words longer than three characters; ties keep first-seen order."""
    words = [word for word in normalize_text(text).split(" ") if len(word) >= MIN_TERM_LENGTH]
    return [word for word, _ in Counter(words).most_common(max_terms)]


def jaccard_similarity(first: set[str], second: set[str]) -> float:
    if not first and not second:
        return 1.0
    if not first or not second:
        return 0.0
    return len(first & second) / len(first | second)


def time_proximity_bonus(a: CanonicalArticle, b: CanonicalArticle, weights: SimilarityWeights = DEFAULT_WEIGHTS) -> float:
    first, second = a.published_datetime, b.published_datetime
    if first is None or second is None:
        return 0.0
    days_apart = abs((first - second).total_seconds()) / SECONDS_PER_DAY
    return weights.time_bonus if days_apart <= weights.time_window_days else 0.0


def same_domain_bonus(a: CanonicalArticle, b: CanonicalArticle, weights: SimilarityWeights = DEFAULT_WEIGHTS) -> float:
    first, second = extract_hostname(a.url), extract_hostname(b.url)
    if not first or not second:
        return 0.0
    return weights.domain_bonus if first == second else 0.0


def calculate_similarity(
    a: CanonicalArticle,
    b: CanonicalArticle,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Score how likely two articles describe the same story, in [0, 1].

    Jaccard overlap of the top key terms of ``title + description``, plus a
    small bonus for publication within the time window and another for a
    shared hostname. Unparseable dates and URLs simply earn no bonus.
    """
    terms_a = set(extract_key_terms(f"{a.title} {a.description or ''}", weights.max_terms))
    terms_b = set(extract_key_terms(f"{b.title} {b.description or ''}", weights.max_terms))

    score = jaccard_similarity(terms_a, terms_b)
    score += time_proximity_bonus(a, b, weights)
    score += same_domain_bonus(a, b, weights)
    return min(1.0, score)
