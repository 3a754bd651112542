"""
Neutral headline helpers for story groups.

``generate_neutral_title`` derives a headline from the group summary (falling
back to the representative article's title and description). It is a pure
function and never hands back one of the generic filler labels while any
source text exists.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from newslens.utils import truncate_at_word_boundary

MIN_TITLE_LENGTH = 10
MAX_TITLE_LENGTH = 100
LAST_RESORT_TITLE = "Developing multi-source coverage"

GENERIC_PHRASES = (
    "news story",
    "story 1",
    "story 2",
    "story 3",
    "latest news",
    "news coverage",
    "story from",
)
_STORY_NUMBER = re.compile(r"^story\s+\d+$", re.IGNORECASE)
_GENERIC_SCRUB = re.compile(
    "|".join([re.escape(phrase) for phrase in GENERIC_PHRASES] + [r"\bstory\s+\d+\b"]),
    re.IGNORECASE,
)

ACTION_PATTERNS = (
    re.compile(
        r"([A-Z][^.!?]{0,50}(?:announces|announced|approves|approved|rejects|rejected|proposes|proposed|"
        r"implements|implemented|introduces|introduced|launches|launched|reveals|revealed|confirms|"
        r"confirmed|denies|denied|reports|reported)[^.!?]{0,50})",
        re.IGNORECASE,
    ),
    re.compile(
        r"([A-Z][^.!?]{0,50}(?:protest|protests|protesting|strike|strikes|striking|election|elections|"
        r"meeting|meetings|decision|decisions|policy|policies|law|laws|bill|bills|plan|plans)[^.!?]{0,40})",
        re.IGNORECASE,
    ),
    re.compile(
        r"([A-Z][^.!?]{0,50}(?:breaks|breaking|happens|happened|occurs|occurred|develops|developed|"
        r"emerges|emerged)[^.!?]{0,40})",
        re.IGNORECASE,
    ),
)

_LEAD_IN = r"This story|The story|This article|The article|According to|Reports indicate|Sources say|Multiple sources"
_REPORTING_PREFIX = re.compile(rf"^(?:{_LEAD_IN})", re.IGNORECASE)
_BOILERPLATE_PREFIX = re.compile(rf"^(?:{_LEAD_IN}|The news|A story|In|On|At|The|A|An)\s+", re.IGNORECASE)
_RELATIVE_PREFIX = re.compile(r"^(?:that|which|who|where|when|what|how)\s+", re.IGNORECASE)
_HEADLINE_TAG = re.compile(r"^(?:BREAKING|EXCLUSIVE|UPDATE|LIVE):\s*", re.IGNORECASE)
_SOURCE_SUFFIX = re.compile(r"\s*-\s*(?:The Guardian|Guardian|GDELT|Currents|Reuters|AP|BBC).*$", re.IGNORECASE)
_SENTENCE_END = re.compile(r"[.!?]")


def matches_generic_pattern(title: str | None) -> bool:
    """True when ``title`` contains a filler phrase or is just ``story <n>``."""
    if not title:
        return False
    lowered = title.lower()
    return any(phrase in lowered for phrase in GENERIC_PHRASES) or bool(_STORY_NUMBER.match(title.strip()))


def is_generic_title(title: str | None) -> bool:
    """A title is unusable when missing, shorter than 10 chars or generic filler."""
    if not title or len(title.strip()) < MIN_TITLE_LENGTH:
        return True
    return matches_generic_pattern(title)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _first_sentence(text: str) -> str:
    return _SENTENCE_END.split(text, maxsplit=1)[0].strip()


def _from_action_clause(summary: str) -> str | None:
    for pattern in ACTION_PATTERNS:
        match = pattern.search(summary)
        if not match:
            continue
        phrase = _REPORTING_PREFIX.sub("", match.group(1).strip()).strip()
        if 20 <= len(phrase) <= MAX_TITLE_LENGTH:
            return _capitalize(phrase)
    return None


def _from_first_sentence(summary: str) -> str | None:
    sentence = _first_sentence(summary)
    if len(sentence) <= 15:
        return None
    neutral = _RELATIVE_PREFIX.sub("", _BOILERPLATE_PREFIX.sub("", sentence)).strip()
    neutral = _capitalize(neutral)

    if 3 <= len(neutral.split()) <= 15 and 20 <= len(neutral) <= MAX_TITLE_LENGTH:
        return neutral
    if len(neutral) > MAX_TITLE_LENGTH:
        neutral = truncate_at_word_boundary(neutral, 97, 50)
        if len(neutral) >= 20:
            return neutral
    return None


def _from_leading_chunk(summary: str) -> str | None:
    if len(summary) <= 20:
        return None
    chunk = summary[:80].strip()
    last_space = chunk.rfind(" ")
    if last_space > 30:
        chunk = chunk[:last_space]
    chunk = _BOILERPLATE_PREFIX.sub("", chunk).strip()
    return _capitalize(chunk) if len(chunk) >= 20 else None


def _from_short_chunk(summary: str) -> str | None:
    chunk = summary[:70].strip()
    last_space = chunk.rfind(" ")
    if last_space > 20:
        chunk = chunk[:last_space]
    chunk = _REPORTING_PREFIX.sub("", chunk).strip()
    return _capitalize(chunk) if len(chunk) >= 15 else None


def _from_article_title(title: str) -> str | None:
    neutral = _SOURCE_SUFFIX.sub("", _HEADLINE_TAG.sub("", title)).strip()
    if len(neutral) > MAX_TITLE_LENGTH:
        neutral = truncate_at_word_boundary(neutral, 97, 50)
    return neutral if len(neutral) >= 15 else None


def _from_description(description: str) -> str | None:
    if len(description) <= 20:
        return None
    sentence = _first_sentence(description)
    return _capitalize(sentence) if 15 <= len(sentence) <= MAX_TITLE_LENGTH else None


def _from_summary_prefix(summary: str) -> str | None:
    chunk = summary[:60].strip()
    last_space = chunk.rfind(" ")
    if last_space > 15:
        chunk = chunk[:last_space]
    return _capitalize(chunk) or None


def _candidates(title: str, description: str, summary: str) -> Iterable[Callable[[], str | None]]:
    if len(summary) > 10:
        yield lambda: _from_action_clause(summary)
        yield lambda: _from_first_sentence(summary)
        yield lambda: _from_leading_chunk(summary)
        yield lambda: _from_short_chunk(summary)
    if title:
        yield lambda: _from_article_title(title)
    if description:
        yield lambda: _from_description(description)
    if summary:
        yield lambda: _from_summary_prefix(summary)
    if title:
        yield lambda: title[:80].strip() or None


def generate_neutral_title(title: str | None, description: str | None, summary: str | None) -> str:
    """
    Build a neutral headline for a story group.

    Tries, in order: an action-verb clause from the summary, the cleaned
    first summary sentence, the first ~80 then ~70 characters of the summary,
    the cleaned article title, the first description sentence, the first ~60
    summary characters and finally the raw title. Each step has its own
    minimum length. Candidates containing generic filler ("news story",
    "story 2", ...) or shorter than 10 characters are skipped; if every
    candidate is unusable, the filler phrases are scrubbed out of the source
    text instead, and a fixed label is returned when nothing usable remains.
    """
    title = (title or "").strip()
    description = (description or "").strip()
    summary = (summary or "").strip()

    for strategy in _candidates(title, description, summary):
        candidate = strategy()
        if not is_generic_title(candidate):
            return candidate

    for text in (summary, title, description):
        scrubbed = re.sub(r"\s+", " ", _GENERIC_SCRUB.sub(" ", text)).strip(" ,;:-")
        scrubbed = _capitalize(truncate_at_word_boundary(scrubbed, 80, 30))
        if not is_generic_title(scrubbed):
            return scrubbed
    return LAST_RESORT_TITLE
