from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlparse

from dateutil import parser

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_DATES = {"recent", "unknown", "n/a", "na", "none", "tbd", "unknown date"}


def parse_published_at(value: Optional[Any]) -> Optional[datetime]:
    """Parse a provider timestamp into an aware UTC datetime, or None.

    Accepts ISO-8601 (including GDELT's compact ``20240310T120000Z``) and
    anything else ``dateutil`` understands. Naive values are taken as UTC.
    Never raises.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in PLACEHOLDER_DATES:
        return None

    parsed: Optional[datetime] = None
    try:
        parsed = parser.isoparse(text)
    except (ValueError, TypeError, OverflowError):
        try:
            parsed = parser.parse(text)
        except (ValueError, TypeError, OverflowError):
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # Offsets at the edge of the datetime range cannot be shifted to UTC
        return None


def extract_hostname(url: Optional[str]) -> Optional[str]:
    """Return the lowercase hostname of ``url`` or None when it does not parse."""
    if not url:
        return None
    try:
        return urlparse(url.strip()).hostname
    except ValueError:
        return None


def create_article_id(source: str, url: str, title: str) -> str:
    """Stable article id: ``<source>-<8 hex chars of md5(source:url:title)>``."""
    digest = hashlib.md5(f"{source}:{url}:{title}".encode("utf-8")).hexdigest()
    return f"{source}-{digest[:8]}"


def truncate_at_word_boundary(text: str, limit: int, min_cut: int) -> str:
    """Cut ``text`` to ``limit`` chars, backing off to the last space past ``min_cut``."""
    if len(text) <= limit:
        return text
    truncated = text[:limit]
    last_space = truncated.rfind(" ")
    if last_space > min_cut:
        return truncated[:last_space]
    return truncated
