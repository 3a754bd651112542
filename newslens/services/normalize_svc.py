from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from newslens.domain.models import CanonicalArticle, RawRecord, SourceId
from newslens.utils import create_article_id

logger = logging.getLogger(__name__)

# Fields that must be present on a raw record, whatever the provider calls them.
URL_FIELDS = ("webUrl", "url", "articleurl", "shareurl")
TITLE_FIELDS = ("webTitle", "title", "seotitle")

GUARDIAN_DESCRIPTION_FROM_BODY_CHARS = 200

Derivation = Callable[[RawRecord], Any]


@dataclass(frozen=True)
class FieldRule:
    """Ordered candidate paths for one canonical field; the first non-empty wins."""

    candidates: tuple[str, ...] = ()
    derive: Derivation | None = None
    default: str = ""


@dataclass(frozen=True)
class FieldMapping:
    """Declarative projection table from one provider's raw shape."""

    source: str
    rules: dict[str, FieldRule] = field(default_factory=dict)


def _lookup(record: RawRecord, path: str) -> Any:
    """Resolve a dotted path such as ``fields.trailText``; missing parts give None."""
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _first_present(record: RawRecord, paths: tuple[str, ...]) -> Any:
    for path in paths:
        value = _lookup(record, path)
        if value not in (None, "", [], {}):
            return value
    return None


def _guardian_contributor(record: RawRecord) -> str | None:
    tags = record.get("tags")
    if not isinstance(tags, list):
        return None
    for tag in tags:
        if isinstance(tag, dict) and tag.get("type") == "contributor":
            return tag.get("webTitle")
    return None


def _guardian_body_excerpt(record: RawRecord) -> str | None:
    body = _lookup(record, "fields.bodyText")
    if isinstance(body, str) and body:
        return body[:GUARDIAN_DESCRIPTION_FROM_BODY_CHARS]
    return None


def _gdelt_description(record: RawRecord) -> Any:
    return _first_present(record, GDELT_MAPPING.rules["description"].candidates)


GUARDIAN_MAPPING = FieldMapping(
    source=SourceId.GUARDIAN.value,
    rules={
        "url": FieldRule(("webUrl",)),
        "title": FieldRule(("webTitle",)),
        "description": FieldRule(("fields.trailText",), derive=_guardian_body_excerpt),
        "content": FieldRule(("fields.bodyText", "fields.trailText")),
        "published_at": FieldRule(("webPublicationDate",)),
        "image_url": FieldRule(("fields.thumbnail",)),
        "author": FieldRule(derive=_guardian_contributor),
        "language": FieldRule(default="en"),
    },
)

GDELT_MAPPING = FieldMapping(
    source=SourceId.GDELT.value,
    rules={
        "url": FieldRule(("url", "shareurl", "articleurl", "articleURL")),
        "title": FieldRule(("title", "seotitle", "seoTitle")),
        "description": FieldRule(("seodescription", "seoDescription", "snippet", "description")),
        "content": FieldRule(("snippet", "body"), derive=_gdelt_description),
        "published_at": FieldRule(("seendate", "seenDate", "date", "time", "publishedAt", "published")),
        "image_url": FieldRule(("imageurl", "imageURL", "image")),
        "author": FieldRule(("source", "sourceName", "author")),
        "language": FieldRule(("language",), default="en"),
    },
)

CURRENTS_MAPPING = FieldMapping(
    source=SourceId.CURRENTS.value,
    rules={
        "url": FieldRule(("url",)),
        "title": FieldRule(("title",)),
        "description": FieldRule(("description",)),
        "content": FieldRule(("description", "content")),
        "published_at": FieldRule(("published",)),
        "image_url": FieldRule(("image",)),
        "author": FieldRule(("author",)),
        "language": FieldRule(("language",), default="en"),
    },
)

FIELD_MAPPINGS: dict[str, FieldMapping] = {
    mapping.source: mapping for mapping in (GUARDIAN_MAPPING, GDELT_MAPPING, CURRENTS_MAPPING)
}


def project(record: RawRecord, mapping: FieldMapping) -> CanonicalArticle:
    """Apply a provider's field table to one raw record."""
    values: dict[str, str] = {}
    for name, rule in mapping.rules.items():
        value = _first_present(record, rule.candidates)
        if value in (None, "") and rule.derive is not None:
            value = rule.derive(record)
        if value in (None, ""):
            value = rule.default
        values[name] = str(value).strip() if not isinstance(value, str) else value

    return CanonicalArticle(
        id=create_article_id(mapping.source, values["url"], values["title"]),
        source=mapping.source,
        **values,
    )


def has_required_fields(record: Any) -> bool:
    """Pre-mapping check: some url-like and some title-like field is truthy."""
    if not isinstance(record, dict):
        return False
    return any(record.get(key) for key in URL_FIELDS) and any(record.get(key) for key in TITLE_FIELDS)


def normalize_articles(raw_records: Any, source: str) -> list[CanonicalArticle]:
    """
    Normalise one provider's raw records into canonical articles.

    Records missing a url or title are dropped both before and after mapping,
    so every returned article has a non-empty ``url`` and ``title``. Unknown
    sources and non-list input yield an empty list. Never raises.

    Args:
        raw_records: Records exactly as the provider returned them.
        source: Provider id (``"guardian"``, ``"gdelt"``, ``"currents"``).

    Returns:
        Canonical articles in input order.
    """
    if not isinstance(raw_records, list):
        logger.warning("Articles for source %s is not a list, got %s", source, type(raw_records).__name__)
        return []

    mapping = FIELD_MAPPINGS.get(str(source))
    if mapping is None:
        logger.warning("Unknown source: %s", source)
        return []

    filtered = [record for record in raw_records if has_required_fields(record)]
    logger.info("Filtered %d articles to %d valid articles for %s", len(raw_records), len(filtered), source)

    normalized: list[CanonicalArticle] = []
    for record in filtered:
        try:
            article = project(record, mapping)
        except ValueError as exc:
            logger.debug("Dropping %s record that failed projection: %s", source, exc)
            continue
        if article.url.strip() and article.title.strip():
            normalized.append(article)

    logger.info("Normalized %d articles to %d final articles for %s", len(filtered), len(normalized), source)
    return normalized
