from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from typing import Any

from newslens.core.config import DEFAULT_BATCH_SIZE
from newslens.core.exceptions import LLMServiceError, SynthesisParseError, ValidationError
from newslens.core.prompts import (
    ARTICLE_FACTS_INSTRUCTIONS,
    ARTICLE_FACTS_MAX_TOKENS,
    SYSTEM_INSTRUCTIONS,
    build_article_prompt,
    build_group_prompt,
    display_source_name,
)
from newslens.domain.models import GroupSynthesis, StoryGroup, SynthesizedGroup
from newslens.services.llm_svc import LLMService
from newslens.services.titles import generate_neutral_title, is_generic_title

logger = logging.getLogger(__name__)

NO_ARTICLES_SUMMARY = "No articles to summarize."
NO_ARTICLES_COMPARISON = "No articles available for comparison."
NO_ARTICLES_TITLE = "No articles available for this story"
DEFAULT_DETAILED_COMPARISON = "Comparison not available."
DEFAULT_SIMPLE_COMPARISON = "Articles differ in their focus and emphasis."
NO_ARTICLE_SUMMARY = "Summary not available. Please read the full article for details."
MIN_SENTENCE_CHARS = 20
ARTICLE_SUMMARY_SENTENCES = 3

_SENTENCE_END = re.compile(r"[.!?]+")


def _source_names(group: StoryGroup) -> list[str]:
    return [display_source_name(source) for source in group.sources]


def _join_names(names: list[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"


def _neutral_title(group: StoryGroup, candidate: Any, summary: str) -> str:
    """Keep a usable model title, otherwise derive one from the final summary."""
    if isinstance(candidate, str) and not is_generic_title(candidate):
        return candidate.strip()
    representative = group.representative
    return generate_neutral_title(
        representative.title if representative else None,
        representative.description if representative else None,
        summary,
    )


def basic_synthesis(group: StoryGroup) -> GroupSynthesis:
    """
    Deterministic synthesis used when the generation service is unavailable
    or its reply cannot be used.
    """
    sources = group.sources
    names = _source_names(group)

    descriptions = [article.description for article in group.articles if article.description]
    titles = "; ".join(article.title for article in group.articles)
    summary = " ".join(descriptions[:2]) or titles or "Multiple sources covered this story."
    summary = f"{summary} Reported by {_join_names(names)}."

    detailed = f"This story was covered by {', '.join(names)}. "
    if len(sources) == 2:
        detailed += "Each source provides its own perspective on the events."
        simple = f"{names[0]} and {names[1]} cover this story with different perspectives."
    else:
        detailed += "Each source offers a different angle on the story."
        simple = f"Covered by {', '.join(names)} with varying perspectives."

    differences = []
    for source in sources:
        source_articles = [article for article in group.articles if article.source == source]
        differences.append(f"{source}: {len(source_articles)} article(s) - {source_articles[0].title}")

    return GroupSynthesis(
        group_id=group.group_id,
        group_title=_neutral_title(group, None, summary),
        summary=summary,
        detailed_comparison=detailed,
        simple_comparison=simple,
        differences=differences,
    )


def synthesis_from_payload(group: StoryGroup, payload: dict[str, Any]) -> GroupSynthesis:
    """Turn the model's JSON object into a synthesis, filling gaps with defaults."""
    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise SynthesisParseError("Response is missing a summary")

    raw_differences = payload.get("differences")
    differences = [str(item) for item in raw_differences if item] if isinstance(raw_differences, list) else []

    detailed = payload.get("detailedComparison")
    if not isinstance(detailed, str) or not detailed.strip():
        detailed = " ".join(differences) or DEFAULT_DETAILED_COMPARISON

    simple = payload.get("simpleComparison")
    if not isinstance(simple, str) or not simple.strip():
        simple = differences[0] if differences else DEFAULT_SIMPLE_COMPARISON

    return GroupSynthesis(
        group_id=group.group_id,
        group_title=_neutral_title(group, payload.get("groupTitle"), summary),
        summary=summary.strip(),
        detailed_comparison=detailed,
        simple_comparison=simple,
        differences=differences,
    )


def failed_group_fallback(group: StoryGroup) -> SynthesizedGroup:
    """Last-ditch result for a group whose synthesis raised unexpectedly."""
    names = ", ".join(_source_names(group))
    summary = "; ".join(a.title for a in group.articles if a.title) or (
        "Summary unavailable. Please review the articles below."
    )
    return SynthesizedGroup(
        group_id=group.group_id,
        group_title=_neutral_title(group, None, summary),
        summary=summary,
        detailed_comparison=f"This story was covered by {names}. Each source provides its own perspective.",
        simple_comparison=f"Covered by {names} with different perspectives.",
        differences=[],
        articles=list(group.articles),
    )


def basic_article_summary(text: str) -> str:
    """First three sentences longer than 20 characters, or a stock notice."""
    sentences = [s.strip() for s in _SENTENCE_END.split(text) if len(s.strip()) > MIN_SENTENCE_CHARS]
    if not sentences:
        return NO_ARTICLE_SUMMARY
    return ". ".join(sentences[:ARTICLE_SUMMARY_SENTENCES]) + "."


class SynthesisService:
    """Produce neutral titles, summaries and cross-source comparisons per story group."""

    def __init__(self, llm_service: LLMService | None, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        self.llm_service = llm_service
        self.batch_size = max(1, batch_size)

    async def synthesize(self, group: StoryGroup, warnings: list[str] | None = None) -> GroupSynthesis:
        """
        Synthesise one story group. Never raises for service failures.

        Zero articles give a static result, one article a description-based
        summary, and several articles a model-generated synthesis with a
        deterministic fallback when the model is unavailable or unusable.
        Fallbacks caused by a failing model are noted in ``warnings``.
        """
        if not group.articles:
            return GroupSynthesis(
                group_id=group.group_id,
                group_title=NO_ARTICLES_TITLE,
                summary=NO_ARTICLES_SUMMARY,
                detailed_comparison=NO_ARTICLES_COMPARISON,
                simple_comparison=NO_ARTICLES_COMPARISON,
                differences=[],
            )

        if len(group.articles) == 1:
            article = group.articles[0]
            summary = article.description or article.title
            only = f"Only covered by {display_source_name(article.source)}."
            return GroupSynthesis(
                group_id=group.group_id,
                group_title=generate_neutral_title(article.title, article.description, summary),
                summary=summary,
                detailed_comparison=only,
                simple_comparison=only,
                differences=[only],
            )

        if not self.llm_service or not self.llm_service.available:
            logger.info("No LLM configured, generating basic synthesis for %s", group.group_id)
            return basic_synthesis(group)

        logger.info(
            "Summarizing group %s with %d articles from %d source(s): %s",
            group.group_id,
            len(group.articles),
            len(group.sources),
            ", ".join(group.sources),
        )
        try:
            result = await self.llm_service.generate(SYSTEM_INSTRUCTIONS, build_group_prompt(group.articles))
            if not result.ok:
                raise SynthesisParseError(result.error or "Unparseable response")
            return synthesis_from_payload(group, result.payload)
        except (LLMServiceError, SynthesisParseError) as e:
            logger.warning("Falling back to basic synthesis for %s: %s", group.group_id, e)
            if warnings is not None:
                warnings.append(f"Summary for {group.group_id} generated without LLM: {e}")
            return basic_synthesis(group)

    async def summarize_article(self, title: str, text: str) -> str:
        """
        Extract the key facts of a single article.

        Falls back to the leading sentences of ``text`` when no model is
        configured or the model call fails.

        Raises:
            ValidationError: If ``title`` or ``text`` is blank.
        """
        title = (title or "").strip()
        text = (text or "").strip()
        if not title or not text:
            raise ValidationError("Text and title are required")

        if not self.llm_service or not self.llm_service.available:
            logger.info("No LLM configured, using leading sentences for %r", title)
            return basic_article_summary(text)

        try:
            result = await self.llm_service.generate(
                ARTICLE_FACTS_INSTRUCTIONS,
                build_article_prompt(title, text),
                max_tokens=ARTICLE_FACTS_MAX_TOKENS,
            )
        except LLMServiceError as e:
            logger.warning("Article summary for %r fell back to leading sentences: %s", title, e)
            return basic_article_summary(text)

        summary = result.payload.get("summary") if result.ok else None
        if not isinstance(summary, str) or not summary.strip():
            logger.warning("Article summary for %r was unusable: %s", title, result.error or "missing summary")
            return basic_article_summary(text)
        return summary.strip()

    async def synthesize_all(self, groups: Sequence[StoryGroup]) -> tuple[list[SynthesizedGroup], list[str]]:
        """
        Synthesise groups in fixed-size batches, one batch at a time.

        Calls inside a batch run concurrently; an exception in one call does
        not affect the others and is replaced by a titles-based fallback.

        Returns:
            Synthesised groups in input order, and warnings for this run.
        """
        warnings: list[str] = []
        synthesized: list[SynthesizedGroup] = []

        for start in range(0, len(groups), self.batch_size):
            batch = groups[start:start + self.batch_size]
            results = await asyncio.gather(
                *(self.synthesize(group, warnings) for group in batch),
                return_exceptions=True,
            )
            for group, result in zip(batch, results):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    logger.error("Summarization failed for group %s: %s", group.group_id, result)
                    warnings.append(f"Failed to summarize group {group.group_id}")
                    synthesized.append(failed_group_fallback(group))
                    continue
                synthesized.append(SynthesizedGroup(**result.model_dump(), articles=list(group.articles)))

        return synthesized, warnings
