from __future__ import annotations

from collections.abc import Sequence

from newslens.domain.models import CanonicalArticle

CONTENT_EXCERPT_CHARS = 500
SUMMARY_WORD_LIMIT = 250

SOURCE_DISPLAY_NAMES = {
    "guardian": "The Guardian",
    "gdelt": "GDELT",
    "currents": "Currents",
}


def display_source_name(source: str) -> str:
    """Human-readable provider name; unknown providers keep their id."""
    return SOURCE_DISPLAY_NAMES.get(source, source)


# The Core Persona - sent with every synthesis request
SYSTEM_INSTRUCTIONS = "You are a news analysis assistant. Always respond with valid JSON only."


def format_articles_for_llm(articles: Sequence[CanonicalArticle]) -> str:
    """
    Render every article of a group as a tagged text block.

    Args:
        articles: Group members in group order.

    Returns:
        Blocks of the form ``[GUARDIAN - Article 1]`` followed by title,
        description, truncated content, url and publish date.
    """
    blocks = []
    for index, article in enumerate(articles, 1):
        content = article.content[:CONTENT_EXCERPT_CHARS] or article.description or "No content available"
        blocks.append(
            f"[{article.source.upper()} - Article {index}]\n"
            f"Title: {article.title}\n"
            f"Description: {article.description or 'No description'}\n"
            f"Content: {content}\n"
            f"URL: {article.url}\n"
            f"Published: {article.published_at or 'Unknown date'}\n"
            "---"
        )
    return "\n\n".join(blocks)


def build_group_prompt(articles: Sequence[CanonicalArticle]) -> str:
    """
    Construct the user message asking for a neutral cross-source synthesis.

    Args:
        articles: Every article in the story group, from all sources.

    Returns:
        Prompt requesting a JSON object with ``groupTitle``, ``summary``,
        ``detailedComparison``, ``simpleComparison`` and ``differences``.
    """
    source_names = ", ".join(display_source_name(source) for source in dict.fromkeys(a.source for a in articles))

    return f"""You are analyzing multiple news articles about the same story from different sources ({source_names}).

Here are the articles:

{format_articles_for_llm(articles)}

CRITICAL REQUIREMENT: You must explicitly and directly state how these articles differ from each other. Do not just imply differences - state them clearly.

Please provide a JSON response with the following structure:
{{
  "groupTitle": "A short, neutral headline-style title (5-12 words) describing the story as a whole. Do NOT copy any single source's headline; write a neutral, descriptive title based on the combined content.",
  "summary": "A neutral summary of approximately {SUMMARY_WORD_LIMIT} words or less combining the key facts that all sources agree on.",
  "detailedComparison": "A clear paragraph (3-5 sentences) that names each source ({source_names}) and states what each one emphasizes, what unique details each includes, and any differences in tone.",
  "simpleComparison": "A very short comparison (1-2 sentences) answering: what is the main way these articles differ from each other?",
  "differences": [
    "<Source> focuses on [specific aspect]...",
    "<Source> emphasizes [different angle]..."
  ]
}}

IMPORTANT INSTRUCTIONS:
1. The summary must be neutral and combine facts all sources agree on, in roughly {SUMMARY_WORD_LIMIT} words or less.
2. The detailedComparison MUST explicitly name each source and state what makes each one different.
3. The simpleComparison should be very brief (1-2 sentences) and capture the main difference.
4. For each source, state what it emphasizes, which unique details it includes and any difference in tone (critical, optimistic, data-focused, etc.).
5. Use direct, plain language, e.g. "The Guardian focuses more on political reactions, while GDELT highlights protest data and Currents mentions local community impact."

Return ONLY valid JSON, no other text."""


ARTICLE_FACTS_MAX_TOKENS = 400

ARTICLE_FACTS_INSTRUCTIONS = (
    "You are a news fact extractor. Extract only the key facts from the article: "
    "names, dates, locations, numbers, direct quotes and concrete events. "
    "Do not summarize opinions or add interpretation. Always respond with valid JSON only."
)


def build_article_prompt(title: str, text: str) -> str:
    """User message asking for the key facts of a single article as ``{"summary": ...}``."""
    return f"""Extract the key facts from this news article.

Title: {title}

Article:
{text}

List the facts as short, plain sentences. Keep names, figures and quotes exactly as written.

Respond with a JSON object of the form {{"summary": "<the extracted facts>"}}.

Return ONLY valid JSON, no other text."""
