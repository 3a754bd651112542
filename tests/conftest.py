"""
Shared fixtures for NewsLens tests.
"""
from __future__ import annotations

from collections.abc import Callable

import pytest

from newslens.core.config import Settings
from newslens.domain.models import CanonicalArticle


@pytest.fixture
def make_article() -> Callable[..., CanonicalArticle]:
    """Factory for canonical articles with sensible defaults."""
    counter = {"n": 0}

    def _make(
        title: str,
        source: str = "guardian",
        description: str = "",
        url: str | None = None,
        published_at: str = "",
    ) -> CanonicalArticle:
        counter["n"] += 1
        return CanonicalArticle(
            id=f"{source}-{counter['n']:08x}",
            source=source,
            title=title,
            url=url or f"https://{source}.example.com/article-{counter['n']}",
            description=description,
            published_at=published_at,
        )

    return _make


@pytest.fixture
def app_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        GUARDIAN_API_KEY="guardian-key",
        CURRENTS_API_KEY="currents-key",
        OPENAI_API_KEY=None,
        LLM_API_KEY=None,
    )
