"""
Tests for settings loading and validation.
"""
from __future__ import annotations

import pydantic
import pytest

from newslens.core.config import DEFAULT_PAGE_SIZE, DEFAULT_THRESHOLD, Settings


def test_defaults_without_any_credentials():
    settings = Settings(_env_file=None, GUARDIAN_API_KEY=None, CURRENTS_API_KEY=None, OPENAI_API_KEY=None)

    assert settings.SIMILARITY_THRESHOLD == DEFAULT_THRESHOLD
    assert settings.GROUPS_PER_PAGE == DEFAULT_PAGE_SIZE
    assert settings.SYNTHESIS_BATCH_SIZE == 3
    assert settings.LLM_MODEL == "gpt-3.5-turbo"


def test_blank_credentials_are_treated_as_missing():
    settings = Settings(_env_file=None, GUARDIAN_API_KEY="   ", CURRENTS_API_KEY="")
    assert settings.GUARDIAN_API_KEY is None
    assert settings.CURRENTS_API_KEY is None


def test_llm_api_key_is_alias_for_openai_key():
    settings = Settings(_env_file=None, OPENAI_API_KEY=None, LLM_API_KEY="alias")
    assert settings.OPENAI_API_KEY == "alias"


def test_explicit_openai_key_wins_over_alias():
    settings = Settings(_env_file=None, OPENAI_API_KEY="primary", LLM_API_KEY="alias")
    assert settings.OPENAI_API_KEY == "primary"


@pytest.mark.parametrize("field", ["SIMILARITY_THRESHOLD", "TIME_BONUS", "DOMAIN_BONUS"])
def test_weights_must_be_in_unit_interval(field):
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, **{field: 1.5})


@pytest.mark.parametrize("field", ["GROUPS_PER_PAGE", "SYNTHESIS_BATCH_SIZE", "TIME_WINDOW_DAYS"])
def test_sizes_must_be_positive(field):
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SIMILARITY_THRESHOLD", "0.45")
    monkeypatch.setenv("GUARDIAN_API_KEY", "from-env")
    settings = Settings(_env_file=None)

    assert settings.SIMILARITY_THRESHOLD == 0.45
    assert settings.GUARDIAN_API_KEY == "from-env"


def test_startup_summary_never_logs_secrets(caplog):
    settings = Settings(_env_file=None, GUARDIAN_API_KEY="super-secret-value", OPENAI_API_KEY="sk-hidden")
    with caplog.at_level("INFO", logger="newslens.core.config"):
        settings.log_startup_summary()

    assert "super-secret-value" not in caplog.text
    assert "sk-hidden" not in caplog.text
    assert "Guardian API Key" in caplog.text
