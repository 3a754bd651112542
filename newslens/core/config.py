"""
Application configuration with graceful degradation.
Every provider credential is optional: a missing key disables that provider
(or, for the LLM, switches synthesis to the deterministic fallback).
"""
from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Constants
DEFAULT_THRESHOLD = 0.3
DEFAULT_TIME_BONUS = 0.1
DEFAULT_DOMAIN_BONUS = 0.05
DEFAULT_TIME_WINDOW_DAYS = 7
DEFAULT_MAX_TERMS = 10
DEFAULT_PAGE_SIZE = 9
DEFAULT_BATCH_SIZE = 3
DEFAULT_PROVIDER_TIMEOUT = 15.0
DEFAULT_LLM_TIMEOUT = 30.0
PROVIDER_PAGE_SIZE = 50


class Settings(BaseSettings):
    """
    Application settings.
    Credentials are optional; tunables are validated on load.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # OPTIONAL: News provider credentials
    GUARDIAN_API_KEY: str | None = None
    GDELT_API_KEY: str | None = None  # free tier works without a key
    CURRENTS_API_KEY: str | None = None

    # OPTIONAL: Text-generation service (OpenAI-compatible)
    OPENAI_API_KEY: str | None = None
    LLM_API_KEY: str | None = None
    LLM_API_URL: str | None = None
    LLM_MODEL: str = "gpt-3.5-turbo"
    LLM_MAX_TOKENS: int = 1200
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT_SECONDS: float = DEFAULT_LLM_TIMEOUT

    # Pipeline tunables
    PROVIDER_TIMEOUT_SECONDS: float = DEFAULT_PROVIDER_TIMEOUT
    SIMILARITY_THRESHOLD: float = DEFAULT_THRESHOLD
    TIME_BONUS: float = DEFAULT_TIME_BONUS
    DOMAIN_BONUS: float = DEFAULT_DOMAIN_BONUS
    TIME_WINDOW_DAYS: int = DEFAULT_TIME_WINDOW_DAYS
    GROUPS_PER_PAGE: int = DEFAULT_PAGE_SIZE
    SYNTHESIS_BATCH_SIZE: int = DEFAULT_BATCH_SIZE
    RESPONSE_CACHE_TTL_SECONDS: float = 60.0

    # OPTIONAL: Application Settings
    CORS_ORIGINS: list[str] = []
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "production"

    @field_validator(
        "GUARDIAN_API_KEY",
        "GDELT_API_KEY",
        "CURRENTS_API_KEY",
        "OPENAI_API_KEY",
        "LLM_API_KEY",
        "LLM_API_URL",
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty or whitespace-only credentials as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("SIMILARITY_THRESHOLD", "TIME_BONUS", "DOMAIN_BONUS")
    @classmethod
    def validate_unit_interval(cls, v: float, info) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"{info.field_name} must be between 0 and 1")
        return v

    @field_validator("GROUPS_PER_PAGE", "SYNTHESIS_BATCH_SIZE", "TIME_WINDOW_DAYS")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return v

    @model_validator(mode="after")
    def resolve_llm_key_alias(self) -> "Settings":
        """Accept LLM_API_KEY as an alias for OPENAI_API_KEY."""
        if not self.OPENAI_API_KEY and self.LLM_API_KEY:
            self.OPENAI_API_KEY = self.LLM_API_KEY
        return self

    def log_startup_summary(self) -> None:
        """Log configuration summary on startup (without leaking secrets)."""
        logger.info("=" * 60)
        logger.info("NewsLens - Configuration")
        logger.info("=" * 60)
        logger.info("Environment: %s", self.ENVIRONMENT)
        logger.info("Log Level: %s", self.LOG_LEVEL)
        logger.info("Guardian API Key: %s", "✓ Present" if self.GUARDIAN_API_KEY else "✗ Missing (Guardian disabled)")
        logger.info("GDELT API Key: %s", "✓ Present" if self.GDELT_API_KEY else "○ Using free tier")
        logger.info("Currents API Key: %s", "✓ Present" if self.CURRENTS_API_KEY else "✗ Missing (Currents disabled)")
        logger.info("LLM API Key: %s", "✓ Present" if self.OPENAI_API_KEY else "✗ Missing (basic synthesis only)")
        logger.info("LLM Model: %s", self.LLM_MODEL)
        logger.info("LLM Endpoint: %s", self.LLM_API_URL or "OpenAI default")
        logger.info("Similarity Threshold: %.2f", self.SIMILARITY_THRESHOLD)
        logger.info("Groups Per Page: %d", self.GROUPS_PER_PAGE)
        logger.info("=" * 60)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Will raise ValidationError if a tunable is out of range.
    """
    settings = Settings()
    settings.log_startup_summary()
    return settings
