"""Custom exceptions for NewsLens."""

from __future__ import annotations


class NewsLensError(Exception):
    """Base exception for all NewsLens errors."""
    pass


class APIError(NewsLensError):
    """Base exception for external API failures."""
    pass


class ProviderAPIError(APIError):
    """Raised when a news provider API fails."""

    def __init__(self, message: str, provider: str | None = None, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class LLMServiceError(APIError):
    """Raised when the text-generation service fails."""

    def __init__(self, message: str, model: str | None = None):
        self.model = model
        super().__init__(message)


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded."""

    def __init__(self, service: str, retry_after: float | None = None):
        self.service = service
        self.retry_after = retry_after
        super().__init__(f"{service} rate limit exceeded")


class ValidationError(NewsLensError):
    """Raised when request input is missing or malformed."""
    pass


class SynthesisParseError(NewsLensError):
    """Raised when a generation response cannot be turned into a synthesis."""
    pass


class AggregationError(NewsLensError):
    """Raised when the aggregation pipeline fails unexpectedly."""
    pass
