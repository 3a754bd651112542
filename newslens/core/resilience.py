from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

import httpx

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
MAX_RETRY_AFTER_SECONDS = 5.0


def _is_retryable(exc: httpx.RequestError | httpx.HTTPStatusError) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ReadTimeout))


def retry_after_seconds(exc: httpx.RequestError | httpx.HTTPStatusError) -> float | None:
    """Seconds requested by a 429 ``Retry-After`` header, capped; None if absent or not numeric."""
    if not isinstance(exc, httpx.HTTPStatusError) or exc.response.status_code != 429:
        return None
    try:
        requested = float(exc.response.headers.get("Retry-After", ""))
    except ValueError:
        return None
    return max(0.0, min(requested, MAX_RETRY_AFTER_SECONDS))


def retry_with_backoff(
    retries: int = 2,
    delay: float = 0.5,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Retry async provider calls on transient failures with exponential backoff.

    Rate-limited responses wait for the provider's ``Retry-After`` when it is
    longer than the current backoff, up to ``MAX_RETRY_AFTER_SECONDS`` so a
    single provider cannot stall the whole aggregation.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            current_delay = delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                    attempt += 1
                    if attempt > retries or not _is_retryable(exc):
                        raise
                    wait = max(current_delay, retry_after_seconds(exc) or 0.0)
                    logger.info(
                        "Retrying %s after %s in %.1fs (attempt %d)",
                        func.__name__,
                        type(exc).__name__,
                        wait,
                        attempt,
                    )
                    await asyncio.sleep(wait)
                    current_delay *= 2

        return wrapper

    return decorator
