"""
Tests for provider retry behaviour.
"""
from __future__ import annotations

import httpx
import pytest

from newslens.core.resilience import MAX_RETRY_AFTER_SECONDS, retry_after_seconds, retry_with_backoff

REQUEST = httpx.Request("GET", "https://api.example.com/news")


def status_error(status_code, headers=None):
    response = httpx.Response(status_code, headers=headers, request=REQUEST)
    return httpx.HTTPStatusError("error", request=REQUEST, response=response)


@pytest.fixture
def sleeps(monkeypatch):
    recorded: list[float] = []

    async def fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr("newslens.core.resilience.asyncio.sleep", fake_sleep)
    return recorded


def test_retry_after_is_read_and_capped():
    assert retry_after_seconds(status_error(429, {"Retry-After": "2"})) == 2.0
    assert retry_after_seconds(status_error(429, {"Retry-After": "600"})) == MAX_RETRY_AFTER_SECONDS
    assert retry_after_seconds(status_error(429, {"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})) is None
    assert retry_after_seconds(status_error(503, {"Retry-After": "2"})) is None


@pytest.mark.asyncio
async def test_transient_failure_is_retried_with_backoff(sleeps):
    calls = {"n": 0}

    @retry_with_backoff(retries=2, delay=0.5)
    async def flaky():
        calls["n"] += 1
        if calls["n"] < 3:
            raise status_error(503)
        return "ok"

    assert await flaky() == "ok"
    assert sleeps == [0.5, 1.0]


@pytest.mark.asyncio
async def test_rate_limit_waits_for_retry_after(sleeps):
    calls = {"n": 0}

    @retry_with_backoff(retries=1, delay=0.5)
    async def limited():
        calls["n"] += 1
        if calls["n"] == 1:
            raise status_error(429, {"Retry-After": "3"})
        return "ok"

    assert await limited() == "ok"
    assert sleeps == [3.0]


@pytest.mark.asyncio
async def test_client_errors_are_not_retried(sleeps):
    @retry_with_backoff(retries=2, delay=0.5)
    async def unauthorized():
        raise status_error(401)

    with pytest.raises(httpx.HTTPStatusError):
        await unauthorized()
    assert sleeps == []


@pytest.mark.asyncio
async def test_gives_up_after_retries(sleeps):
    @retry_with_backoff(retries=2, delay=0.5)
    async def down():
        raise httpx.ConnectError("refused", request=REQUEST)

    with pytest.raises(httpx.ConnectError):
        await down()
    assert len(sleeps) == 2
