"""Tests for backoff strategies, the retry policy and the token bucket."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import httpx
import pytest

from hostcase.foundation.config import RateLimitSettings, RetrySettings
from hostcase.runtime import ConstantBackoff, ExponentialBackoff, RetryPolicy, TokenBucket
from hostcase.runtime.retry import NO_RETRY, retry_after


# ═════════════════════════════════════════════════════════════════════════════
# Backoff
# ═════════════════════════════════════════════════════════════════════════════


def test_exponential_backoff_without_jitter() -> None:
    backoff = ExponentialBackoff(base=0.5, max_delay=3.0, multiplier=2.0, jitter=False)
    assert [backoff.delay(n) for n in range(4)] == [0.5, 1.0, 2.0, 3.0]


def test_exponential_backoff_jitter_stays_in_range() -> None:
    backoff = ExponentialBackoff(base=1.0, max_delay=10.0, jitter=True)
    for attempt in range(5):
        assert 0 <= backoff.delay(attempt) <= 10.0


def test_constant_backoff() -> None:
    backoff = ConstantBackoff(0.25)
    assert backoff.delay(0) == backoff.delay(7) == 0.25
    assert backoff.max_delay == 0.25


# ═════════════════════════════════════════════════════════════════════════════
# RetryPolicy
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(("method", "outcome", "expected"), [
    ("GET", 429, True),
    ("GET", 500, True),
    ("GET", 503, True),
    ("GET", 507, True),
    ("GET", 400, False),
    ("GET", 401, False),
    ("GET", 404, False),
    ("get", 502, True),
    ("POST", 429, False),
    ("POST", 503, False),
    ("DELETE", 503, False),
    ("GET", httpx.ConnectError("refused"), True),
    ("GET", httpx.ReadTimeout("slow"), True),
    ("POST", httpx.ReadTimeout("slow"), False),
    ("GET", ValueError("not transport"), False),
])
def test_should_retry_matrix(method: str, outcome: int | BaseException, expected: bool) -> None:
    assert RetryPolicy(max_retries=3).should_retry(method, outcome, attempt=0) is expected


def test_retry_budget() -> None:
    policy = RetryPolicy(max_retries=2)
    assert policy.should_retry("GET", 503, attempt=1)
    assert not policy.should_retry("GET", 503, attempt=2)


def test_disabled() -> None:
    assert NO_RETRY.is_disabled
    assert not NO_RETRY.should_retry("GET", 503, attempt=0)
    assert RetryPolicy(retry_methods=set()).is_disabled


def test_methods_are_normalized() -> None:
    assert RetryPolicy(retry_methods=["get", "head"]).retry_methods == frozenset({"GET", "HEAD"})


def test_from_settings() -> None:
    policy = RetryPolicy.from_settings(RetrySettings(max_retries=1, base_delay=0.1, max_delay=2.0, jitter=False))
    assert policy.max_retries == 1
    assert policy.backoff.max_delay == 2.0
    assert policy.get_delay(0) == 0.1


def test_delay_honours_retry_after_with_cap() -> None:
    policy = RetryPolicy(backoff=ExponentialBackoff(base=0.1, max_delay=5.0, jitter=False))
    assert policy.get_delay(0, httpx.Response(429, headers={"Retry-After": "2"})) == 2.0
    assert policy.get_delay(0, httpx.Response(429, headers={"Retry-After": "120"})) == 5.0
    assert policy.get_delay(0, httpx.Response(503)) == 0.1


def test_retry_after_formats() -> None:
    assert retry_after(httpx.Response(429, headers={"Retry-After": "3"})) == 3.0
    assert retry_after(httpx.Response(429, headers={"Retry-After": "-4"})) == 0.0
    assert retry_after(httpx.Response(429, headers={"Retry-After": "soon"})) is None
    assert retry_after(httpx.Response(429)) is None

    when = datetime.now(timezone.utc) + timedelta(seconds=30)
    seconds = retry_after(httpx.Response(429, headers={"Retry-After": format_datetime(when, usegmt=True)}))
    assert seconds is not None and 25 <= seconds <= 30


def test_policy_is_frozen() -> None:
    policy = RetryPolicy()
    with pytest.raises(Exception):  # pydantic ValidationError
        policy.max_retries = 5  # type: ignore[misc]


# ═════════════════════════════════════════════════════════════════════════════
# TokenBucket
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_bucket_allows_burst() -> None:
    bucket = TokenBucket(rate=1.0, capacity=5)
    start = time.monotonic()
    for _ in range(5):
        await bucket.acquire()
    assert time.monotonic() - start < 0.5
    assert bucket.available < 1


@pytest.mark.asyncio
async def test_bucket_waits_when_empty() -> None:
    bucket = TokenBucket(rate=20.0, capacity=1)
    await bucket.acquire()
    start = time.monotonic()
    await bucket.acquire()
    assert time.monotonic() - start >= 0.03


@pytest.mark.asyncio
async def test_bucket_serializes_concurrent_callers() -> None:
    bucket = TokenBucket(rate=50.0, capacity=2)
    start = time.monotonic()
    await asyncio.gather(*(bucket.acquire() for _ in range(6)))
    # two from the burst, four refilled at 50/s
    assert time.monotonic() - start >= 0.06


def test_bucket_rejects_bad_parameters() -> None:
    with pytest.raises(ValueError):
        TokenBucket(rate=0, capacity=1)
    with pytest.raises(ValueError):
        TokenBucket(rate=1, capacity=0)


def test_bucket_from_settings() -> None:
    assert TokenBucket.from_settings(RateLimitSettings(enabled=False)) is None
    bucket = TokenBucket.from_settings(RateLimitSettings(enabled=True, max_calls=120, window_seconds=60.0))
    assert bucket is not None
    assert bucket.rate == 2.0
    assert bucket.capacity == 120
