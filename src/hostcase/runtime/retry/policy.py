"""Retry policy for upstream HTTP calls.

Only idempotent methods are retried, and only on transient failures:
transport errors, timeouts, 429 and 5xx. Everything else surfaces on the
first attempt so non-idempotent writes are never duplicated.

Optimizations:
- Frozen for immutability and hashability
- Method set normalized once at construction
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Annotated

import httpx
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from hostcase.foundation.config import RetrySettings


logger = logging.getLogger("hostcase.retry")

DEFAULT_RETRY_METHODS: frozenset[str] = frozenset({"GET"})
DEFAULT_RETRY_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


class RetryPolicy(BaseModel):
    """Configurable retry policy for APIClient requests.

    Attributes:
        max_retries: Maximum retry attempts after the first (0 = no retries)
        backoff: Backoff strategy for delay calculation
        retry_methods: HTTP methods safe to repeat
        retry_statuses: Status codes treated as transient (any 5xx also counts)

    Example:
        >>> policy = RetryPolicy(max_retries=2, backoff=ExponentialBackoff(base=0.1))
        >>> policy.should_retry("GET", 503, attempt=0)
        True
        >>> policy.should_retry("POST", 503, attempt=0)
        False
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        extra="forbid",
        revalidate_instances="never",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    retry_methods: frozenset[str] = DEFAULT_RETRY_METHODS
    retry_statuses: frozenset[int] = DEFAULT_RETRY_STATUSES

    @field_validator("retry_methods", mode="before")
    @classmethod
    def _upper_methods(cls, v: frozenset[str] | set[str] | list[str] | tuple[str, ...]) -> frozenset[str]:
        return frozenset(m.upper() for m in v)

    @computed_field
    @property
    def is_disabled(self) -> bool:
        return self.max_retries == 0 or not self.retry_methods

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryPolicy:
        return cls(
            max_retries=settings.max_retries,
            backoff=ExponentialBackoff(
                base=settings.base_delay,
                max_delay=settings.max_delay,
                multiplier=settings.multiplier,
                jitter=settings.jitter,
            ),
        )

    @classmethod
    def disabled(cls) -> RetryPolicy:
        return cls(max_retries=0)

    def is_transient(self, outcome: int | BaseException) -> bool:
        """Status code or exception that may succeed when repeated."""
        if isinstance(outcome, int):
            return outcome in self.retry_statuses or 500 <= outcome < 600
        return isinstance(outcome, (httpx.TimeoutException, httpx.TransportError))

    def should_retry(self, method: str, outcome: int | BaseException, attempt: int) -> bool:
        """Whether to repeat a request.

        Args:
            method: HTTP method of the failed request
            outcome: Response status code, or the exception raised
            attempt: Retry number about to be made (0-indexed)
        """
        if attempt >= self.max_retries or method.upper() not in self.retry_methods:
            return False
        return self.is_transient(outcome)

    def get_delay(self, attempt: int, response: httpx.Response | None = None) -> float:
        """Delay before the next attempt. A Retry-After header wins, capped at the backoff maximum."""
        if response is not None and (hinted := retry_after(response)) is not None:
            return min(hinted, self.backoff.max_delay)
        return self.backoff.delay(attempt)

    def __hash__(self) -> int:
        return hash((self.max_retries, self.retry_methods, self.retry_statuses))


NO_RETRY = RetryPolicy.disabled()


def retry_after(response: httpx.Response) -> float | None:
    """Seconds from a Retry-After header (delta-seconds or HTTP date), or None."""
    if not (raw := response.headers.get("retry-after", "").strip()):
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable Retry-After: {raw!r}")
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())
