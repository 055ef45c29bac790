"""Process-wide token bucket in front of the upstream API.

The bucket is the only mutable state shared between concurrent dispatches.
Acquisition is serialized by an asyncio.Lock; callers wait (they are never
rejected) until a token is available.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hostcase.foundation.config import RateLimitSettings


@dataclass
class TokenBucket:
    """Token bucket rate limiter.

    Args:
        rate: Tokens refilled per second
        capacity: Maximum tokens held (burst size)

    Example:
        >>> limiter = TokenBucket(rate=1.0, capacity=60)
        >>> await limiter.acquire()
    """

    rate: float
    capacity: float
    _tokens: float = field(init=False, repr=False)
    _updated: float = field(init=False, repr=False)
    _lock: asyncio.Lock = field(init=False, repr=False, default_factory=asyncio.Lock)

    def __post_init__(self) -> None:
        if self.rate <= 0 or self.capacity < 1:
            raise ValueError("rate must be positive and capacity at least 1")
        self._tokens = float(self.capacity)
        self._updated = time.monotonic()

    @classmethod
    def from_settings(cls, settings: RateLimitSettings) -> TokenBucket | None:
        """Bucket per the settings, or None when rate limiting is disabled."""
        if not settings.enabled:
            return None
        return cls(
            rate=settings.max_calls / settings.window_seconds,
            capacity=settings.burst or settings.max_calls,
        )

    def _refill(self) -> None:
        now = time.monotonic()
        self._tokens = min(self.capacity, self._tokens + (now - self._updated) * self.rate)
        self._updated = now

    @property
    def available(self) -> float:
        self._refill()
        return self._tokens

    async def acquire(self) -> None:
        """Take one token, sleeping until one is available."""
        async with self._lock:
            self._refill()
            if self._tokens < 1:
                await asyncio.sleep((1 - self._tokens) / self.rate)
                self._refill()
            self._tokens -= 1
