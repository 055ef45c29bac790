"""Delay strategies between retries of an upstream read.

Attempt 0 is the wait before the first retry. Every strategy exposes
`max_delay`, which also caps any server-supplied Retry-After hint.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    @property
    def max_delay(self) -> float: ...

    def delay(self, attempt: int) -> float: ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """`base * multiplier**attempt`, capped at `max_delay`.

    With `jitter`, the result is scaled by a random factor in [0.5, 1.5) and
    capped again, so concurrent callers hitting the same 429 spread out.
    """

    base: float = 0.5
    max_delay: float = 10.0
    multiplier: float = 2.0
    jitter: bool = True

    def delay(self, attempt: int) -> float:
        wait = min(self.base * self.multiplier ** max(attempt, 0), self.max_delay)
        if not self.jitter:
            return wait
        return min(wait * random.uniform(0.5, 1.5), self.max_delay)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Same wait before every retry. Zero makes retrying tests instant."""

    delay_seconds: float = 1.0

    @property
    def max_delay(self) -> float:
        return self.delay_seconds

    def delay(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay_seconds
