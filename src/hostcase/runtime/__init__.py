"""Runtime: dispatch, retry policies, rate limiting and structured logging."""

from .dispatch import Dispatcher, DispatchState
from .limiter import TokenBucket
from .retry import ConstantBackoff, ExponentialBackoff, RetryPolicy

__all__ = [
    "Dispatcher",
    "DispatchState",
    "TokenBucket",
    "RetryPolicy",
    "ExponentialBackoff",
    "ConstantBackoff",
]
