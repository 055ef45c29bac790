"""Retry policies for upstream requests.

Example:
    >>> from hostcase.runtime.retry import RetryPolicy, ExponentialBackoff
    >>> policy = RetryPolicy(max_retries=2, backoff=ExponentialBackoff(base=0.2, max_delay=5.0))
    >>> client = APIClient(config, retry=policy)
"""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .policy import DEFAULT_RETRY_METHODS, DEFAULT_RETRY_STATUSES, NO_RETRY, RetryPolicy, retry_after

__all__ = [
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "ConstantBackoff",
    # Policy
    "RetryPolicy",
    "NO_RETRY",
    "DEFAULT_RETRY_METHODS",
    "DEFAULT_RETRY_STATUSES",
    "retry_after",
]
