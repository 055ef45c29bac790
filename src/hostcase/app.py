"""Startup wiring: settings in, a ready Dispatcher out.

Everything environment-dependent happens here, once. The objects built are
immutable (Config, RetryPolicy, the sealed registry) or own their own
synchronization (TokenBucket), so one Dispatcher serves any number of
concurrent dispatches.

Example:
    >>> settings = get_settings()
    >>> configure_from_settings(settings)
    >>> dispatcher = build_dispatcher(settings)
    >>> await dispatcher.dispatch("list_domains", {})
"""

from __future__ import annotations

import httpx

from hostcase.client import APIClient
from hostcase.foundation.config import (
    HostcaseSettings,
    RateLimitSettings,
    RetrySettings,
    get_settings,
    load_config,
)
from hostcase.foundation.registry import ToolRegistry
from hostcase.runtime import Dispatcher, RetryPolicy, TokenBucket
from hostcase.runtime.observability import LogRenderer, configure_logging
from hostcase.tools import build_registry


def build_retry_policy(settings: RetrySettings) -> RetryPolicy:
    return RetryPolicy.from_settings(settings)


def build_rate_limiter(settings: RateLimitSettings) -> TokenBucket | None:
    """Shared token bucket, or None when rate limiting is disabled."""
    return TokenBucket.from_settings(settings)


def configure_from_settings(settings: HostcaseSettings | None = None) -> LogRenderer:
    settings = settings or get_settings()
    return configure_logging(format=settings.logging.format, level=settings.logging.level)


def build_client(
    settings: HostcaseSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> APIClient:
    """APIClient from settings. Raises ConfigurationError when no credential is configured."""
    settings = settings or get_settings()
    return APIClient(
        load_config(settings),
        retry=build_retry_policy(settings.retry),
        limiter=build_rate_limiter(settings.rate_limit),
        transport=transport,
    )


def build_dispatcher(
    settings: HostcaseSettings | None = None,
    *,
    registry: ToolRegistry | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Dispatcher:
    """Dispatcher over the full catalogue (or the given registry)."""
    return Dispatcher(registry or build_registry(), build_client(settings, transport=transport))
