"""hostcase: hosting-provider operations as validated, dispatchable tools.

Quick Start:
    >>> from hostcase import build_dispatcher
    >>> dispatcher = build_dispatcher()          # reads TWENTYI_API_KEY etc.
    >>> result = await dispatcher.dispatch("get_dns_records", {"domain_id": "example.com"})
    >>> result.ok, result.data
"""

from hostcase._version import __version__

from hostcase.app import build_client, build_dispatcher, build_rate_limiter, build_retry_policy
from hostcase.client import APIClient
from hostcase.foundation.config import Config, HostcaseSettings, get_settings, load_config
from hostcase.foundation.errors import (
    ErrorKind,
    ErrorRecord,
    FieldIssue,
    HostcaseError,
    RequestEnvelope,
    ResultEnvelope,
    normalize,
)
from hostcase.foundation.registry import ToolRegistry
from hostcase.runtime import Dispatcher, RetryPolicy, TokenBucket
from hostcase.tools import build_registry

__all__ = [
    "__version__",
    # Wiring
    "build_dispatcher", "build_client", "build_registry", "build_retry_policy", "build_rate_limiter",
    # Core
    "Dispatcher", "ToolRegistry", "APIClient", "Config", "HostcaseSettings", "get_settings", "load_config",
    "RetryPolicy", "TokenBucket",
    # Results
    "ErrorKind", "ErrorRecord", "FieldIssue", "HostcaseError", "RequestEnvelope", "ResultEnvelope", "normalize",
]
