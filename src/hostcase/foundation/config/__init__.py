"""Configuration management using pydantic-settings.

Environment settings are loaded once and frozen into an immutable Config.
"""

from .settings import (
    Config,
    CredentialKind,
    CredentialSettings,
    HostcaseSettings,
    HttpSettings,
    LoggingSettings,
    RateLimitSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
    load_config,
)

__all__ = [
    "Config",
    "CredentialKind",
    "CredentialSettings",
    "HostcaseSettings",
    "HttpSettings",
    "LoggingSettings",
    "RateLimitSettings",
    "RetrySettings",
    "clear_settings_cache",
    "get_settings",
    "load_config",
]
