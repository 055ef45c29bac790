"""Environment-based configuration using pydantic-settings.

Settings are read from the environment (and an optional `.env` file) once.
`load_config()` then freezes the parts every dispatch needs into an immutable
`Config` that is passed explicitly to the APIClient; nothing downstream reads
the environment again.

Example:
    >>> from hostcase.foundation.config import get_settings, load_config
    >>> settings = get_settings()
    >>> settings.http.base_url
    'https://api.20i.com'
    >>> config = load_config(settings)  # raises ConfigurationError without credentials

    # Environment variables:
    # TWENTYI_API_KEY=...            (or HOSTCASE_API_KEY)
    # HOSTCASE_HTTP_TIMEOUT_MS=10000
    # HOSTCASE_RETRY_MAX_RETRIES=2
    # HOSTCASE_LOG_FORMAT=json
"""

from __future__ import annotations

import base64
from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from hostcase._version import __version__
from hostcase.foundation.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.20i.com"
DEFAULT_TIMEOUT_MS = 30_000


class CredentialSettings(BaseSettings):
    """The three recognized credential inputs. Any one of them is enough to start."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    api_key: SecretStr | None = Field(
        default=None, validation_alias=AliasChoices("TWENTYI_API_KEY", "HOSTCASE_API_KEY"),
        description="General (primary) API key",
    )
    oauth_key: SecretStr | None = Field(
        default=None, validation_alias=AliasChoices("TWENTYI_OAUTH_KEY", "HOSTCASE_OAUTH_KEY"),
        description="OAuth client key",
    )
    combined_key: SecretStr | None = Field(
        default=None, validation_alias=AliasChoices("TWENTYI_COMBINED_KEY", "HOSTCASE_COMBINED_KEY"),
        description="Precombined key (general + OAuth)",
    )

    @field_validator("api_key", "oauth_key", "combined_key", mode="after")
    @classmethod
    def _blank_is_missing(cls, v: SecretStr | None) -> SecretStr | None:
        """Treat empty or whitespace-only values as absent."""
        return v if v is not None and v.get_secret_value().strip() else None


class HttpSettings(BaseSettings):
    """Upstream HTTP configuration."""

    model_config = SettingsConfigDict(env_prefix="HOSTCASE_HTTP_", extra="ignore")

    base_url: str = DEFAULT_BASE_URL
    timeout_ms: PositiveInt = Field(default=DEFAULT_TIMEOUT_MS, description="Default per-request timeout")
    user_agent: str = f"hostcase/{__version__}"

    @field_validator("base_url", mode="after")
    @classmethod
    def _check_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v


class RetrySettings(BaseSettings):
    """Retry configuration for idempotent upstream reads."""

    model_config = SettingsConfigDict(env_prefix="HOSTCASE_RETRY_", extra="ignore")

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    base_delay: PositiveFloat = Field(default=0.5, description="Base delay in seconds")
    max_delay: PositiveFloat = Field(default=10.0, description="Maximum delay in seconds")
    multiplier: PositiveFloat = Field(default=2.0, description="Exponential backoff base")
    jitter: bool = True


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="HOSTCASE_LOG_", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RateLimitSettings(BaseSettings):
    """Process-wide token bucket in front of the upstream."""

    model_config = SettingsConfigDict(env_prefix="HOSTCASE_RATELIMIT_", extra="ignore")

    enabled: bool = False
    max_calls: PositiveInt = Field(default=60, description="Tokens refilled per window")
    window_seconds: PositiveFloat = Field(default=60.0, description="Refill window in seconds")
    burst: PositiveInt | None = Field(default=None, description="Bucket capacity (defaults to max_calls)")


class HostcaseSettings(BaseSettings):
    """Root settings.

    Example environment variables:
        TWENTYI_API_KEY=abc123
        HOSTCASE_HTTP_BASE_URL=https://api.20i.com
        HOSTCASE_RATELIMIT_ENABLED=true
    """

    model_config = SettingsConfigDict(
        env_prefix="HOSTCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)


# ─────────────────────────────────────────────────────────────────────────────
# Immutable runtime config
# ─────────────────────────────────────────────────────────────────────────────

class CredentialKind(StrEnum):
    """Which configured key authenticates upstream calls."""
    API_KEY = "api_key"
    COMBINED_KEY = "combined_key"
    OAUTH_KEY = "oauth_key"


# Selection order when several keys are configured
_CREDENTIAL_ORDER: tuple[CredentialKind, ...] = (
    CredentialKind.API_KEY, CredentialKind.COMBINED_KEY, CredentialKind.OAUTH_KEY,
)


class Config(BaseModel):
    """Process-wide credential/config bundle. Built once, shared read-only by every dispatch."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    base_url: str = DEFAULT_BASE_URL
    credential: SecretStr
    credential_kind: CredentialKind = CredentialKind.API_KEY
    timeout_ms: PositiveInt = DEFAULT_TIMEOUT_MS
    user_agent: str = f"hostcase/{__version__}"

    @field_validator("credential", mode="after")
    @classmethod
    def _non_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("credential must not be empty")
        return v

    @property
    def timeout(self) -> float:
        """Default timeout in seconds."""
        return self.timeout_ms / 1000

    @property
    def encoded_credential(self) -> str:
        return base64.b64encode(self.credential.get_secret_value().encode()).decode()

    def secrets(self) -> tuple[str, str]:
        """Every form in which the credential could leak (raw and wire-encoded)."""
        return self.credential.get_secret_value(), self.encoded_credential

    def __hash__(self) -> int:
        return hash((self.base_url, self.credential_kind, self.timeout_ms))


def load_config(settings: HostcaseSettings | None = None) -> Config:
    """Freeze settings into a Config. Raises ConfigurationError if no credential is present."""
    settings = settings or get_settings()
    creds = settings.credentials
    for kind in _CREDENTIAL_ORDER:
        if (secret := getattr(creds, kind.value)) is not None:
            return Config(
                base_url=settings.http.base_url,
                credential=secret,
                credential_kind=kind,
                timeout_ms=settings.http.timeout_ms,
                user_agent=settings.http.user_agent,
            )
    raise ConfigurationError(
        "No API credential configured. Set TWENTYI_API_KEY, TWENTYI_COMBINED_KEY or TWENTYI_OAUTH_KEY."
    )


@lru_cache(maxsize=1)
def get_settings() -> HostcaseSettings:
    """Get the global settings instance (cached)."""
    return HostcaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
