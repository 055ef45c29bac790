"""Upstream authentication.

The upstream expects `Authorization: Bearer <base64(key)>` for every key kind;
the encoding is a fixed transform of the configured credential.
"""

from __future__ import annotations

import base64
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer

from hostcase.foundation.config import Config, CredentialKind


class BearerAuth(BaseModel):
    """Bearer authentication with a base64-encoded key.

    Key is stored as SecretStr to prevent accidental logging/exposure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    auth_type: Literal["bearer"] = "bearer"
    key: SecretStr = Field(..., description="Raw API key, encoded on the wire")
    kind: CredentialKind = CredentialKind.API_KEY

    @classmethod
    def from_config(cls, config: Config) -> BearerAuth:
        return cls(key=config.credential, kind=config.credential_kind)

    @property
    def token(self) -> str:
        return base64.b64encode(self.key.get_secret_value().encode()).decode()

    def apply(self, headers: dict[str, str]) -> dict[str, str]:
        headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @field_serializer("key", when_used="json")
    def _mask_key(self, v: SecretStr) -> str:
        return "***"

    def __hash__(self) -> int:
        return hash((self.auth_type, self.kind, self.key.get_secret_value()))
