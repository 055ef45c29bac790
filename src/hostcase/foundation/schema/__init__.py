"""Tool input schemas and their validation."""

from .types import (
    DEFAULT_DNS_TTL,
    DnsRecordType,
    DomainName,
    EmailAddress,
    EmptyParams,
    JsonObject,
    NestedParams,
    NonEmptyStr,
    PositiveInteger,
    StringList,
    ToolParams,
)
from .validator import Validator, format_path, get_validator, issues_from, validate

__all__ = [
    # Base models
    "ToolParams", "NestedParams", "EmptyParams",
    # Field types
    "NonEmptyStr", "DomainName", "EmailAddress", "PositiveInteger", "StringList", "JsonObject",
    "DnsRecordType", "DEFAULT_DNS_TTL",
    # Validation
    "Validator", "get_validator", "validate", "issues_from", "format_path",
]
