"""Unified error handling for hostcase.

- ErrorKind/ErrorRecord/FieldIssue: the fixed failure taxonomy
- HostcaseError and subclasses: exceptions carrying records
- normalize: any exception -> exactly one ErrorRecord
- RequestEnvelope/ResultEnvelope: what callers send and receive
"""

from .errors import (
    RETRYABLE_KINDS,
    ConfigurationError,
    DuplicateToolError,
    ErrorKind,
    ErrorRecord,
    FieldIssue,
    HostcaseError,
    MalformedResponseError,
    RegistryClosedError,
    ToolNotFoundError,
    UpstreamStatusError,
    ValidationFailed,
)
from .normalize import REDACTED, kind_for_status, normalize, redact, upstream_excerpt
from .result import JsonDict, RequestEnvelope, ResultEnvelope

__all__ = [
    # Taxonomy
    "ErrorKind", "ErrorRecord", "FieldIssue", "RETRYABLE_KINDS",
    # Exceptions
    "HostcaseError", "ValidationFailed", "ToolNotFoundError", "DuplicateToolError",
    "RegistryClosedError", "ConfigurationError", "UpstreamStatusError", "MalformedResponseError",
    # Normalization
    "normalize", "kind_for_status", "redact", "upstream_excerpt", "REDACTED",
    # Envelopes
    "RequestEnvelope", "ResultEnvelope", "JsonDict",
]
