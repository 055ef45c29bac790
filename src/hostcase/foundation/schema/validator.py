"""Parameter validation against a tool's declared input schema.

Validation is pure and synchronous. It converts raw caller input into the
tool's params model, applies defaults, and on failure reports every failing
field at once so a caller can fix all problems in one round trip.

Optimizations:
- TypeAdapter cache per schema (compiled once, reused across dispatches)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import ErrorDetails

from hostcase.foundation.errors import FieldIssue, ValidationFailed

M = TypeVar("M", bound=BaseModel)

# Pydantic error type -> caller-facing reason
_REASONS: dict[str, str] = {
    "missing": "is required",
    "extra_forbidden": "is not a recognized field",
    "string_type": "must be a string",
    "int_type": "must be an integer",
    "int_parsing": "must be an integer",
    "int_from_float": "must be an integer",
    "float_type": "must be a number",
    "float_parsing": "must be a number",
    "finite_number": "must be a finite number",
    "bool_type": "must be a boolean",
    "bool_parsing": "must be a boolean",
    "dict_type": "must be an object",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "list_type": "must be an array",
    "none_required": "must be null",
}


def format_path(loc: tuple[int | str, ...]) -> str:
    """('contact', 'email') -> 'contact.email'; ('nameservers', 0) -> 'nameservers[0]'."""
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


def _reason(err: ErrorDetails) -> str:
    kind = err["type"]
    if kind == "literal_error":
        return f"must be one of: {err.get('ctx', {}).get('expected', '')}".rstrip(": ")
    if kind in _REASONS:
        return _REASONS[kind]
    msg = err["msg"]
    # Pydantic messages read "Input should be ..."; custom errors are already phrased as reasons
    return msg[0].lower() + msg[1:] if msg else kind


def issues_from(exc: ValidationError) -> tuple[FieldIssue, ...]:
    """Flatten a Pydantic ValidationError into ordered, de-duplicated field issues."""
    seen: set[tuple[str, str]] = set()
    issues: list[FieldIssue] = []
    for err in exc.errors(include_url=False):
        key = (format_path(tuple(err["loc"])), _reason(err))
        if key not in seen:
            seen.add(key)
            issues.append(FieldIssue(path=key[0], reason=key[1]))
    return tuple(issues)


class Validator:
    """Validates raw params against a schema model.

    Example:
        >>> validator = Validator()
        >>> params = validator.validate(UpdateDnsRecordParams, {"domain_id": "1", ...})
        >>> params.ttl
        3600
    """

    __slots__ = ("_adapters",)

    def __init__(self) -> None:
        self._adapters: dict[type[BaseModel], TypeAdapter[BaseModel]] = {}

    def _adapter(self, schema: type[M]) -> TypeAdapter[M]:
        if (adapter := self._adapters.get(schema)) is None:
            adapter = self._adapters[schema] = TypeAdapter(schema)
        return adapter  # type: ignore[return-value]

    def validate(self, schema: type[M], params: object, *, tool_name: str | None = None) -> M:
        """Return a validated params model or raise ValidationFailed listing every problem."""
        if params is None:
            params = {}
        if isinstance(params, schema):
            return params
        if not isinstance(params, Mapping):
            raise ValidationFailed((FieldIssue(path="", reason="parameters must be an object"),), tool_name)
        try:
            return self._adapter(schema).validate_python(dict(params))
        except ValidationError as e:
            raise ValidationFailed(issues_from(e), tool_name) from None


_default_validator: Validator | None = None


def get_validator() -> Validator:
    """Shared validator instance."""
    global _default_validator
    return _default_validator if _default_validator else (_default_validator := Validator())


def validate(schema: type[M], params: object, *, tool_name: str | None = None) -> M:
    """Validate with the shared validator."""
    return get_validator().validate(schema, params, tool_name=tool_name)
