"""Tool descriptors: the immutable catalog entries held by the registry."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from hostcase.client import APIClient

# async (client, validated params) -> passthrough upstream JSON
Handler = Callable[["APIClient", Any], Awaitable[Any]]

_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_SCHEMAS: dict[type[BaseModel], dict[str, Any]] = {}


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """One named tool: schema plus handler. Created at startup, never mutated.

    Attributes:
        name: Unique snake_case key
        description: What the tool does, for agent tool selection
        params_schema: Pydantic model the raw input is validated against
        handler: Coroutine performing zero or more APIClient calls
        category: Grouping for listings (domains, dns, packages, ...)
        read_only: True when the tool only issues idempotent reads
    """

    name: str
    description: str
    params_schema: type[BaseModel]
    handler: Handler = field(repr=False, compare=False)
    category: str = "general"
    read_only: bool = True

    def __post_init__(self) -> None:
        if not _NAME_RE.match(self.name):
            raise ValueError(f"Tool name '{self.name}' must be snake_case")
        if len(self.description) < 10:
            raise ValueError(f"Tool '{self.name}' description too short for agent selection")

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON schema published to callers."""
        return _json_schema(self.params_schema)


def _json_schema(model: type[BaseModel]) -> dict[str, Any]:
    if (schema := _SCHEMAS.get(model)) is None:
        schema = model.model_json_schema()
        schema.setdefault("properties", {})
        _SCHEMAS[model] = schema
    return schema
