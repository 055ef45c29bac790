"""Decorator-based tool definition.

Groups handlers into a ToolModule; each decorated coroutine becomes a
ToolDescriptor whose params schema is taken from the handler's type hints.

Example:
    >>> domains = ToolModule("domains")
    >>>
    >>> @domains.tool()
    ... async def get_domain_info(client: APIClient, params: DomainIdParams) -> Any:
    ...     '''Get detailed information about a specific domain.'''
    ...     return await client.get(f"/domain/{params.domain_id}")
    ...
    >>> registry.register_module(domains)
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from typing import Any, get_type_hints

from pydantic import BaseModel

from hostcase.foundation.schema import EmptyParams

from .descriptor import Handler, ToolDescriptor


def _params_schema(func: Handler) -> type[BaseModel]:
    """Schema from the annotation of the handler's second parameter (EmptyParams if absent)."""
    params = list(inspect.signature(func).parameters.values())
    if len(params) < 2:
        return EmptyParams
    hints = get_type_hints(func)
    schema = hints.get(params[1].name)
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        raise TypeError(f"{func.__name__}: params annotation must be a pydantic model, got {schema!r}")
    return schema


def _first_doc_line(func: Callable[..., Any]) -> str:
    doc = inspect.getdoc(func) or ""
    return doc.strip().split("\n", 1)[0].strip()


class ToolModule:
    """Ordered group of tool descriptors sharing a category."""

    __slots__ = ("category", "_descriptors")

    def __init__(self, category: str) -> None:
        self.category = category
        self._descriptors: list[ToolDescriptor] = []

    def tool(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        read_only: bool = True,
    ) -> Callable[[Handler], Handler]:
        """Register the decorated handler in this module. Returns the handler unchanged."""

        def decorator(func: Handler) -> Handler:
            if not inspect.iscoroutinefunction(func):
                raise TypeError(f"Tool handler '{func.__name__}' must be async")
            self._descriptors.append(ToolDescriptor(
                name=name or func.__name__,
                description=description or _first_doc_line(func),
                params_schema=_params_schema(func),
                handler=func,
                category=self.category,
                read_only=read_only,
            ))
            return func

        return decorator

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"ToolModule({self.category!r}, tools={len(self._descriptors)})"
