"""Central registry of tool descriptors.

The registry provides:
- Registration with name uniqueness
- Lookup by name
- Stable, registration-ordered listing
- A startup phase that ends with seal(); afterwards the registry is
  read-only process-wide state and needs no locking
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from difflib import get_close_matches

from hostcase.foundation.core import ToolDescriptor
from hostcase.foundation.errors import DuplicateToolError, RegistryClosedError, ToolNotFoundError


class ToolRegistry:
    """Catalog of all available tools.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register_module(domains)
        >>> registry.seal()
        >>> registry.get("list_domains").category
        'domains'
        >>> [d.name for d in registry.list()][:2]
        ['list_domains', 'get_domain_info']
    """

    __slots__ = ("_tools", "_sealed")

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._sealed = False

    def register(self, descriptor: ToolDescriptor) -> None:
        """Add a descriptor. Raises DuplicateToolError or RegistryClosedError."""
        name = descriptor.name
        if self._sealed:
            raise RegistryClosedError(name)
        if name in self._tools:
            raise DuplicateToolError(name)
        self._tools[name] = descriptor

    def register_all(self, *descriptors: ToolDescriptor) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def register_module(self, module: Iterable[ToolDescriptor]) -> None:
        """Register every descriptor of a ToolModule, in declaration order."""
        self.register_all(*module)

    def seal(self) -> ToolRegistry:
        """End the startup phase. Idempotent."""
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, name: str) -> ToolDescriptor:
        """Descriptor by name. Raises ToolNotFoundError naming up to three close matches."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name, get_close_matches(str(name), self.names(), n=3)) from None

    def list(self) -> Iterable[ToolDescriptor]:
        """Lazy, restartable view of descriptors in registration order."""
        return self._tools.values()

    def names(self) -> list[str]:
        return list(self._tools)

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(d.category for d in self._tools.values()))

    def by_category(self, category: str) -> list[ToolDescriptor]:
        return [d for d in self._tools.values() if d.category == category]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"ToolRegistry({len(self._tools)} tools, {state})"
