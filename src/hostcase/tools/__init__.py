"""The tool catalogue.

Each submodule defines one ToolModule; build_registry() registers all of them
in a fixed order and seals the result.

Example:
    >>> registry = build_registry()
    >>> registry.get("update_dns_record").category
    'dns'
"""

from hostcase.foundation.core import ToolModule
from hostcase.foundation.registry import ToolRegistry

from .account import account
from .certificates import certificates
from .databases import databases
from .dns import dns
from .domains import domains
from .mailboxes import mailboxes
from .packages import packages

# Registration (and listing) order
MODULES: tuple[ToolModule, ...] = (account, domains, dns, packages, databases, certificates, mailboxes)


def build_registry(*extra: ToolModule) -> ToolRegistry:
    """Registry holding the full catalogue plus any extra modules, sealed."""
    registry = ToolRegistry()
    for module in (*MODULES, *extra):
        registry.register_module(module)
    return registry.seal()


__all__ = [
    "MODULES", "build_registry",
    "account", "domains", "dns", "packages", "databases", "certificates", "mailboxes",
]
