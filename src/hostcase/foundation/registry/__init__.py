"""Tool registry: name -> descriptor catalog built once at startup."""

from .registry import ToolRegistry

__all__ = ["ToolRegistry"]
