"""Core tool abstractions: descriptors and the module decorator."""

from .decorator import ToolModule
from .descriptor import Handler, ToolDescriptor

__all__ = ["Handler", "ToolDescriptor", "ToolModule"]
