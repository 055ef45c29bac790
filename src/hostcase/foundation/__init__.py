"""Foundation: errors, configuration, schemas, descriptors and the registry.

Import order matters: errors has no internal dependencies and everything
else builds on it.
"""

from .errors import ErrorKind, ErrorRecord, HostcaseError, ResultEnvelope
from .config import Config, HostcaseSettings, get_settings, load_config
from .schema import ToolParams, Validator
from .core import ToolDescriptor, ToolModule
from .registry import ToolRegistry

__all__ = [
    "ErrorKind", "ErrorRecord", "HostcaseError", "ResultEnvelope",
    "Config", "HostcaseSettings", "get_settings", "load_config",
    "ToolParams", "Validator",
    "ToolDescriptor", "ToolModule",
    "ToolRegistry",
]
