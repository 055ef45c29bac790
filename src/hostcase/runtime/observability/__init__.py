"""Structured logging with bound context and secret masking."""

from .logger import BoundLogger, clear_secrets, configure_logging, get_logger, log_context, register_secrets
from .renderers import CaptureRenderer, ConsoleRenderer, JsonRenderer, LogEntry, LogRenderer, NoOpRenderer

__all__ = [
    # Logger
    "BoundLogger", "get_logger", "configure_logging", "log_context",
    # Masking
    "register_secrets", "clear_secrets",
    # Output
    "LogEntry", "LogRenderer", "ConsoleRenderer", "JsonRenderer", "NoOpRenderer", "CaptureRenderer",
]
