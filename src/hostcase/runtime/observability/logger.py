"""Structured, secret-masking logging for dispatches.

A BoundLogger carries key/value context (tool, category, dispatch id) and
hands finished LogEntry objects to a renderer. Every string that reaches a
renderer has registered secrets replaced first, so the credential cannot
leak through an event name, a bound field or a nested value.

Quick Start:
    >>> from hostcase.runtime.observability import configure_logging, get_logger
    >>>
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("hostcase.dispatch").bind(tool="list_domains")
    >>> log.info("dispatch succeeded", duration_ms=41.7)
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, TextIO

from hostcase.foundation.errors import JsonDict, redact

from .renderers import ConsoleRenderer, JsonRenderer, LogEntry, LogRenderer, NoOpRenderer

_scoped: ContextVar[JsonDict] = ContextVar("hostcase_log_scope", default={})

_LEVEL_NAMES = {logging.DEBUG: "debug", logging.INFO: "info", logging.WARNING: "warning", logging.ERROR: "error"}


# ─────────────────────────────────────────────────────────────────────────────
# Secret masking
# ─────────────────────────────────────────────────────────────────────────────

_secrets: set[str] = set()


def register_secrets(*secrets: str | Iterable[str]) -> None:
    """Mask these strings in every entry rendered from now on."""
    for s in secrets:
        _secrets.update([s] if isinstance(s, str) else s)
    _secrets.discard("")


def clear_secrets() -> None:
    _secrets.clear()


def _mask(value: Any) -> Any:
    match value:
        case str():
            return redact(value, _secrets)
        case dict():
            return {k: _mask(v) for k, v in value.items()}
        case list() | tuple():
            return [_mask(v) for v in value]
        case _:
            return value


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Add fields to every entry logged inside the block, across awaits in the same task."""
    token = _scoped.set({**_scoped.get(), **fields})
    try:
        yield
    finally:
        _scoped.reset(token)


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class BoundLogger:
    """Immutable logger; bind() and unbind() return new instances.

    `_renderer` and `_level` pin output for one logger (tests, embedded use);
    when unset the process-wide configuration applies.
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int | None = None

    def bind(self, **fields: Any) -> BoundLogger:
        return replace(self, context={**self.context, **fields})

    def unbind(self, *keys: str) -> BoundLogger:
        return replace(self, context={k: v for k, v in self.context.items() if k not in keys})

    def is_enabled_for(self, level: int) -> bool:
        return level >= (_state.level if self._level is None else self._level)

    def _emit(self, level: int, event: str, fields: JsonDict) -> None:
        if not self.is_enabled_for(level):
            return
        context = {**_scoped.get(), **self.context, **fields}
        if _secrets:
            event, context = _mask(event), _mask(context)
        entry = LogEntry(datetime.now(UTC), _LEVEL_NAMES.get(level, "error"), event, context)
        (self._renderer or _state.renderer).render(entry)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit(logging.WARNING, event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit(logging.ERROR, event, fields)

    def exception(self, event: str, **fields: Any) -> None:
        """error() plus the traceback of the exception being handled."""
        self._emit(logging.ERROR, event, {**fields, "exc_info": traceback.format_exc()})


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide configuration
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class _LogState:
    renderer: LogRenderer = field(default_factory=ConsoleRenderer)
    level: int = logging.INFO


_state = _LogState()

_FACTORIES: dict[str, Callable[[TextIO | None, bool | None], LogRenderer]] = {
    "console": lambda output, colors: ConsoleRenderer(colors=colors) if output is None
    else ConsoleRenderer(output=output, colors=colors),
    "json": lambda output, _: JsonRenderer() if output is None else JsonRenderer(output=output),
    "none": lambda *_: NoOpRenderer(),
}


def configure_logging(
    format: str = "console",  # noqa: A002 - mirrors LoggingSettings.format
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Select the process-wide renderer ("console", "json" or "none") and minimum level."""
    if format not in _FACTORIES:
        raise ValueError(f"Unknown log format {format!r}; expected one of: {', '.join(_FACTORIES)}")
    _state.level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    _state.renderer = _FACTORIES[format](output, colors)
    return _state.renderer


def get_logger(name: str | None = None, **context: Any) -> BoundLogger:
    """Logger using the process-wide configuration; `name` is bound as `logger`."""
    if name:
        context["logger"] = name
    return BoundLogger(context=context)
