"""Log entries and renderers: where and how a log line becomes output.

Everything goes to stderr unless told otherwise; under MCP stdio transport
stdout carries the protocol stream.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, TextIO, runtime_checkable

import orjson

from hostcase.foundation.errors import JsonDict

_RESET = "\033[0m"
_LEVEL_STYLE = {"debug": "\033[2m", "info": "\033[32m", "warning": "\033[33m", "error": "\033[1;31m"}


@dataclass(frozen=True, slots=True)
class LogEntry:
    at: datetime
    level: str
    event: str
    context: JsonDict

    @property
    def ts_iso(self) -> str:
        return self.at.isoformat()

    @property
    def ts_human(self) -> str:
        return f"{self.at:%H:%M:%S}.{self.at.microsecond // 1000:03d}"


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Single-line human output: `12:00:01.250 WARNING list_domains: dispatch failed kind="Auth"`.

    The bound `tool` is pulled to the front; remaining fields follow sorted by
    key with JSON-encoded values. Level is colored when writing to a TTY.
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.colors is None:
            isatty = getattr(self.output, "isatty", None)
            self.colors = bool(isatty and isatty())

    def render(self, entry: LogEntry) -> None:
        fields = dict(entry.context)
        trace = fields.pop("exc_info", None)
        tool = fields.pop("tool", None)

        level = entry.level.upper().ljust(7)
        if self.colors:
            level = f"{_LEVEL_STYLE.get(entry.level, '')}{level}{_RESET}"
        words = [entry.ts_human] if self.show_timestamp else []
        words.append(level)
        if tool is not None:
            words.append(f"{tool}:")
        words.append(entry.event)
        words.extend(f"{key}={_encode(value)}" for key, value in sorted(fields.items()))

        line = " ".join(words)
        if trace:
            line = f"{line}\n{str(trace).rstrip()}"
        self.output.write(line + "\n")


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line, for log shipping."""

    output: TextIO = field(default_factory=lambda: sys.stderr)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event, **entry.context}
        self.output.write(orjson.dumps(record, option=orjson.OPT_NON_STR_KEYS, default=str).decode() + "\n")


@dataclass(slots=True)
class NoOpRenderer:
    def render(self, entry: LogEntry) -> None:
        return None


@dataclass(slots=True)
class CaptureRenderer:
    """Collects entries in memory (tests)."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self) -> list[str]:
        return [e.event for e in self.entries]


def _encode(value: Any) -> str:
    return orjson.dumps(value, option=orjson.OPT_NON_STR_KEYS, default=str).decode()
