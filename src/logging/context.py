# src/logging/context.py — v1
"""Contextual logging support: attach scan_id and trigger to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set once per scan task.
_scan_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id", default=None
)
_trigger: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trigger", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    scan_id: str | None = None
    trigger: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(scan_id=_scan_id.get(), trigger=_trigger.get())


def set_scan_context(scan_id: str, trigger: str) -> None:
    """Set scan-level context (called at the start of each scan task)."""
    _scan_id.set(scan_id)
    _trigger.set(trigger)


def clear_context() -> None:
    """Reset all context variables."""
    _scan_id.set(None)
    _trigger.set(None)
