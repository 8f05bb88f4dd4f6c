# src/logging/context.py — v1
"""Contextual logging support: attach session_id, user_id, content_type, step.

The preview controller sets these once per processing session so every
record emitted by adapters and processors is attributable to a session.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per processing session.
_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_user_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "user_id", default=None
)
_content_type: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "content_type", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    session_id: str | None = None
    user_id: str | None = None
    content_type: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        session_id=_session_id.get(),
        user_id=_user_id.get(),
        content_type=_content_type.get(),
        step=_step.get(),
    )


def set_session_context(session_id: str, user_id: str | None = None) -> None:
    """Set session-level context (called once per processing session)."""
    _session_id.set(session_id)
    _user_id.set(user_id)


def set_step_context(step: str, content_type: str | None = None) -> None:
    """Set step-level context (validation, dispatch, chunk_003, ...)."""
    _step.set(step)
    if content_type is not None:
        _content_type.set(content_type)


def clear_context() -> None:
    """Reset all context variables."""
    _session_id.set(None)
    _user_id.set(None)
    _content_type.set(None)
    _step.set(None)
