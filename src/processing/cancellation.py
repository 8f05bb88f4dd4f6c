# src/processing/cancellation.py — v1
"""Per-session cancellation signal.

A token is created for every processing session. Starting a new session,
an explicit cancel and the session timer all go through ``cancel()``; only
the reason differs, which decides whether ProcessingCancelled or
TimeoutExceeded is raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from accessibilityhub.core.errors import ProcessingCancelled, TimeoutExceeded

logger = logging.getLogger(__name__)

T = TypeVar("T")

REASON_CANCELLED = "cancelled"
REASON_SUPERSEDED = "superseded"
REASON_TIMEOUT = "timeout"


class CancellationToken:
    """Cooperative cancellation signal backed by an asyncio.Event."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = REASON_CANCELLED) -> None:
        """Raise the signal. The first reason wins."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        self._clear_timer()
        logger.debug("Cancellation raised: %s", reason)

    def cancel_after(self, seconds: float) -> None:
        """Arm a timer that cancels with reason 'timeout'."""
        self._clear_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(seconds, self.cancel, REASON_TIMEOUT)

    def disarm(self) -> None:
        """Stop the timer without raising the signal."""
        self._clear_timer()

    def error(self) -> ProcessingCancelled:
        """Build the failure matching the cancellation reason."""
        if self._reason == REASON_TIMEOUT:
            return TimeoutExceeded()
        return ProcessingCancelled()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise self.error()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the signal fires first.

        On cancellation the inner task is cancelled and the matching
        ProcessingCancelled/TimeoutExceeded is raised.
        """
        self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if self._event.is_set():
            if task in done and not task.cancelled():
                task.exception()  # mark retrieved; the result is discarded
            raise self.error()
        return task.result()

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
