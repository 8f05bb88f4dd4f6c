# src/store/base_data_store.py — v1
"""Abstract relational data store interface (quota + processing history).

The pipeline depends on exactly three operations: the atomic quota
decrement, a read of the current quota for display, and an append to the
processing history.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from accessibilityhub.core.models import HistoryRecord, Quota, QuotaType


class BaseDataStore(ABC):
    """Unified interface for the per-user quota/history backend."""

    @abstractmethod
    async def decrement_quota(self, user_id: str, quota_type: QuotaType, amount: int = 1) -> bool:
        """Atomically decrement a counter.

        Returns:
            True if the counter was above zero and has been decremented,
            False if it was exhausted. Transport failures raise.
        """

    @abstractmethod
    async def fetch_quota(self, user_id: str) -> Quota | None:
        """Return the user's remaining quota, or None if no record exists."""

    @abstractmethod
    async def record_history(self, record: HistoryRecord) -> None:
        """Append one row to the processing history."""

    async def close(self) -> None:
        """Release network resources (no-op by default)."""
