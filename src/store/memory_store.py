# src/store/memory_store.py — v1
"""In-memory data store for local/offline use and tests."""

from __future__ import annotations

from accessibilityhub.core.models import HistoryRecord, Quota, QuotaType
from accessibilityhub.store.base_data_store import BaseDataStore


class MemoryDataStore(BaseDataStore):
    """Dict-backed quota and history store.

    Decrements are atomic with respect to the event loop: the read and
    the write happen without an intervening suspension point.
    """

    def __init__(self, quotas: dict[str, Quota] | None = None) -> None:
        self._quotas: dict[str, Quota] = dict(quotas or {})
        self.history: list[HistoryRecord] = []

    def set_quota(self, quota: Quota) -> None:
        self._quotas[quota.user_id] = quota

    async def decrement_quota(self, user_id: str, quota_type: QuotaType, amount: int = 1) -> bool:
        quota = self._quotas.get(user_id)
        if quota is None:
            return False
        remaining = getattr(quota, quota_type)
        if remaining < amount:
            return False
        self._quotas[user_id] = quota.model_copy(update={quota_type: remaining - amount})
        return True

    async def fetch_quota(self, user_id: str) -> Quota | None:
        return self._quotas.get(user_id)

    async def record_history(self, record: HistoryRecord) -> None:
        self.history.append(record)
