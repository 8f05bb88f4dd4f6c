# src/quota/gate.py — v1
"""Quota gate: one atomic reservation per processing session.

The reservation is a single ``decrement_quota`` RPC, never a read followed
by a write. Any failure denies processing (fail-closed). A reservation is
not refunded if processing later fails.
"""

from __future__ import annotations

import logging

from accessibilityhub.core.models import Quota, QuotaType
from accessibilityhub.store.base_data_store import BaseDataStore

logger = logging.getLogger(__name__)


class QuotaGate:
    """Checks and decrements per-user counters through a data store."""

    def __init__(self, store: BaseDataStore) -> None:
        self._store = store

    async def check_and_reserve(self, user_id: str, quota_type: QuotaType) -> bool:
        """Reserve one unit of ``quota_type``; False when exhausted or on error."""
        try:
            reserved = await self._store.decrement_quota(user_id, quota_type, 1)
        except Exception as e:  # noqa: BLE001 (fail-closed on any store failure)
            logger.error("Quota reservation failed for %s (%s): %s", user_id, quota_type, e)
            return False
        if not reserved:
            logger.info("Quota exhausted for %s (%s)", user_id, quota_type)
        return reserved

    async def remaining(self, user_id: str) -> Quota | None:
        """Read-only quota lookup for display."""
        try:
            return await self._store.fetch_quota(user_id)
        except Exception as e:  # noqa: BLE001
            logger.warning("Quota lookup failed for %s: %s", user_id, e)
            return None
