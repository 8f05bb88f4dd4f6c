# src/cache/result_cache.py — v1
"""Result cache: TTL and schema-version validation over a BaseCacheStore.

``get`` never returns stale data: an expired or version-mismatched entry is
deleted from the backing store and reported as absent. ``put`` never raises;
storage failures only mean a future miss.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from accessibilityhub.cache.base_cache_store import BaseCacheStore
from accessibilityhub.cache.models import CURRENT_VERSION, CacheEntry
from accessibilityhub.core.models import ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResultCache:
    """Validating cache facade used by the preview controller.

    Args:
        store: Backing key/value store.
        ttl_seconds: Entry lifetime; entries at or past it are invalid.
        version: Schema version tag written to and required of entries.
        clock: Returns the current UTC time (injectable for tests).
    """

    def __init__(
        self,
        store: BaseCacheStore,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        version: str = CURRENT_VERSION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)
        self._version = version
        self._clock = clock

    @property
    def store(self) -> BaseCacheStore:
        return self._store

    async def get(self, key: str) -> CacheEntry | None:
        """Return a valid entry for ``key`` or None, evicting invalid ones."""
        try:
            entry = await self._store.get(key)
        except Exception as e:  # noqa: BLE001 (backend read failure is a miss)
            logger.warning("Cache read failed for %s: %s", key, e)
            return None
        if entry is None:
            return None

        if entry.version != self._version:
            logger.debug(
                "Evicting cache entry %s: version %s != %s",
                key, entry.version, self._version,
            )
            await self._evict(key)
            return None

        age = self._clock() - _as_aware(entry.timestamp)
        if age >= self._ttl:
            logger.debug("Evicting cache entry %s: expired (%s old)", key, age)
            await self._evict(key)
            return None

        return entry

    async def put(
        self,
        key: str,
        result: ServiceResult,
        audio_payload: str | None = None,
    ) -> None:
        """Store a result; failures are logged and swallowed."""
        entry = CacheEntry(
            timestamp=self._clock(),
            version=self._version,
            data=result.model_copy(update={"audio_url": None}),
            audio_payload=audio_payload,
        )
        try:
            await self._store.put(key, entry)
        except Exception as e:  # noqa: BLE001 (storage full, read-only fs, ...)
            logger.warning("Cache write failed for %s: %s", key, e)

    async def _evict(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache eviction failed for %s: %s", key, e)


def _as_aware(ts: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts
