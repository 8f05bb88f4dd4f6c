# src/cache/memory_store.py — v1
"""Process-local in-memory cache store (CACHE_BACKEND=memory)."""

from __future__ import annotations

from accessibilityhub.cache.base_cache_store import BaseCacheStore
from accessibilityhub.cache.models import CacheEntry


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    async def put(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def list_keys(self) -> list[str]:
        return list(self._entries)
