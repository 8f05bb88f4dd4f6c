# src/cache/base_cache_store.py — v1
"""Abstract cache store interface.

Stores are dumb key/value persistence for CacheEntry objects; validity rules
(TTL, version) live in cache/result_cache.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from accessibilityhub.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve the raw cache entry for a fingerprint key."""

    @abstractmethod
    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store cache entry."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove cache entry."""

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """List all stored keys."""
