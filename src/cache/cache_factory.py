# src/cache/cache_factory.py — v1
"""Factory for cache store and result cache instantiation."""

from __future__ import annotations

from accessibilityhub.cache.base_cache_store import BaseCacheStore
from accessibilityhub.cache.result_cache import ResultCache
from accessibilityhub.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from accessibilityhub.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore()

    if backend == "json":
        from accessibilityhub.cache.json_store import JsonCacheStore
        return JsonCacheStore(cache_root=settings.cache_root)

    if backend == "sqlite":
        from accessibilityhub.cache.sqlite_store import SqliteCacheStore
        db_path = settings.cache_root.expanduser() / "accessibilityhub_cache.db"
        return SqliteCacheStore(db_path=db_path)

    raise ValueError(f"Unsupported cache backend: {backend!r}")


def create_result_cache(settings: Settings) -> ResultCache | None:
    """Build the TTL/version-validating cache, or None when caching is off."""
    if not settings.cache_enabled:
        return None
    return ResultCache(
        store=create_cache_store(settings),
        ttl_seconds=settings.cache_ttl_seconds,
        version=settings.cache_version,
    )
