# src/cache/json_store.py — v1
"""JSON file-based cache store (default CACHE_BACKEND=json).

Stores cache entries as individual JSON files under CACHE_ROOT, one per key.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from accessibilityhub.cache.base_cache_store import BaseCacheStore
from accessibilityhub.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return CacheEntry(**data["entry"])
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValidationError) as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry."""
        path = self._entry_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"key": key, "entry": entry.model_dump(mode="json")}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        path = self._entry_path(key)
        if path.exists():
            path.unlink()

    async def list_keys(self) -> list[str]:
        """List keys of all readable entries."""
        keys: list[str] = []
        if not self._root.is_dir():
            return keys

        for path in self._root.glob("*.json"):
            try:
                keys.append(json.loads(path.read_text(encoding="utf-8"))["key"])
            except (OSError, json.JSONDecodeError, KeyError):
                continue

        return keys

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key.

        Keys embed arbitrary file names, so the file name is a digest.
        """
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()  # noqa: S324
        return self._root / f"{digest}.json"
