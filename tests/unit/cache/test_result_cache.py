# tests/unit/cache/test_result_cache.py — v1
"""Tests for cache/result_cache.py: TTL, version invalidation, swallowed writes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from accessibilityhub.cache.memory_store import MemoryCacheStore
from accessibilityhub.cache.models import CacheEntry
from accessibilityhub.cache.result_cache import ResultCache
from accessibilityhub.core.models import ServiceResult

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return MemoryCacheStore()


@pytest.fixture
def result():
    return ServiceResult(accessible="hello", analysis='{"method": "chunked"}')


def _entry(result, *, age: timedelta, version: str = "1.0") -> CacheEntry:
    return CacheEntry(timestamp=NOW - age, version=version, data=result)


class TestResultCacheGet:
    @pytest.mark.asyncio
    async def test_fresh_entry_is_returned(self, store, result):
        await store.put("k", _entry(result, age=timedelta(minutes=59)))
        cache = ResultCache(store, clock=lambda: NOW)
        entry = await cache.get("k")
        assert entry is not None
        assert entry.data.accessible == "hello"

    @pytest.mark.asyncio
    async def test_expired_entry_is_absent_and_evicted(self, store, result):
        await store.put("k", _entry(result, age=timedelta(hours=1, seconds=1)))
        cache = ResultCache(store, clock=lambda: NOW)
        assert await cache.get("k") is None
        # Raw read on the backing store: the entry is gone
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_entry_exactly_at_ttl_is_invalid(self, store, result):
        await store.put("k", _entry(result, age=timedelta(hours=1)))
        cache = ResultCache(store, clock=lambda: NOW)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_old_version_is_absent_and_evicted(self, store, result):
        await store.put("k", _entry(result, age=timedelta(seconds=5), version="0.9"))
        cache = ResultCache(store, version="1.0", clock=lambda: NOW)
        assert await cache.get("k") is None
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_naive_timestamp_treated_as_utc(self, store, result):
        naive = CacheEntry(
            timestamp=(NOW - timedelta(minutes=1)).replace(tzinfo=None),
            version="1.0",
            data=result,
        )
        await store.put("k", naive)
        cache = ResultCache(store, clock=lambda: NOW)
        assert await cache.get("k") is not None

    @pytest.mark.asyncio
    async def test_read_failure_is_a_miss(self, result):
        broken = AsyncMock()
        broken.get.side_effect = OSError("disk gone")
        cache = ResultCache(broken, clock=lambda: NOW)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_missing_key(self, store):
        cache = ResultCache(store, clock=lambda: NOW)
        assert await cache.get("nope") is None


class TestResultCachePut:
    @pytest.mark.asyncio
    async def test_put_stamps_version_and_time(self, store, result):
        cache = ResultCache(store, version="1.0", clock=lambda: NOW)
        await cache.put("k", result)
        raw = await store.get("k")
        assert raw.version == "1.0"
        assert raw.timestamp == NOW

    @pytest.mark.asyncio
    async def test_put_strips_audio_handle_and_keeps_payload(self, store):
        cache = ResultCache(store, clock=lambda: NOW)
        await cache.put(
            "k",
            ServiceResult(accessible="a", analysis="{}", audio_url="blob:accessibilityhub/x"),
            audio_payload="bXAz",
        )
        raw = await store.get("k")
        assert raw.data.audio_url is None
        assert raw.audio_payload == "bXAz"

    @pytest.mark.asyncio
    async def test_put_never_raises(self, result):
        broken = AsyncMock()
        broken.put.side_effect = OSError("quota exceeded on storage")
        cache = ResultCache(broken, clock=lambda: NOW)
        await cache.put("k", result)  # no exception
        broken.put.assert_awaited_once()
