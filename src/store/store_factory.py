# src/store/store_factory.py — v1
"""Factory for the quota/history data store."""

from __future__ import annotations

from accessibilityhub.config.settings import Settings
from accessibilityhub.store.base_data_store import BaseDataStore


def create_data_store(settings: Settings) -> BaseDataStore | None:
    """Return the configured data store, or None when none is configured."""
    if not settings.data_store_url:
        return None
    from accessibilityhub.store.supabase_store import SupabaseDataStore
    return SupabaseDataStore(
        url=settings.data_store_url,
        api_key=settings.data_store_key,
        access_token=settings.data_store_access_token or None,
    )
