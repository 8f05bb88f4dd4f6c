# tests/unit/api/test_facade.py — v1
"""Tests for api/facade.py: controller wiring from settings."""

from __future__ import annotations

import pytest

from accessibilityhub.api.facade import build_controller, has_credentials
from accessibilityhub.config.settings import Settings
from accessibilityhub.inference.text_analysis import TextAnalysisAdapter
from accessibilityhub.llm.client_factory import UnsupportedProviderError
from accessibilityhub.processing.orchestrator import PreviewController
from accessibilityhub.quota.gate import QuotaGate
from accessibilityhub.store.supabase_store import SupabaseDataStore


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, cache_backend="memory", openai_api_key="sk-test", **overrides)


class TestBuildController:
    def test_minimal(self):
        controller = build_controller(_settings())
        assert isinstance(controller, PreviewController)
        assert controller._quota_gate is None
        assert controller._data_store is None
        assert controller._identity is None
        assert controller._text_analysis is None
        assert controller._cache is not None

    def test_document_ai_disabled_without_key(self):
        settings = _settings(llm_document="anthropic:claude-sonnet-4-20250514")
        controller = build_controller(settings)
        assert controller._document._client is None

    def test_cache_disabled(self):
        assert build_controller(_settings(cache_enabled=False))._cache is None

    def test_full_stack(self):
        settings = _settings(
            text_analysis_api_key="lyz",
            data_store_url="https://proj.supabase.co",
            data_store_key="anon",
            quota_enabled=True,
        )
        controller = build_controller(settings)
        assert isinstance(controller._text_analysis, TextAnalysisAdapter)
        assert isinstance(controller._data_store, SupabaseDataStore)
        assert isinstance(controller._quota_gate, QuotaGate)
        assert controller._identity is not None

    def test_speech_requires_speech_provider(self):
        with pytest.raises(UnsupportedProviderError):
            build_controller(_settings(llm_speech="anthropic:claude-sonnet-4-20250514"))


class TestHasCredentials:
    @pytest.mark.parametrize(
        "provider, kwargs, expected",
        [
            ("openai", {"openai_api_key": "sk"}, True),
            ("openai", {}, False),
            ("anthropic", {"anthropic_api_key": "a"}, True),
            ("anthropic", {}, False),
            ("custom", {}, True),
        ],
    )
    def test_has_credentials(self, provider, kwargs, expected):
        assert has_credentials(provider, Settings(_env_file=None, **kwargs)) is expected
