# tests/unit/llm/test_client_factory.py — v1
"""Tests for llm/client_factory.py."""

from __future__ import annotations

import pytest

from accessibilityhub.config.settings import Settings
from accessibilityhub.llm.adapters.anthropic_adapter import AnthropicAdapter
from accessibilityhub.llm.adapters.openai_adapter import OpenAIAdapter
from accessibilityhub.llm.client_factory import (
    UnsupportedProviderError,
    create_llm_client,
    create_speech_client,
    register_provider,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        openai_base_url="https://api.groq.com/openai/v1",
        anthropic_api_key="ak-test",
        speech_transcription_model="whisper-large-v3",
    )


class TestCreateLLMClient:
    def test_openai(self, settings):
        client = create_llm_client("openai", "gpt-4o-mini", settings)
        assert isinstance(client, OpenAIAdapter)
        assert client.provider_name == "openai"
        assert client._api_key == "sk-test"
        assert client._base_url == "https://api.groq.com/openai/v1"
        assert client._transcription_model == "whisper-large-v3"

    def test_anthropic(self, settings):
        client = create_llm_client("anthropic", "claude-sonnet-4-20250514", settings)
        assert isinstance(client, AnthropicAdapter)
        assert client._api_key == "ak-test"

    def test_unknown_provider(self, settings):
        with pytest.raises(UnsupportedProviderError, match="Available"):
            create_llm_client("nope", "m", settings)

    def test_explicit_kwargs_win(self, settings):
        client = create_llm_client("openai", "gpt-4o", settings, api_key="override")
        assert client._api_key == "override"

    def test_register_provider(self):
        register_provider(
            "openai-alias", "accessibilityhub.llm.adapters.openai_adapter.OpenAIAdapter"
        )
        assert isinstance(create_llm_client("openai-alias", "gpt-4o"), OpenAIAdapter)


class TestCreateSpeechClient:
    def test_openai_supports_speech(self, settings):
        assert isinstance(create_speech_client("openai", "gpt-4o-mini", settings), OpenAIAdapter)

    def test_anthropic_rejected(self, settings):
        with pytest.raises(UnsupportedProviderError, match="speech"):
            create_speech_client("anthropic", "claude-sonnet-4-20250514", settings)
