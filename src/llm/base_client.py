# src/llm/base_client.py — v1
"""Abstract provider client interfaces.

BaseLLMClient covers text and vision completions; BaseSpeechClient covers
speech-to-text and text-to-speech. Inference adapters depend only on these.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from accessibilityhub.llm.models import AudioInput, ImageInput, LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Text completion."""

    @abstractmethod
    async def complete_with_vision(
        self,
        messages: list[Message],
        images: list[ImageInput],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Vision-enabled completion (images + text)."""

    @property
    @abstractmethod
    def supports_vision(self) -> bool:
        """Whether this provider/model supports image inputs."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic)."""


class BaseSpeechClient(ABC):
    """Speech capabilities of a provider."""

    @abstractmethod
    async def transcribe_audio(
        self,
        audio: AudioInput,
        temperature: float = 0.0,
    ) -> str:
        """Return the transcript of one audio payload."""

    @abstractmethod
    async def synthesize_speech(self, text: str, voice: str) -> bytes:
        """Return encoded audio (mp3) narrating ``text``."""
