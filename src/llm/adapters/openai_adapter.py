# src/llm/adapters/openai_adapter.py — v1
"""OpenAI adapter implementing BaseLLMClient and BaseSpeechClient.

Uses the official openai SDK. ``base_url`` points it at OpenAI-compatible
hosts (Groq and similar). Speech uses the audio transcription and speech
endpoints.
"""

from __future__ import annotations

import base64
import time
from typing import Any

from accessibilityhub.llm.base_client import BaseLLMClient, BaseSpeechClient
from accessibilityhub.llm.models import AudioInput, ImageInput, LLMResponse, Message


class OpenAIAdapter(BaseLLMClient, BaseSpeechClient):
    """OpenAI GPT / Whisper / TTS adapter."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        base_url: str | None = None,
        transcription_model: str = "whisper-1",
        synthesis_model: str = "tts-1",
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._transcription_model = transcription_model
        self._synthesis_model = synthesis_model
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init AsyncOpenAI client (only on first API call)."""
        if self.__client is None:
            import openai

            self.__client = openai.AsyncOpenAI(
                api_key=self._api_key or None, base_url=self._base_url
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> LLMResponse:
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(
            model=self._model,
            messages=oai_messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return self._to_response(resp, int((time.monotonic() - t0) * 1000))

    async def complete_with_vision(
        self,
        messages: list[Message],
        images: list[ImageInput],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> LLMResponse:
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})

        # Build multimodal content
        content_parts: list[dict[str, Any]] = []
        for m in messages:
            content_parts.append({"type": "text", "text": m.content})
        for img in images:
            b64 = base64.b64encode(img.data).decode()
            content_parts.append({
                "type": "image_url",
                "image_url": {"url": f"data:{img.media_type};base64,{b64}"},
            })
        oai_messages.append({"role": "user", "content": content_parts})

        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(
            model=self._model,
            messages=oai_messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return self._to_response(resp, int((time.monotonic() - t0) * 1000))

    async def transcribe_audio(
        self,
        audio: AudioInput,
        temperature: float = 0.0,
    ) -> str:
        resp = await self._client.audio.transcriptions.create(
            model=self._transcription_model,
            file=(audio.filename, audio.data, audio.media_type),
            temperature=temperature,
        )
        return getattr(resp, "text", "") or ""

    async def synthesize_speech(self, text: str, voice: str) -> bytes:
        resp = await self._client.audio.speech.create(
            model=self._synthesis_model,
            voice=voice,
            input=text,
            response_format="mp3",
        )
        return resp.content

    @property
    def supports_vision(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "openai"

    def _to_response(self, resp: Any, latency_ms: int) -> LLMResponse:
        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency_ms,
            raw_response=resp,
        )
