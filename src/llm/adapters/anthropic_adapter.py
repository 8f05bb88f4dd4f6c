# src/llm/adapters/anthropic_adapter.py — v1
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK. Text and vision only; speech routes must
resolve to a provider implementing BaseSpeechClient.
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any

from accessibilityhub.llm.base_client import BaseLLMClient
from accessibilityhub.llm.models import ImageInput, LLMResponse, Message

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            try:
                import anthropic
            except ImportError as e:
                raise ImportError(
                    "anthropic package required: pip install anthropic"
                ) from e
            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key or "")
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        params: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [self._to_api_message(m) for m in messages],
        }
        if system:
            params["system"] = system
        return await self._create(params)

    async def complete_with_vision(
        self,
        messages: list[Message],
        images: list[ImageInput],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Vision completion: images are attached to the last user turn."""
        api_messages = [self._to_api_message(m) for m in messages]
        last_user = max(
            (i for i, m in enumerate(messages) if m.role == "user"), default=None
        )
        image_blocks = [self._image_block(img) for img in images]
        if last_user is None:
            api_messages.append({"role": "user", "content": image_blocks})
        else:
            text = messages[last_user].content
            api_messages[last_user] = {
                "role": "user",
                "content": [*image_blocks, {"type": "text", "text": text}],
            }

        params: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": api_messages,
        }
        if system:
            params["system"] = system
        return await self._create(params)

    @property
    def supports_vision(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "anthropic"

    # --- Internal helpers ---

    async def _create(self, params: dict[str, Any]) -> LLMResponse:
        start = time.monotonic()
        response = await self._client.messages.create(**params)
        latency_ms = int((time.monotonic() - start) * 1000)
        return LLMResponse(
            content=self._extract_text(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @staticmethod
    def _to_api_message(m: Message) -> dict[str, Any]:
        return {"role": m.role, "content": m.content}

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Extract text from Anthropic response content blocks."""
        for block in response.content:
            if getattr(block, "type", None) == "text":
                return block.text
        return ""

    @staticmethod
    def _image_block(img: ImageInput) -> dict[str, Any]:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": img.media_type,
                "data": base64.b64encode(img.data).decode("ascii"),
            },
        }
