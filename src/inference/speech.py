# src/inference/speech.py — v1
"""Speech adapter: speech-to-text and text-to-speech behind one contract.

Transport errors are wrapped into TranscriptionFailed / SynthesisFailed so
callers never see raw SDK exceptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from accessibilityhub.core.errors import SynthesisFailed, TranscriptionFailed
from accessibilityhub.core.models import ContentUnit
from accessibilityhub.llm.models import AudioInput

if TYPE_CHECKING:
    from accessibilityhub.llm.base_client import BaseSpeechClient

logger = logging.getLogger(__name__)

# Speech synthesis endpoints cap the input length.
MAX_SYNTHESIS_CHARS = 4096


class SpeechAdapter:
    """Wraps a BaseSpeechClient.

    Args:
        client: Provider client implementing BaseSpeechClient.
        default_voice: Voice used when ``synthesize`` gets none.
        temperature: Sampling temperature for transcription.
    """

    def __init__(
        self,
        client: BaseSpeechClient,
        default_voice: str = "alloy",
        temperature: float = 0.0,
    ) -> None:
        self._client = client
        self._default_voice = default_voice
        self._temperature = temperature

    async def transcribe(self, content: ContentUnit) -> str:
        """Return the transcript of an audio unit (or one slice of it)."""
        audio = AudioInput(
            data=content.data,
            media_type=content.media_type,
            filename=content.name,
        )
        try:
            text = await self._client.transcribe_audio(audio, temperature=self._temperature)
        except Exception as e:
            logger.error("Transcription error for %s: %s", content.name, e)
            raise TranscriptionFailed(f"Failed to transcribe audio: {e}") from e
        return (text or "").strip()

    async def synthesize(self, text: str, voice: str | None = None) -> bytes:
        """Return mp3 audio narrating ``text`` (truncated to the endpoint cap)."""
        if not text.strip():
            raise SynthesisFailed("Nothing to synthesize")
        if len(text) > MAX_SYNTHESIS_CHARS:
            logger.info(
                "Truncating synthesis input from %d to %d chars",
                len(text), MAX_SYNTHESIS_CHARS,
            )
            text = text[:MAX_SYNTHESIS_CHARS]
        try:
            audio = await self._client.synthesize_speech(text, voice or self._default_voice)
        except Exception as e:
            logger.error("Speech synthesis error: %s", e)
            raise SynthesisFailed(f"Speech synthesis failed: {e}") from e
        if not audio:
            raise SynthesisFailed("Speech synthesis returned no audio")
        return audio
