# tests/unit/inference/test_speech.py — v1
"""Tests for inference/speech.py."""

from __future__ import annotations

import pytest

from accessibilityhub.core.errors import SynthesisFailed, TranscriptionFailed
from accessibilityhub.core.models import ContentUnit
from accessibilityhub.inference.speech import MAX_SYNTHESIS_CHARS, SpeechAdapter


@pytest.fixture
def unit():
    return ContentUnit.from_bytes(b"audio", "audio/wav", "memo.wav")


class TestTranscribe:
    @pytest.mark.asyncio
    async def test_strips_text(self, mock_speech_client, unit):
        mock_speech_client.transcribe_audio.return_value = "  hello  "
        assert await SpeechAdapter(mock_speech_client).transcribe(unit) == "hello"
        audio = mock_speech_client.transcribe_audio.call_args.args[0]
        assert (audio.filename, audio.media_type, audio.data) == ("memo.wav", "audio/wav", b"audio")

    @pytest.mark.asyncio
    async def test_wraps_transport_error(self, mock_speech_client, unit):
        mock_speech_client.transcribe_audio.side_effect = ConnectionError("reset")
        with pytest.raises(TranscriptionFailed, match="Failed to transcribe audio: reset"):
            await SpeechAdapter(mock_speech_client).transcribe(unit)


class TestSynthesize:
    @pytest.mark.asyncio
    async def test_default_voice(self, mock_speech_client):
        adapter = SpeechAdapter(mock_speech_client, default_voice="nova")
        assert await adapter.synthesize("hello") == b"ID3-mp3-bytes"
        mock_speech_client.synthesize_speech.assert_awaited_once_with("hello", "nova")

    @pytest.mark.asyncio
    async def test_truncates_long_input(self, mock_speech_client):
        await SpeechAdapter(mock_speech_client).synthesize("x" * (MAX_SYNTHESIS_CHARS + 10))
        sent = mock_speech_client.synthesize_speech.call_args.args[0]
        assert len(sent) == MAX_SYNTHESIS_CHARS

    @pytest.mark.asyncio
    async def test_empty_text(self, mock_speech_client):
        with pytest.raises(SynthesisFailed):
            await SpeechAdapter(mock_speech_client).synthesize("   ")
        mock_speech_client.synthesize_speech.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wraps_error(self, mock_speech_client):
        mock_speech_client.synthesize_speech.side_effect = RuntimeError("503")
        with pytest.raises(SynthesisFailed, match="503"):
            await SpeechAdapter(mock_speech_client).synthesize("hi")

    @pytest.mark.asyncio
    async def test_empty_audio(self, mock_speech_client):
        mock_speech_client.synthesize_speech.return_value = b""
        with pytest.raises(SynthesisFailed, match="no audio"):
            await SpeechAdapter(mock_speech_client).synthesize("hi")
