# src/processing/chunked_audio.py — v1
"""Chunked audio processor: sequential segment transcription + narration.

Audio is split into fixed-size byte segments, transcribed strictly in byte
order and joined with single spaces. Progress runs linearly 0-80 across the
segments; the remaining 80-100 belongs to post-processing. Synthesis of the
joined transcript is best-effort: a failure leaves the result without audio.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Callable

from accessibilityhub.core.errors import SynthesisFailed
from accessibilityhub.core.models import ContentUnit, ServiceResult
from accessibilityhub.inference.speech import SpeechAdapter
from accessibilityhub.processing.cancellation import CancellationToken
from accessibilityhub.processing.handles import HandleRegistry
from accessibilityhub.processing.probes import DurationProbe, probe_audio_duration

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024
SEGMENT_PROGRESS_SHARE = 80.0
SYNTHESIZED_MEDIA_TYPE = "audio/mpeg"

ProgressCallback = Callable[[float], None]
HandleCallback = Callable[[str], None]


def segment_count(size: int, chunk_size: int) -> int:
    return math.ceil(size / chunk_size)


class ChunkedAudioProcessor:
    """Transcribes audio segment by segment under a cancellation token.

    Args:
        speech: Speech adapter used for transcription and synthesis.
        handles: Registry that receives the synthesized audio.
        duration_probe: Async probe returning the audio length in seconds.
        chunk_size: Segment size in bytes.
        voice: Voice for the narrated artifact (adapter default when None).
    """

    def __init__(
        self,
        speech: SpeechAdapter,
        handles: HandleRegistry,
        duration_probe: DurationProbe = probe_audio_duration,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        voice: str | None = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._speech = speech
        self._handles = handles
        self._duration_probe = duration_probe
        self._chunk_size = chunk_size
        self._voice = voice

    async def process(
        self,
        content: ContentUnit,
        token: CancellationToken,
        on_progress: ProgressCallback | None = None,
        on_handle: HandleCallback | None = None,
    ) -> ServiceResult:
        """Transcribe, narrate and describe one audio unit.

        ``on_handle`` is told about every handle created so the caller can
        release it if the session is abandoned.
        """
        total = segment_count(content.size, self._chunk_size)
        logger.info("Transcribing %s in %d segment(s)", content.name, total)

        transcripts: list[str] = []
        for index in range(total):
            token.raise_if_cancelled()
            start = index * self._chunk_size
            segment = content.slice(start, min(start + self._chunk_size, content.size))
            text = await token.guard(self._speech.transcribe(segment))
            transcripts.append(text)
            if on_progress is not None:
                on_progress(SEGMENT_PROGRESS_SHARE * (index + 1) / total)

        transcript = " ".join(transcripts)

        audio_url = await self._narrate(transcript, token, on_handle)
        duration = await token.guard(self._duration_probe(content))

        analysis = {
            "duration": duration,
            "format": content.media_type,
            "size": content.size,
            "method": "chunked",
            "chunks": total,
            "word_count": len(transcript.split()),
        }
        return ServiceResult(
            accessible=transcript,
            analysis=json.dumps(analysis, indent=2),
            audio_url=audio_url,
        )

    async def _narrate(
        self,
        transcript: str,
        token: CancellationToken,
        on_handle: HandleCallback | None,
    ) -> str | None:
        try:
            audio = await token.guard(self._speech.synthesize(transcript, self._voice))
        except SynthesisFailed as e:
            logger.warning("Speech synthesis failed, continuing without audio: %s", e.message)
            return None

        handle = self._handles.create(audio, SYNTHESIZED_MEDIA_TYPE)
        if on_handle is not None:
            on_handle(handle)
        return handle
