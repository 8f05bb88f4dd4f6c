# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides settings without .env, content units, mock provider clients and
mock inference adapters. No external dependencies; all I/O is mocked.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from accessibilityhub.config.settings import MIB, Settings
from accessibilityhub.core.models import ContentUnit
from accessibilityhub.inference.models import DocumentAnalysis, ImageAnalysisResult, PageStructure
from accessibilityhub.llm.models import LLMResponse
from accessibilityhub.processing.probes import ImageDimensions


# === FIXTURES: Settings ===

_ENV_KEYS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "TEXT_ANALYSIS_API_KEY",
    "DATA_STORE_URL",
    "DATA_STORE_ACCESS_TOKEN",
    "QUOTA_ENABLED",
    "LLM_VISION",
    "LLM_DOCUMENT",
    "LLM_SPEECH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell environment out of Settings()."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> Settings:
    """Defaults with the in-memory cache and no .env file."""
    return Settings(_env_file=None, cache_backend="memory")


# === FIXTURES: Content ===


def make_audio(chunks: int = 1, name: str = "talk.mp3", chunk_size: int = MIB) -> ContentUnit:
    """Audio unit whose n-th chunk is filled with byte value n."""
    data = b"".join(bytes([i]) * chunk_size for i in range(chunks))
    return ContentUnit.from_bytes(data, "audio/mpeg", name, last_modified=1_700_000_000_000)


@pytest.fixture
def audio_factory():
    return make_audio


@pytest.fixture
def audio_unit() -> ContentUnit:
    return make_audio(chunks=3)


@pytest.fixture
def image_unit() -> ContentUnit:
    return ContentUnit.from_bytes(
        b"\x89PNG\r\n\x1a\nfake-image", "image/png", "chart.png", last_modified=1_700_000_000_000
    )


@pytest.fixture
def pdf_unit() -> ContentUnit:
    return ContentUnit.from_bytes(
        b"%PDF-1.4 fake", "application/pdf", "report.pdf", last_modified=1_700_000_000_000
    )


# === FIXTURES: Mock LLM ===


def llm_response(content: str) -> LLMResponse:
    return LLMResponse(
        content=content,
        input_tokens=100,
        output_tokens=50,
        model="gpt-4o-mini",
        provider="openai",
        latency_ms=120,
    )


@pytest.fixture
def mock_llm_client() -> AsyncMock:
    """Mock BaseLLMClient answering with a JSON caption."""
    client = AsyncMock()
    client.complete.return_value = llm_response('{"summary": "Short.", "simplified_text": "Easy."}')
    client.complete_with_vision.return_value = llm_response(
        '{"caption": "A bar chart", "tags": ["chart"], "text": "Sales 2024"}'
    )
    client.supports_vision = True
    client.provider_name = "openai"
    return client


@pytest.fixture
def mock_speech_client() -> AsyncMock:
    """Mock BaseSpeechClient."""
    client = AsyncMock()
    client.transcribe_audio.return_value = "hello world"
    client.synthesize_speech.return_value = b"ID3-mp3-bytes"
    return client


# === FIXTURES: Mock inference adapters ===


@pytest.fixture
def speech() -> AsyncMock:
    """SpeechAdapter double: each segment transcribes to its first byte value."""
    adapter = AsyncMock()
    adapter.transcribe.side_effect = lambda segment: str(segment.data[0])
    adapter.synthesize.return_value = b"narration-mp3"
    return adapter


@pytest.fixture
def vision() -> AsyncMock:
    adapter = AsyncMock()
    adapter.analyze.return_value = ImageAnalysisResult(
        caption="A bar chart", tags=["chart", "sales"], extracted_text="Sales 2024"
    )
    adapter.answer_question.return_value = "Three bars."
    return adapter


@pytest.fixture
def document() -> AsyncMock:
    adapter = AsyncMock()
    adapter.parse.return_value = DocumentAnalysis(
        text="Full report text.",
        page_structure=[PageStructure(page_number=1, text_length=17)],
        metadata={"title": "Report"},
        summary="A report.",
        simplified_text="Easy report.",
        simplified=True,
    )
    return adapter


@pytest.fixture
def duration_probe() -> AsyncMock:
    return AsyncMock(return_value=12.5)


@pytest.fixture
def dimension_probe() -> AsyncMock:
    return AsyncMock(return_value=ImageDimensions(width=640, height=480))
