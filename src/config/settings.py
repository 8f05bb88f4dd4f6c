# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for API keys, endpoints, limits and ambient settings.
Limits declared here are enforced by the pipeline at its validation boundary.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from accessibilityhub.core.models import normalize_media_type

MIB = 1024 * 1024

SupportedVoice = Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"]


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "openai"
    llm_default_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1024

    # Provider API keys
    openai_api_key: str = ""
    openai_base_url: str = ""  # empty = api.openai.com; set for OpenAI-compatible hosts
    anthropic_api_key: str = ""

    # Per-capability LLM assignment ("provider:model", highest priority)
    llm_vision: str = ""
    llm_document: str = ""
    llm_speech: str = ""

    # === Speech ===
    speech_transcription_model: str = "whisper-1"
    speech_synthesis_model: str = "tts-1"
    speech_voice: SupportedVoice = "alloy"

    # === Text analysis service ===
    text_analysis_api_key: str = ""
    text_analysis_base_url: str = "https://api.lyzerstudio.com/v1"
    text_analysis_model_text: str = "lyzer-text-v1"
    text_analysis_model_vision: str = "lyzer-vision-v1"
    text_analysis_model_analysis: str = "lyzer-analysis-v1"
    text_analysis_max_tokens: int = 2048
    text_analysis_temperature: float = 0.5
    text_analysis_timeout_s: float = 30.0

    # === Limits ===
    max_file_size_mb: int = 50
    max_audio_file_size_mb: int = 25
    audio_chunk_size_bytes: int = MIB
    processing_timeout_s: float = 30.0
    supported_audio_formats: str = "audio/wav,audio/mp3,audio/mpeg"
    supported_image_formats: str = "image/jpeg,image/png,image/webp"
    supported_document_formats: str = "application/pdf"

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "json", "sqlite"] = "json"
    cache_root: Path = Path("~/.accessibilityhub/cache")
    cache_ttl_seconds: int = 3600
    cache_version: str = "1.0"

    # === Data store / identity ===
    data_store_url: str = ""
    data_store_key: str = ""
    data_store_access_token: str = ""
    quota_enabled: bool = False

    # === URL fetch ===
    url_fetch_timeout_s: float = 30.0
    url_user_agent: str = "AccessibilityHub/0.1"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("audio_chunk_size_bytes")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("audio_chunk_size_bytes must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.max_audio_file_size_mb > self.max_file_size_mb:
            errors.append("MAX_AUDIO_FILE_SIZE_MB must be <= MAX_FILE_SIZE_MB")

        if self.processing_timeout_s <= 0:
            errors.append("PROCESSING_TIMEOUT_S must be > 0")

        if self.cache_ttl_seconds <= 0:
            errors.append("CACHE_TTL_SECONDS must be > 0")

        if self.quota_enabled and not self.data_store_url:
            errors.append("QUOTA_ENABLED requires DATA_STORE_URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * MIB

    @property
    def max_audio_file_size_bytes(self) -> int:
        return self.max_audio_file_size_mb * MIB

    @property
    def supported_audio_formats_list(self) -> list[str]:
        """Parse comma-separated audio MIME types."""
        return [f.strip() for f in self.supported_audio_formats.split(",") if f.strip()]

    @property
    def supported_image_formats_list(self) -> list[str]:
        """Parse comma-separated image MIME types."""
        return [f.strip() for f in self.supported_image_formats.split(",") if f.strip()]

    @property
    def supported_document_formats_list(self) -> list[str]:
        """Parse comma-separated document MIME types."""
        return [f.strip() for f in self.supported_document_formats.split(",") if f.strip()]

    @property
    def supported_formats(self) -> set[str]:
        return {
            normalize_media_type(f)
            for f in (
                *self.supported_audio_formats_list,
                *self.supported_image_formats_list,
                *self.supported_document_formats_list,
            )
        }


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
