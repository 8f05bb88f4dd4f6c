# src/core/models.py — v1
"""Core domain models shared across the pipeline.

ContentUnit is the normalized unit of work, ServiceResult the normalized
adapter output and PreviewState the single state rendered by consumers.
"""

from __future__ import annotations

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ContentType = Literal["audio", "image", "pdf", "unknown"]
QuotaType = Literal["audio_minutes", "image_count", "pdf_pages"]

QUOTA_TYPE_BY_CONTENT: dict[str, QuotaType] = {
    "audio": "audio_minutes",
    "image": "image_count",
    "pdf": "pdf_pages",
}


# Registered and legacy spellings of the supported types.
MEDIA_TYPE_ALIASES: dict[str, str] = {
    "audio/x-wav": "audio/wav",
    "audio/wave": "audio/wav",
    "audio/vnd.wave": "audio/wav",
    "audio/x-pn-wav": "audio/wav",
    "audio/mpeg3": "audio/mpeg",
    "audio/x-mpeg-3": "audio/mpeg",
    "audio/x-mp3": "audio/mp3",
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "application/x-pdf": "application/pdf",
}


def normalize_media_type(media_type: str) -> str:
    """Drop parameters, lower-case and map aliases to the canonical type."""
    mt = media_type.split(";", 1)[0].strip().lower()
    return MEDIA_TYPE_ALIASES.get(mt, mt)


def classify_media_type(media_type: str) -> ContentType:
    """Classify a MIME type into one of the pipeline content classes."""
    mt = normalize_media_type(media_type)
    if mt.startswith("audio/"):
        return "audio"
    if mt.startswith("image/"):
        return "image"
    if mt == "application/pdf":
        return "pdf"
    return "unknown"


class ContentUnit(BaseModel):
    """Immutable in-memory representation of one file or fetched URL body."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    media_type: str
    name: str
    size: int
    last_modified: int | None = None  # epoch milliseconds

    @property
    def content_type(self) -> ContentType:
        return classify_media_type(self.media_type)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        media_type: str,
        name: str,
        last_modified: int | None = None,
    ) -> ContentUnit:
        return cls(
            data=data,
            media_type=normalize_media_type(media_type),
            name=name,
            size=len(data),
            last_modified=last_modified,
        )

    @classmethod
    def from_path(cls, path: Path | str, media_type: str | None = None) -> ContentUnit:
        """Read a local file, guessing its MIME type from the extension."""
        path = Path(path)
        data = path.read_bytes()
        if media_type is None:
            guessed, _ = mimetypes.guess_type(path.name)
            media_type = guessed or "application/octet-stream"
        mtime_ms = int(path.stat().st_mtime * 1000)
        return cls.from_bytes(data, media_type, path.name, last_modified=mtime_ms)

    def slice(self, start: int, end: int) -> ContentUnit:
        """Return a byte-range of this unit carrying the same file metadata."""
        return ContentUnit.from_bytes(
            self.data[start:end],
            self.media_type,
            self.name,
            last_modified=self.last_modified,
        )


class ServiceResult(BaseModel):
    """Normalized output of any adapter path; unit of caching."""

    accessible: str
    analysis: str
    audio_url: str | None = None


class PreviewState(BaseModel):
    """Single source of truth rendered by the presentation layer."""

    model_config = ConfigDict(frozen=True)

    original: str = ""
    accessible: str = ""
    analysis: str = ""
    content_type: ContentType | None = None
    audio_url: str | None = None
    error: str | None = None


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    CACHE_HIT = "cache_hit"
    DISPATCHING = "dispatching"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            ProcessingStatus.COMPLETED,
            ProcessingStatus.FAILED,
            ProcessingStatus.CANCELLED,
        )


class SessionSnapshot(BaseModel):
    """What listeners receive each time the controller publishes."""

    model_config = ConfigDict(frozen=True)

    session_id: int
    status: ProcessingStatus
    progress: float
    preview: PreviewState

    @property
    def processing(self) -> bool:
        return not self.status.is_terminal and self.status != ProcessingStatus.IDLE


class Notification(BaseModel):
    """Transient user-facing message."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class Quota(BaseModel):
    """Per-user remaining units, owned by the external data store."""

    user_id: str
    audio_minutes: int = 0
    image_count: int = 0
    pdf_pages: int = 0


class UserIdentity(BaseModel):
    """Signed-in user as reported by the identity provider."""

    id: str
    email: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class HistoryRecord(BaseModel):
    """Row written to processing_history after a successful session."""

    user_id: str
    type: Literal["audio", "image", "pdf"]
    file_name: str
    file_size: int
    processing_time: float
