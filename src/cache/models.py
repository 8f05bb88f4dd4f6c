# src/cache/models.py — v1
"""Cache domain models: CacheEntry and the current schema version."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from accessibilityhub.core.models import ServiceResult

CURRENT_VERSION = "1.0"


class CacheEntry(BaseModel):
    """Previously computed result for one content fingerprint.

    ``data.audio_url`` is never persisted: handles are session-scoped, so the
    synthesized audio travels as base64 in ``audio_payload`` instead.
    """

    timestamp: datetime
    version: str
    data: ServiceResult
    audio_payload: str | None = None
