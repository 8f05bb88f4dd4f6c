# src/processing/handles.py — v1
"""Locally-scoped handles to in-memory payloads (``blob:`` identifiers).

Handles are what PreviewState exposes for the original content and the
synthesized audio. They are content-addressed and reference-counted: the
same bytes always map to the same handle, and the payload is dropped only
when its last owner releases it.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

HANDLE_PREFIX = "blob:accessibilityhub/"


@dataclass
class _Blob:
    data: bytes
    media_type: str
    refs: int = 0


class HandleRegistry:
    """Process-local registry of payloads addressed by handle."""

    def __init__(self) -> None:
        self._blobs: dict[str, _Blob] = {}

    def create(self, data: bytes, media_type: str) -> str:
        """Register a payload and take one reference to it."""
        digest = hashlib.sha256(media_type.encode("utf-8") + b"\0" + data).hexdigest()
        handle = f"{HANDLE_PREFIX}{digest[:32]}"
        blob = self._blobs.get(handle)
        if blob is None:
            blob = _Blob(data=data, media_type=media_type)
            self._blobs[handle] = blob
        blob.refs += 1
        return handle

    def resolve(self, handle: str) -> bytes | None:
        blob = self._blobs.get(handle)
        return blob.data if blob is not None else None

    def media_type(self, handle: str) -> str | None:
        blob = self._blobs.get(handle)
        return blob.media_type if blob is not None else None

    def release(self, handle: str) -> None:
        """Drop one reference; unknown handles are ignored."""
        blob = self._blobs.get(handle)
        if blob is None:
            return
        blob.refs -= 1
        if blob.refs <= 0:
            del self._blobs[handle]
            logger.debug("Released handle %s", handle)

    def is_live(self, handle: str) -> bool:
        return handle in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
