# src/cache/fingerprint.py — v1
"""Cache key derivation for ContentUnits.

The key is the composite of logical name, byte size and last-modified time.
Distinct content sharing all three collides; that is accepted for a local
best-effort cache. Units without a modification time (URL bodies served
without Last-Modified) fall back to a SHA-256 of their bytes in that slot.
"""

from __future__ import annotations

import hashlib

from accessibilityhub.core.models import ContentUnit


def compute_fingerprint(content: ContentUnit) -> str:
    """Return the cache key for a content unit."""
    if content.last_modified is not None:
        stamp = str(content.last_modified)
    else:
        stamp = f"sha256:{content_hash(content.data)}"
    return f"{content.name}-{content.size}-{stamp}"


def content_hash(data: bytes) -> str:
    """SHA-256 on raw bytes."""
    return hashlib.sha256(data).hexdigest()
