# tests/unit/cache/test_fingerprint.py — v1
"""Tests for cache/fingerprint.py."""

from __future__ import annotations

from accessibilityhub.cache.fingerprint import compute_fingerprint, content_hash
from accessibilityhub.core.models import ContentUnit


class TestComputeFingerprint:
    def test_name_size_mtime(self):
        unit = ContentUnit.from_bytes(b"abc", "audio/mpeg", "a.mp3", last_modified=42)
        assert compute_fingerprint(unit) == "a.mp3-3-42"

    def test_same_triple_same_key(self):
        a = ContentUnit.from_bytes(b"abc", "audio/mpeg", "a.mp3", last_modified=42)
        b = ContentUnit.from_bytes(b"xyz", "audio/mpeg", "a.mp3", last_modified=42)
        assert compute_fingerprint(a) == compute_fingerprint(b)

    def test_mtime_change_changes_key(self):
        a = ContentUnit.from_bytes(b"abc", "audio/mpeg", "a.mp3", last_modified=42)
        b = ContentUnit.from_bytes(b"abc", "audio/mpeg", "a.mp3", last_modified=43)
        assert compute_fingerprint(a) != compute_fingerprint(b)

    def test_missing_mtime_uses_content_hash(self):
        a = ContentUnit.from_bytes(b"abc", "image/png", "downloaded-file")
        b = ContentUnit.from_bytes(b"abd", "image/png", "downloaded-file")
        assert compute_fingerprint(a) == f"downloaded-file-3-sha256:{content_hash(b'abc')}"
        assert compute_fingerprint(a) != compute_fingerprint(b)
