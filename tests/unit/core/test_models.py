# tests/unit/core/test_models.py — v1
"""Tests for core/models.py: ContentUnit, PreviewState, status helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from accessibilityhub.core.models import (
    ContentUnit,
    PreviewState,
    ProcessingStatus,
    SessionSnapshot,
    classify_media_type,
)


class TestClassifyMediaType:
    @pytest.mark.parametrize(
        "media_type, expected",
        [
            ("audio/mpeg", "audio"),
            ("audio/wav", "audio"),
            ("image/png", "image"),
            ("application/pdf", "pdf"),
            ("Application/PDF; charset=binary", "pdf"),
            ("text/html", "unknown"),
            ("", "unknown"),
        ],
    )
    def test_classification(self, media_type, expected):
        assert classify_media_type(media_type) == expected


class TestContentUnit:
    def test_from_bytes_normalizes_media_type(self):
        unit = ContentUnit.from_bytes(b"abc", "Image/PNG; q=1", "x.png")
        assert unit.media_type == "image/png"
        assert unit.size == 3
        assert unit.content_type == "image"

    @pytest.mark.parametrize(
        "given, expected",
        [
            ("audio/x-wav", "audio/wav"),
            ("audio/x-wav; codecs=1", "audio/wav"),
            ("audio/wave", "audio/wav"),
            ("image/jpg", "image/jpeg"),
            ("application/x-pdf", "application/pdf"),
        ],
    )
    def test_from_bytes_maps_aliases(self, given, expected):
        assert ContentUnit.from_bytes(b"abc", given, "x").media_type == expected

    def test_from_path_wav(self, tmp_path):
        path = tmp_path / "talk.wav"
        path.write_bytes(b"RIFF" + b"\x00" * 8)
        assert ContentUnit.from_path(path).media_type == "audio/wav"

    def test_immutable(self):
        unit = ContentUnit.from_bytes(b"abc", "image/png", "x.png")
        with pytest.raises(ValidationError):
            unit.name = "y.png"

    def test_from_path(self, tmp_path):
        path = tmp_path / "talk.mp3"
        path.write_bytes(b"ID3" + b"\x00" * 10)
        unit = ContentUnit.from_path(path)
        assert unit.name == "talk.mp3"
        assert unit.media_type == "audio/mpeg"
        assert unit.size == 13
        assert unit.last_modified is not None

    def test_from_path_unknown_extension(self, tmp_path):
        path = tmp_path / "blob.zzz"
        path.write_bytes(b"x")
        assert ContentUnit.from_path(path).content_type == "unknown"

    def test_slice_keeps_metadata(self):
        unit = ContentUnit.from_bytes(b"0123456789", "audio/wav", "a.wav", last_modified=99)
        part = unit.slice(3, 6)
        assert part.data == b"345"
        assert part.size == 3
        assert (part.name, part.media_type, part.last_modified) == ("a.wav", "audio/wav", 99)


class TestProcessingStatus:
    def test_terminal_states(self):
        terminal = {s for s in ProcessingStatus if s.is_terminal}
        assert terminal == {
            ProcessingStatus.COMPLETED,
            ProcessingStatus.FAILED,
            ProcessingStatus.CANCELLED,
        }

    def test_snapshot_processing_flag(self):
        busy = SessionSnapshot(
            session_id=1, status=ProcessingStatus.DISPATCHING, progress=40, preview=PreviewState()
        )
        done = busy.model_copy(update={"status": ProcessingStatus.COMPLETED})
        idle = busy.model_copy(update={"status": ProcessingStatus.IDLE})
        assert busy.processing is True
        assert done.processing is False
        assert idle.processing is False


class TestPreviewState:
    def test_equality_is_by_value(self):
        a = PreviewState(original="blob:x", accessible="t", analysis="{}", content_type="audio")
        b = PreviewState(original="blob:x", accessible="t", analysis="{}", content_type="audio")
        assert a == b
