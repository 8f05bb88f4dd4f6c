# tests/unit/core/test_errors.py — v1
"""Tests for core/errors.py: taxonomy and messages."""

from __future__ import annotations

from accessibilityhub.core.errors import (
    AccessibilityHubError,
    AnalysisFailed,
    ContentTooLarge,
    InvalidUrl,
    ProcessingCancelled,
    QuotaExceeded,
    RemoteFetchError,
    TimeoutExceeded,
    TransportFailure,
    ValidationError,
)


class TestTaxonomy:
    def test_validation_family(self):
        assert issubclass(InvalidUrl, ValidationError)
        assert issubclass(ContentTooLarge, ValidationError)

    def test_transport_family(self):
        assert issubclass(AnalysisFailed, TransportFailure)
        assert issubclass(RemoteFetchError, TransportFailure)

    def test_timeout_is_a_cancellation(self):
        assert issubclass(TimeoutExceeded, ProcessingCancelled)

    def test_all_share_base(self):
        for cls in (ValidationError, QuotaExceeded, TransportFailure, ProcessingCancelled):
            assert issubclass(cls, AccessibilityHubError)


class TestMessages:
    def test_default_messages(self):
        assert InvalidUrl().message == "invalid URL format"
        assert TimeoutExceeded().message == "processing timeout exceeded"
        assert ProcessingCancelled().message == "processing cancelled"

    def test_custom_message(self):
        err = ValidationError("file is empty")
        assert err.message == "file is empty"
        assert str(err) == "file is empty"

    def test_quota_message_names_type(self):
        err = QuotaExceeded("audio_minutes")
        assert err.quota_type == "audio_minutes"
        assert "audio_minutes quota exceeded" in err.message
