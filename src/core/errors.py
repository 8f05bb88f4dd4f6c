# src/core/errors.py — v1
"""Failure taxonomy for the content-processing pipeline.

Every failure raised inside the pipeline derives from AccessibilityHubError
and carries a human-readable ``message``. The preview controller converts
these into PreviewState.error; nothing else should escape to callers.

Hierarchy:
    AccessibilityHubError
      ValidationError        bad input shape, never retried
        InvalidUrl
        ContentTooLarge
      AuthenticationRequired
      QuotaExceeded
      TransportFailure       remote call failed, not retried
        TranscriptionFailed
        SynthesisFailed
        AnalysisFailed
        DocumentParseFailed
        RemoteFetchError
      ProcessingCancelled
        TimeoutExceeded
"""

from __future__ import annotations


class AccessibilityHubError(Exception):
    """Base class for all pipeline failures."""

    default_message = "Failed to process content"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AccessibilityHubError):
    """Input rejected locally, before any network call."""

    default_message = "invalid input"


class InvalidUrl(ValidationError):
    """URL is syntactically malformed or uses an unsupported scheme."""

    default_message = "invalid URL format"


class ContentTooLarge(ValidationError):
    """Remote content exceeds the configured size limit."""

    default_message = "content size exceeds limit"


class AuthenticationRequired(AccessibilityHubError):
    """A signed-in user is required for quota-gated processing."""

    default_message = "sign in required to process content"


class QuotaExceeded(AccessibilityHubError):
    """Quota gate denied the reservation."""

    default_message = "processing quota exceeded, upgrade your plan to continue"

    def __init__(self, quota_type: str, message: str | None = None) -> None:
        self.quota_type = quota_type
        super().__init__(message or f"{quota_type} quota exceeded, upgrade your plan to continue")


class TransportFailure(AccessibilityHubError):
    """Network or HTTP failure talking to a remote service."""

    default_message = "remote service request failed"


class TranscriptionFailed(TransportFailure):
    default_message = "Failed to transcribe audio"


class SynthesisFailed(TransportFailure):
    default_message = "Failed to synthesize speech"


class AnalysisFailed(TransportFailure):
    default_message = "Failed to analyze content"


class DocumentParseFailed(TransportFailure):
    default_message = "Failed to parse PDF document"


class RemoteFetchError(TransportFailure):
    """URL probe or body fetch failed."""

    default_message = "failed to fetch URL"


class ProcessingCancelled(AccessibilityHubError):
    """Session was cancelled (superseded or explicit) mid-operation."""

    default_message = "processing cancelled"


class TimeoutExceeded(ProcessingCancelled):
    """Session exceeded its wall-clock budget."""

    default_message = "processing timeout exceeded"
