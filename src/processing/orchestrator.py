# src/processing/orchestrator.py — v1
"""Preview controller: the processing state machine.

    Idle -> Validating -> (CacheHit | Dispatching) -> Completed | Failed | Cancelled

One session is live per controller. Starting a session cancels the
previous one (reason "superseded") and releases its handles. Every state
change is recorded on the session that made it, and only the current
session's changes are published, so a late completion from an abandoned
session can never overwrite the preview.

Step order for a session:
    1. Validation (size, audio size, supported MIME) before any remote call.
    2. Quota reservation, when a gate is configured.
    3. Cache lookup; a hit republishes the cached result, no adapter call.
    4. Dispatch under the wall-clock timeout:
       audio -> chunked processor, image -> vision + dimension probe,
       pdf -> document parse. Optional text-analysis enrichment.
    5. Cache write, Completed publish, history record.

All failures end here as PreviewState.error plus a notification.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from accessibilityhub.cache.fingerprint import compute_fingerprint
from accessibilityhub.core.errors import (
    AccessibilityHubError,
    AnalysisFailed,
    AuthenticationRequired,
    ContentTooLarge,
    ProcessingCancelled,
    QuotaExceeded,
    TimeoutExceeded,
    ValidationError,
)
from accessibilityhub.core.models import (
    QUOTA_TYPE_BY_CONTENT,
    ContentUnit,
    HistoryRecord,
    Notification,
    PreviewState,
    ProcessingStatus,
    ServiceResult,
    SessionSnapshot,
    UserIdentity,
)
from accessibilityhub.fetch.url_resolver import UrlResolver
from accessibilityhub.logging.context import set_session_context, set_step_context
from accessibilityhub.processing.cancellation import (
    REASON_CANCELLED,
    REASON_SUPERSEDED,
    CancellationToken,
)
from accessibilityhub.processing.chunked_audio import SYNTHESIZED_MEDIA_TYPE, ChunkedAudioProcessor
from accessibilityhub.processing.handles import HandleRegistry
from accessibilityhub.processing.probes import (
    DimensionProbe,
    DurationProbe,
    probe_audio_duration,
    probe_image_dimensions,
)

if TYPE_CHECKING:
    from accessibilityhub.auth.base_identity_provider import BaseIdentityProvider
    from accessibilityhub.cache.result_cache import ResultCache
    from accessibilityhub.config.settings import Settings
    from accessibilityhub.inference.document import DocumentAdapter
    from accessibilityhub.inference.speech import SpeechAdapter
    from accessibilityhub.inference.text_analysis import TextAnalysisAdapter
    from accessibilityhub.inference.vision import VisionAdapter
    from accessibilityhub.quota.gate import QuotaGate
    from accessibilityhub.store.base_data_store import BaseDataStore

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]
Notifier = Callable[[Notification], None]

FILE_SUCCESS_MESSAGE = "Content processed successfully"
URL_SUCCESS_MESSAGE = "URL processed successfully"
UNEXPECTED_FAILURE_MESSAGE = "Failed to process content"


@dataclass
class ProcessingSession:
    """State owned by one process_file/process_url invocation."""

    session_id: int
    token: CancellationToken
    handles: list[str] = field(default_factory=list)
    status: ProcessingStatus = ProcessingStatus.IDLE
    progress: float = 0.0
    preview: PreviewState = field(default_factory=PreviewState)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            status=self.status,
            progress=self.progress,
            preview=self.preview,
        )


class PreviewController:
    """Accepts files and URLs and publishes one consistent preview.

    Args:
        speech: Speech adapter (transcription + narration).
        vision: Vision adapter (captions, visual Q&A).
        document: Document adapter (PDF parse + simplification).
        settings: Limits, supported formats, timeout and voice.
        cache: Validating result cache; None disables caching.
        quota_gate: Quota gate; None disables quota checks.
        identity: Source of the user when a call does not pass one.
        data_store: Receives history records after successful sessions.
        url_resolver: Fetches URL content; built from settings when None.
        text_analysis: Optional enrichment service for the analysis blob.
        handles: Handle registry; a private one is created when None.
        duration_probe / dimension_probe: Local media probes.
        notifier: Receives the transient user-facing messages.
    """

    def __init__(
        self,
        speech: SpeechAdapter,
        vision: VisionAdapter,
        document: DocumentAdapter,
        settings: Settings,
        *,
        cache: ResultCache | None = None,
        quota_gate: QuotaGate | None = None,
        identity: BaseIdentityProvider | None = None,
        data_store: BaseDataStore | None = None,
        url_resolver: UrlResolver | None = None,
        text_analysis: TextAnalysisAdapter | None = None,
        handles: HandleRegistry | None = None,
        duration_probe: DurationProbe = probe_audio_duration,
        dimension_probe: DimensionProbe = probe_image_dimensions,
        notifier: Notifier | None = None,
    ) -> None:
        self._vision = vision
        self._document = document
        self._settings = settings
        self._cache = cache
        self._quota_gate = quota_gate
        self._identity = identity
        self._data_store = data_store
        self._text_analysis = text_analysis
        self._handles = handles if handles is not None else HandleRegistry()
        self._dimension_probe = dimension_probe
        self._notifier = notifier
        self._url_resolver = url_resolver or UrlResolver(
            max_bytes=settings.max_file_size_bytes,
            timeout=settings.url_fetch_timeout_s,
            user_agent=settings.url_user_agent,
        )
        self._chunked = ChunkedAudioProcessor(
            speech,
            self._handles,
            duration_probe=duration_probe,
            chunk_size=settings.audio_chunk_size_bytes,
            voice=settings.speech_voice,
        )
        self._listeners: list[Listener] = []
        self._session: ProcessingSession | None = None
        self._last_session_id = 0

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def handles(self) -> HandleRegistry:
        return self._handles

    @property
    def snapshot(self) -> SessionSnapshot:
        if self._session is None:
            return SessionSnapshot(
                session_id=0, status=ProcessingStatus.IDLE, progress=0.0, preview=PreviewState()
            )
        return self._session.snapshot()

    @property
    def preview(self) -> PreviewState:
        return self.snapshot.preview

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def process_file(
        self, content: ContentUnit, user: UserIdentity | None = None
    ) -> SessionSnapshot:
        """Process one local file; returns the session's final snapshot."""
        session = self._begin()
        return await self._run(session, user, lambda: _ready(content), FILE_SUCCESS_MESSAGE)

    async def process_url(self, url: str, user: UserIdentity | None = None) -> SessionSnapshot:
        """Resolve ``url`` and process the body like a local file."""
        session = self._begin()

        async def fetch() -> ContentUnit:
            set_step_context("fetch")
            return await session.token.guard(self._url_resolver.resolve(url))

        return await self._run(session, user, fetch, URL_SUCCESS_MESSAGE)

    async def answer_question(self, content: ContentUnit, question: str) -> str:
        """Visual Q&A pass-through; failures raise AnalysisFailed."""
        return await self._vision.answer_question(content, question)

    def cancel(self) -> bool:
        """Cancel the live session. Returns False when nothing is running."""
        session = self._session
        if session is None or session.status.is_terminal:
            return False
        session.token.cancel(REASON_CANCELLED)
        return True

    async def close(self) -> None:
        """Cancel the live session, release every handle, close collaborators."""
        session = self._session
        if session is not None:
            session.token.cancel(REASON_CANCELLED)
            self._release(session)
        for resource in (self._url_resolver, self._text_analysis, self._identity, self._data_store):
            if resource is not None:
                await resource.close()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _begin(self) -> ProcessingSession:
        previous = self._session
        if previous is not None:
            if not previous.status.is_terminal:
                logger.info("Superseding session %d", previous.session_id)
                previous.token.cancel(REASON_SUPERSEDED)
            self._release(previous)

        self._last_session_id += 1
        session = ProcessingSession(session_id=self._last_session_id, token=CancellationToken())
        self._session = session
        return session

    async def _run(
        self,
        session: ProcessingSession,
        user: UserIdentity | None,
        source: Callable[[], Awaitable[ContentUnit]],
        success_message: str,
    ) -> SessionSnapshot:
        set_session_context(str(session.session_id), user.id if user else None)
        started = time.monotonic()
        self._update(session, status=ProcessingStatus.VALIDATING, progress=0.0)
        try:
            content = await source()
            user = await self._process(session, content, user)
        except ProcessingCancelled as e:
            self._abandon(session, e)
        except AccessibilityHubError as e:
            self._fail(session, e.message)
        except Exception:
            logger.exception("Unexpected processing error in session %d", session.session_id)
            self._fail(session, UNEXPECTED_FAILURE_MESSAGE)
        else:
            self._notify(session, Notification(title="Success", description=success_message))
            await self._record_history(user, content, time.monotonic() - started)
        finally:
            session.token.disarm()
        return session.snapshot()

    async def _process(
        self,
        session: ProcessingSession,
        content: ContentUnit,
        user: UserIdentity | None,
    ) -> UserIdentity | None:
        token = session.token
        self._update(session, content_type=content.content_type)
        set_step_context("validate", content.content_type)
        self.validate(content)

        if self._quota_gate is not None or self._data_store is not None:
            user = await self._resolve_user(token, user)

        if self._quota_gate is not None:
            set_step_context("quota", content.content_type)
            if user is None:
                raise AuthenticationRequired()
            quota_type = QUOTA_TYPE_BY_CONTENT[content.content_type]
            if not await token.guard(self._quota_gate.check_and_reserve(user.id, quota_type)):
                raise QuotaExceeded(quota_type)

        set_step_context("cache", content.content_type)
        key = compute_fingerprint(content)
        entry = await token.guard(self._cache.get(key)) if self._cache is not None else None

        original = self._own(session, self._handles.create(content.data, content.media_type))
        if entry is not None:
            logger.info("Cache hit for %s", content.name)
            audio_url = None
            if entry.audio_payload:
                audio = base64.b64decode(entry.audio_payload)
                audio_url = self._own(session, self._handles.create(audio, SYNTHESIZED_MEDIA_TYPE))
            self._update(session, status=ProcessingStatus.CACHE_HIT, original=original)
            result = entry.data.model_copy(update={"audio_url": audio_url})
        else:
            self._update(session, status=ProcessingStatus.DISPATCHING, original=original)
            set_step_context("dispatch", content.content_type)
            token.cancel_after(self._settings.processing_timeout_s)
            result = await self._dispatch(session, content)
            token.disarm()
            token.raise_if_cancelled()
            if self._cache is not None:
                await self._cache.put(key, result, self._audio_payload(result))

        token.raise_if_cancelled()
        self._update(
            session,
            status=ProcessingStatus.COMPLETED,
            progress=100.0,
            accessible=result.accessible,
            analysis=result.analysis,
            audio_url=result.audio_url,
            error=None,
        )
        logger.info("Session %d completed for %s", session.session_id, content.name)
        return user

    def validate(self, content: ContentUnit) -> None:
        """Reject content locally; raises ValidationError before any remote call."""
        if content.size == 0:
            raise ValidationError("file is empty")
        if content.size > self._settings.max_file_size_bytes:
            raise ContentTooLarge("file size exceeds limit")
        if (
            content.content_type == "audio"
            and content.size > self._settings.max_audio_file_size_bytes
        ):
            raise ContentTooLarge("audio file size exceeds limit")
        if (
            content.content_type == "unknown"
            or content.media_type not in self._settings.supported_formats
        ):
            raise ValidationError("unsupported file type")

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _dispatch(self, session: ProcessingSession, content: ContentUnit) -> ServiceResult:
        if content.content_type == "audio":
            return await self._process_audio(session, content)
        if content.content_type == "image":
            return await self._process_image(session, content)
        if content.content_type == "pdf":
            return await self._process_document(session, content)
        raise ValidationError("unsupported file type")

    async def _process_audio(self, session: ProcessingSession, content: ContentUnit) -> ServiceResult:
        result = await self._chunked.process(
            content,
            session.token,
            on_progress=lambda progress: self._update(session, progress=progress),
            on_handle=session.handles.append,
        )
        if self._text_analysis is None or not result.accessible:
            return result
        analysis = json.loads(result.analysis)
        await self._enrich(session, analysis, self._text_analysis.analyze_text(result.accessible))
        return result.model_copy(update={"analysis": json.dumps(analysis, indent=2)})

    async def _process_image(self, session: ProcessingSession, content: ContentUnit) -> ServiceResult:
        token = session.token
        self._update(session, progress=40.0)
        image = await token.guard(self._vision.analyze(content))

        self._update(session, progress=60.0)
        dimensions = await token.guard(self._dimension_probe(content))

        self._update(session, progress=80.0)
        analysis: dict[str, Any] = image.model_dump()
        analysis["dimensions"] = dimensions.model_dump() if dimensions is not None else None
        analysis["format"] = content.media_type
        analysis["size"] = content.size
        if self._text_analysis is not None:
            await self._enrich(session, analysis, self._text_analysis.analyze_image(content))

        accessible = image.caption
        if image.extracted_text:
            accessible = f"{accessible}\n\nText in image: {image.extracted_text}"
        return ServiceResult(accessible=accessible, analysis=json.dumps(analysis, indent=2))

    async def _process_document(
        self, session: ProcessingSession, content: ContentUnit
    ) -> ServiceResult:
        token = session.token
        self._update(session, progress=30.0)
        document = await token.guard(self._document.parse(content))

        self._update(session, progress=80.0)
        analysis: dict[str, Any] = {
            "page_count": document.page_count,
            "page_structure": [p.model_dump() for p in document.page_structure],
            "metadata": document.metadata,
            "summary": document.summary,
            "word_count": len(document.text.split()),
            "size": content.size,
        }
        if self._text_analysis is not None and document.text.strip():
            await self._enrich(session, analysis, self._text_analysis.analyze_text(document.text))

        return ServiceResult(
            accessible=document.accessible_text,
            analysis=json.dumps(analysis, indent=2),
        )

    async def _enrich(
        self,
        session: ProcessingSession,
        analysis: dict[str, Any],
        call: Awaitable[dict[str, Any]],
    ) -> None:
        """Add the text-analysis answer to ``analysis``; a failure only degrades it."""
        try:
            analysis["text_analysis"] = await session.token.guard(call)
        except AnalysisFailed as e:
            logger.warning("Text analysis enrichment unavailable: %s", e.message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _resolve_user(
        self, token: CancellationToken, user: UserIdentity | None
    ) -> UserIdentity | None:
        if user is not None or self._identity is None:
            return user
        return await token.guard(self._identity.current_user())

    async def _record_history(
        self, user: UserIdentity | None, content: ContentUnit, elapsed: float
    ) -> None:
        if self._data_store is None or user is None:
            return
        record = HistoryRecord(
            user_id=user.id,
            type=content.content_type,
            file_name=content.name,
            file_size=content.size,
            processing_time=round(elapsed, 3),
        )
        try:
            await self._data_store.record_history(record)
        except Exception as e:  # noqa: BLE001 (history is best-effort)
            logger.warning("Failed to record processing history: %s", e)

    def _audio_payload(self, result: ServiceResult) -> str | None:
        if result.audio_url is None:
            return None
        audio = self._handles.resolve(result.audio_url)
        return base64.b64encode(audio).decode("ascii") if audio is not None else None

    def _own(self, session: ProcessingSession, handle: str) -> str:
        session.handles.append(handle)
        return handle

    def _release(self, session: ProcessingSession) -> None:
        while session.handles:
            self._handles.release(session.handles.pop())

    def _abandon(self, session: ProcessingSession, error: ProcessingCancelled) -> None:
        self._release(session)
        if isinstance(error, TimeoutExceeded):
            logger.error("Session %d timed out", session.session_id)
            self._fail(session, error.message, original="", audio_url=None)
            return
        logger.info("Session %d cancelled (%s)", session.session_id, session.token.reason)
        self._update(
            session,
            status=ProcessingStatus.CANCELLED,
            progress=100.0,
            original="",
            audio_url=None,
            error=error.message,
        )

    def _fail(self, session: ProcessingSession, message: str, **preview: Any) -> None:
        logger.error("Session %d failed: %s", session.session_id, message)
        self._update(
            session, status=ProcessingStatus.FAILED, progress=100.0, error=message, **preview
        )
        self._notify(
            session, Notification(title="Error", description=message, variant="destructive")
        )

    def _update(
        self,
        session: ProcessingSession,
        *,
        status: ProcessingStatus | None = None,
        progress: float | None = None,
        **preview: Any,
    ) -> None:
        """Record a state change on ``session``; publish it if still current."""
        if status is not None:
            session.status = status
        if progress is not None:
            session.progress = progress
        if preview:
            session.preview = session.preview.model_copy(update=preview)
        if session is self._session:
            self._publish(session.snapshot())

    def _publish(self, snapshot: SessionSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # noqa: BLE001 (a listener must not break a session)
                logger.exception("Preview listener failed")

    def _notify(self, session: ProcessingSession, notification: Notification) -> None:
        if self._notifier is None or session is not self._session:
            return
        try:
            self._notifier(notification)
        except Exception:  # noqa: BLE001
            logger.exception("Notifier failed")


async def _ready(content: ContentUnit) -> ContentUnit:
    return content
