# src/api/facade.py — v1
"""Public API facade: composition root for the preview controller.

Usage:
    from accessibilityhub.api.facade import build_controller
    controller = build_controller()
    snapshot = await controller.process_file(ContentUnit.from_path("talk.mp3"))

Every provider client is constructed here and injected; nothing below this
module creates clients on its own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from accessibilityhub.auth.supabase_identity import SupabaseIdentityProvider
from accessibilityhub.cache.cache_factory import create_result_cache
from accessibilityhub.config.settings import Settings, load_settings
from accessibilityhub.fetch.url_resolver import UrlResolver
from accessibilityhub.inference.document import DocumentAdapter
from accessibilityhub.inference.speech import SpeechAdapter
from accessibilityhub.inference.text_analysis import TextAnalysisAdapter
from accessibilityhub.inference.vision import VisionAdapter
from accessibilityhub.llm.client_factory import create_llm_client, create_speech_client
from accessibilityhub.llm.config import resolve_llm
from accessibilityhub.processing.orchestrator import Notifier, PreviewController
from accessibilityhub.quota.gate import QuotaGate
from accessibilityhub.store.store_factory import create_data_store

if TYPE_CHECKING:
    from accessibilityhub.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


def build_controller(
    settings: Settings | None = None,
    notifier: Notifier | None = None,
) -> PreviewController:
    """Wire adapters, cache, quota gate and stores from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        notifier: Receives success/error notifications.

    Returns:
        A ready PreviewController. Call ``await controller.close()`` when done.
    """
    settings = settings or load_settings()

    speech_llm = resolve_llm("speech", settings)
    speech = SpeechAdapter(
        create_speech_client(speech_llm.provider, speech_llm.model, settings),
        default_voice=settings.speech_voice,
    )

    vision_llm = resolve_llm("vision", settings)
    vision = VisionAdapter(
        create_llm_client(vision_llm.provider, vision_llm.model, settings),
        temperature=settings.llm_temperature,
    )

    document_llm = resolve_llm("document", settings)
    document_client: BaseLLMClient | None = None
    if has_credentials(document_llm.provider, settings):
        document_client = create_llm_client(document_llm.provider, document_llm.model, settings)
    else:
        logger.warning(
            "No API key for %s; document summaries are disabled", document_llm.provider
        )
    document = DocumentAdapter(document_client, temperature=settings.llm_temperature)

    text_analysis = None
    if settings.text_analysis_api_key:
        text_analysis = TextAnalysisAdapter(
            api_key=settings.text_analysis_api_key,
            base_url=settings.text_analysis_base_url,
            text_model=settings.text_analysis_model_text,
            vision_model=settings.text_analysis_model_vision,
            analysis_model=settings.text_analysis_model_analysis,
            max_tokens=settings.text_analysis_max_tokens,
            temperature=settings.text_analysis_temperature,
            timeout=settings.text_analysis_timeout_s,
        )

    data_store = create_data_store(settings)
    quota_gate = QuotaGate(data_store) if settings.quota_enabled and data_store else None
    identity = None
    if settings.data_store_url:
        identity = SupabaseIdentityProvider(
            url=settings.data_store_url,
            api_key=settings.data_store_key,
            access_token=settings.data_store_access_token or None,
        )

    logger.debug(
        "Controller wired: speech=%s vision=%s document=%s cache=%s quota=%s",
        speech_llm.key, vision_llm.key, document_llm.key,
        settings.cache_backend if settings.cache_enabled else "off",
        quota_gate is not None,
    )
    return PreviewController(
        speech,
        vision,
        document,
        settings,
        cache=create_result_cache(settings),
        quota_gate=quota_gate,
        identity=identity,
        data_store=data_store,
        url_resolver=UrlResolver(
            max_bytes=settings.max_file_size_bytes,
            timeout=settings.url_fetch_timeout_s,
            user_agent=settings.url_user_agent,
        ),
        text_analysis=text_analysis,
        notifier=notifier,
    )


def has_credentials(provider: str, settings: Settings) -> bool:
    """Whether settings carry an API key for a built-in provider."""
    if provider == "openai":
        return bool(settings.openai_api_key)
    if provider == "anthropic":
        return bool(settings.anthropic_api_key)
    return True
