# src/llm/client_factory.py — v1
"""Factory: instantiate a provider client from its provider name.

Clients are constructed explicitly and injected into the inference adapters;
nothing here is cached at module level.
"""

from __future__ import annotations

import importlib
import logging

from accessibilityhub.config.settings import Settings
from accessibilityhub.llm.base_client import BaseLLMClient, BaseSpeechClient

logger = logging.getLogger(__name__)

# Registry of provider name -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "accessibilityhub.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "accessibilityhub.llm.adapters.anthropic_adapter.AnthropicAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered or lacks a capability."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (openai, anthropic).
        model: Model name (e.g. gpt-4o-mini).
        settings: Application settings (for API keys and base URLs).
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model

    if settings is not None:
        if provider == "openai":
            init_kwargs.setdefault("api_key", settings.openai_api_key)
            init_kwargs.setdefault("base_url", settings.openai_base_url or None)
            init_kwargs.setdefault("transcription_model", settings.speech_transcription_model)
            init_kwargs.setdefault("synthesis_model", settings.speech_synthesis_model)
        elif provider == "anthropic":
            init_kwargs.setdefault("api_key", settings.anthropic_api_key)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def create_speech_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseSpeechClient:
    """Instantiate a provider client that also implements BaseSpeechClient."""
    client = create_llm_client(provider, model, settings, **kwargs)
    if not isinstance(client, BaseSpeechClient):
        raise UnsupportedProviderError(
            f"Provider {provider!r} does not support speech"
        )
    return client


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
