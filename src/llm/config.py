# src/llm/config.py — v1
"""Per-capability LLM routing with cascade resolution.

Resolution order:
  1. Per-capability setting (LLM_VISION=anthropic:claude-sonnet-4-20250514)
  2. Default provider + model (LLM_DEFAULT_PROVIDER + LLM_DEFAULT_MODEL)
  3. Hardcoded fallback (openai:gpt-4o-mini)
"""

from __future__ import annotations

from dataclasses import dataclass

from accessibilityhub.config.settings import Settings

_FALLBACK_PROVIDER = "openai"
_FALLBACK_MODEL = "gpt-4o-mini"

CAPABILITIES: tuple[str, ...] = ("vision", "document", "speech")


@dataclass(frozen=True)
class LLMAssignment:
    """Resolved LLM provider:model for a capability."""

    provider: str
    model: str
    source: str  # "capability", "default", or "fallback"

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"


def _parse_assignment(value: str) -> tuple[str, str] | None:
    """Parse 'provider:model' string. Returns None if empty."""
    if not value or ":" not in value:
        return None
    provider, model = value.split(":", 1)
    return (provider.strip(), model.strip())


def resolve_llm(capability: str, settings: Settings) -> LLMAssignment:
    """Resolve the provider and model serving one capability.

    Args:
        capability: One of CAPABILITIES.
        settings: Application settings.

    Returns:
        Resolved LLMAssignment with provider, model, and resolution source.
    """
    parsed = _parse_assignment(getattr(settings, f"llm_{capability}", ""))
    if parsed:
        return LLMAssignment(provider=parsed[0], model=parsed[1], source="capability")

    if settings.llm_default_provider and settings.llm_default_model:
        return LLMAssignment(
            provider=settings.llm_default_provider,
            model=settings.llm_default_model,
            source="default",
        )

    return LLMAssignment(
        provider=_FALLBACK_PROVIDER,
        model=_FALLBACK_MODEL,
        source="fallback",
    )


def resolve_all(settings: Settings) -> dict[str, LLMAssignment]:
    """Resolve LLM assignments for every capability."""
    return {cap: resolve_llm(cap, settings) for cap in CAPABILITIES}
