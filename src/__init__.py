# src/__init__.py — v1
"""AccessibilityHub: accessible transcripts, captions and summaries from AI services."""

from accessibilityhub.version import __version__

__all__ = ["__version__"]
