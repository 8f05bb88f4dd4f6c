# src/inference/parsing.py — v1
"""Lenient parsing of model output that should contain JSON or labelled lines."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_json_object(content: str) -> dict[str, Any] | None:
    """Return the JSON object in ``content``, or None if there is none.

    Accepts bare JSON, fenced ```json blocks and JSON embedded in prose.
    """
    text = _FENCE_RE.sub("", content.strip())
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def extract_section(content: str, section: str) -> str | None:
    """Return the value of a ``Section: value`` line (case-insensitive)."""
    match = re.search(rf"{re.escape(section)}:\s*([^\n]+)", content, re.IGNORECASE)
    return match.group(1).strip() if match else None


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated value into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
