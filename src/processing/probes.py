# src/processing/probes.py — v1
"""Local media probes: audio duration (mutagen) and image size (Pillow).

Probes never fail a session. Unreadable media yields None and a warning.
Decoding runs in a worker thread so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Awaitable, Callable

from pydantic import BaseModel

from accessibilityhub.core.models import ContentUnit

logger = logging.getLogger(__name__)


class ImageDimensions(BaseModel):
    width: int
    height: int


DurationProbe = Callable[[ContentUnit], Awaitable["float | None"]]
DimensionProbe = Callable[[ContentUnit], Awaitable["ImageDimensions | None"]]


async def probe_audio_duration(content: ContentUnit) -> float | None:
    """Return the audio length in seconds, or None if it cannot be read."""
    return await asyncio.to_thread(_read_duration, content.data, content.name)


async def probe_image_dimensions(content: ContentUnit) -> ImageDimensions | None:
    """Return pixel width/height of an image, or None if it cannot be decoded."""
    return await asyncio.to_thread(_read_dimensions, content.data, content.name)


def _read_duration(data: bytes, name: str) -> float | None:
    try:
        from mutagen import File as MutagenFile
    except ImportError as e:
        raise ImportError("mutagen package required: pip install mutagen") from e

    try:
        audio = MutagenFile(io.BytesIO(data))
    except Exception as e:  # noqa: BLE001 (mutagen raises format-specific errors)
        logger.warning("Duration probe failed for %s: %s", name, e)
        return None

    if audio is None or audio.info is None:
        logger.warning("Duration probe: unrecognized audio format for %s", name)
        return None
    return round(float(getattr(audio.info, "length", 0.0)), 3)


def _read_dimensions(data: bytes, name: str) -> ImageDimensions | None:
    try:
        from PIL import Image, UnidentifiedImageError
    except ImportError as e:
        raise ImportError("Pillow package required: pip install Pillow") from e

    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Dimension probe failed for %s: %s", name, e)
        return None
    return ImageDimensions(width=width, height=height)
