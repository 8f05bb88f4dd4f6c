# src/inference/vision.py — v1
"""Vision adapter: captions, tags, visible text and visual Q&A for images.

The model is asked for JSON. When it answers with labelled lines instead
(``Caption: ...``) those are parsed, and when neither is present the raw
text becomes the caption rather than failing the request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from accessibilityhub.core.errors import AnalysisFailed
from accessibilityhub.core.models import ContentUnit
from accessibilityhub.inference.models import AccessibilityNotes, ImageAnalysisResult
from accessibilityhub.inference.parsing import extract_section, parse_json_object, split_list
from accessibilityhub.llm.models import ImageInput, Message

if TYPE_CHECKING:
    from accessibilityhub.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

_ANALYSIS_SYSTEM = "You are an expert image analysis model specializing in accessibility."

_ANALYSIS_PROMPT = """Analyze this image for accessibility. Respond with a JSON object:
{
  "caption": concise alt text describing the image,
  "text": any text visible in the image, or null,
  "tags": list of short descriptive tags,
  "accessibility": {
    "color_contrast": assessment of foreground/background contrast,
    "text_alternatives": list of suggested text alternatives,
    "structural_roles": list of roles the image plays (decorative, informative, ...)
  }
}
Return only the JSON object."""

_QUESTION_SYSTEM = (
    "You are an expert at analyzing images and answering questions about them "
    "for people who cannot see them."
)

ANALYZE_MAX_TOKENS = 1024
QUESTION_MAX_TOKENS = 512


class VisionAdapter:
    """Wraps a vision-capable BaseLLMClient."""

    def __init__(self, client: BaseLLMClient, temperature: float = 0.3) -> None:
        self._client = client
        self._temperature = temperature

    async def analyze(self, content: ContentUnit) -> ImageAnalysisResult:
        """Caption, tag and read text from an image."""
        try:
            response = await self._client.complete_with_vision(
                messages=[Message(role="user", content=_ANALYSIS_PROMPT)],
                images=[self._image_input(content)],
                system=_ANALYSIS_SYSTEM,
                max_tokens=ANALYZE_MAX_TOKENS,
                temperature=self._temperature,
            )
        except Exception as e:
            logger.error("Image analysis error for %s: %s", content.name, e)
            raise AnalysisFailed(f"Failed to analyze image: {e}") from e

        return self._parse_analysis(response.content, content.name)

    async def answer_question(self, content: ContentUnit, question: str) -> str:
        """Answer a free-form question about an image."""
        try:
            response = await self._client.complete_with_vision(
                messages=[Message(role="user", content=question)],
                images=[self._image_input(content)],
                system=_QUESTION_SYSTEM,
                max_tokens=QUESTION_MAX_TOKENS,
                temperature=self._temperature,
            )
        except Exception as e:
            logger.error("Error answering question about %s: %s", content.name, e)
            raise AnalysisFailed(f"Failed to answer question: {e}") from e
        return response.content.strip() or "Unable to answer the question."

    @staticmethod
    def _image_input(content: ContentUnit) -> ImageInput:
        return ImageInput(data=content.data, media_type=content.media_type, source_id=content.name)

    @staticmethod
    def _parse_analysis(raw: str, name: str) -> ImageAnalysisResult:
        data = parse_json_object(raw)
        if data is not None and data.get("caption"):
            return ImageAnalysisResult(
                caption=str(data["caption"]).strip(),
                tags=_as_str_list(data.get("tags")),
                extracted_text=(str(data["text"]).strip() or None) if data.get("text") else None,
                accessibility=_parse_notes(data.get("accessibility")),
            )

        caption = extract_section(raw, "caption")
        if caption:
            logger.debug("Vision response for %s was labelled text, not JSON", name)
            return ImageAnalysisResult(
                caption=caption,
                tags=split_list(extract_section(raw, "tags")),
                extracted_text=extract_section(raw, "text"),
                accessibility=AccessibilityNotes(
                    color_contrast=extract_section(raw, "accessibility") or "",
                ),
            )

        logger.warning("Unstructured vision response for %s, using raw text", name)
        return ImageAnalysisResult(caption=raw.strip() or f"Image: {name}")


def _as_str_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    if isinstance(value, str):
        return split_list(value)
    return []


def _parse_notes(value: Any) -> AccessibilityNotes | None:
    if not isinstance(value, dict):
        return None
    return AccessibilityNotes(
        color_contrast=str(value.get("color_contrast") or ""),
        text_alternatives=_as_str_list(value.get("text_alternatives")),
        structural_roles=_as_str_list(value.get("structural_roles")),
    )
