# src/inference/document.py — v1
"""Document adapter: PDF text extraction with PyMuPDF plus LLM simplification.

parse() reads every page locally, then asks the text model for a short
summary and a plain-language rewrite. A failing text model degrades the
result (placeholder summary) instead of failing the whole parse; a PDF that
cannot be opened raises DocumentParseFailed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from accessibilityhub.core.errors import AnalysisFailed, DocumentParseFailed
from accessibilityhub.core.models import ContentUnit
from accessibilityhub.inference.models import DocumentAnalysis, PageStructure
from accessibilityhub.inference.parsing import parse_json_object
from accessibilityhub.llm.models import Message

if TYPE_CHECKING:
    from accessibilityhub.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Only the head of long documents is sent to the text model.
MAX_PROMPT_CHARS = 4000
SIMPLIFY_MAX_TOKENS = 2048
QUERY_MAX_TOKENS = 1024

SUMMARY_UNAVAILABLE = "AI analysis unavailable"
SIMPLIFIED_UNAVAILABLE = "Text simplification unavailable"
SUMMARY_NOT_CONFIGURED = "AI analysis requires API key configuration"
SIMPLIFIED_NOT_CONFIGURED = "Text simplification requires API key configuration"

_SIMPLIFY_SYSTEM = """Analyze and simplify the following document text. Respond with a JSON object:
{
  "summary": a concise summary of at most 3 sentences,
  "simplified_text": the content rewritten in plain, easy-to-understand language
}
Return only the JSON object."""

_QUERY_SYSTEM = (
    "You are an expert at extracting specific information from documents. "
    "Answer the user's query based on the provided document text."
)

_PLAIN_SYSTEM = "Convert the following text into simple, plain language that is easy to understand."


class DocumentAdapter:
    """Parses PDFs and produces accessible summaries.

    Args:
        client: Text model used for summary/simplification. None disables
            the AI step; parse() then reports it as not configured.
        temperature: Sampling temperature for the text model.
    """

    def __init__(self, client: BaseLLMClient | None = None, temperature: float = 0.3) -> None:
        self._client = client
        self._temperature = temperature

    async def parse(self, content: ContentUnit) -> DocumentAnalysis:
        """Extract page text and metadata, then summarize and simplify."""
        # PyMuPDF is blocking; keep it off the event loop.
        text, pages, metadata = await asyncio.to_thread(self._extract, content)
        analysis = DocumentAnalysis(text=text, page_structure=pages, metadata=metadata)

        if not text.strip():
            return analysis
        if self._client is None:
            return analysis.model_copy(
                update={"summary": SUMMARY_NOT_CONFIGURED, "simplified_text": SIMPLIFIED_NOT_CONFIGURED}
            )

        try:
            response = await self._client.complete(
                messages=[Message(role="user", content=f"Text to analyze: {_head(text)}")],
                system=_SIMPLIFY_SYSTEM,
                max_tokens=SIMPLIFY_MAX_TOKENS,
                temperature=self._temperature,
            )
        except Exception as e:
            logger.warning("AI analysis failed for %s: %s", content.name, e)
            return analysis.model_copy(
                update={"summary": SUMMARY_UNAVAILABLE, "simplified_text": SIMPLIFIED_UNAVAILABLE}
            )

        summary, simplified = _split_simplification(response.content)
        return analysis.model_copy(
            update={"summary": summary, "simplified_text": simplified, "simplified": True}
        )

    async def extract_information(self, content: ContentUnit, query: str) -> str:
        """Answer ``query`` from the document's text."""
        analysis = await self.parse(content)
        if self._client is None:
            return (
                f'Based on the query "{query}", here is the extracted text from the document: '
                f"{analysis.text[:1000]}"
            )
        try:
            response = await self._client.complete(
                messages=[
                    Message(
                        role="user",
                        content=f"Document text: {_head(analysis.text)}\n\nQuery: {query}",
                    )
                ],
                system=_QUERY_SYSTEM,
                max_tokens=QUERY_MAX_TOKENS,
                temperature=self._temperature,
            )
        except Exception as e:
            logger.error("Information extraction error for %s: %s", content.name, e)
            raise AnalysisFailed(f"Failed to extract information from document: {e}") from e
        return response.content.strip() or "No information found for the given query."

    async def simplify_text(self, text: str) -> str:
        """Rewrite ``text`` in plain language."""
        if self._client is None:
            return text
        try:
            response = await self._client.complete(
                messages=[Message(role="user", content=f"Text to simplify: {text}")],
                system=_PLAIN_SYSTEM,
                max_tokens=QUERY_MAX_TOKENS,
                temperature=self._temperature,
            )
        except Exception as e:
            logger.error("Text simplification error: %s", e)
            raise AnalysisFailed(f"Failed to simplify text: {e}") from e
        return response.content.strip() or text

    @staticmethod
    def _extract(content: ContentUnit) -> tuple[str, list[PageStructure], dict[str, Any]]:
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF parsing: pip install pymupdf"
            ) from e

        try:
            doc = fitz.open(stream=content.data, filetype="pdf")
        except Exception as e:
            logger.error("PDF parsing error for %s: %s", content.name, e)
            raise DocumentParseFailed(f"Failed to parse PDF document: {e}") from e

        try:
            page_texts: list[str] = []
            pages: list[PageStructure] = []
            for page_index in range(len(doc)):
                page_text = " ".join(doc[page_index].get_text("text").split())
                page_texts.append(page_text)
                pages.append(PageStructure(page_number=page_index + 1, text_length=len(page_text)))
            metadata = {k: v for k, v in (doc.metadata or {}).items() if v}
        except Exception as e:
            logger.error("PDF text extraction error for %s: %s", content.name, e)
            raise DocumentParseFailed(f"Failed to parse PDF document: {e}") from e
        finally:
            doc.close()

        return "\n\n".join(page_texts), pages, metadata


def _head(text: str) -> str:
    if len(text) <= MAX_PROMPT_CHARS:
        return text
    return text[:MAX_PROMPT_CHARS] + "..."


def _split_simplification(raw: str) -> tuple[str, str]:
    """Read summary and simplified text from JSON, else from two paragraphs."""
    data = parse_json_object(raw)
    if data is not None and (data.get("summary") or data.get("simplified_text")):
        return (
            str(data.get("summary") or "").strip() or "Summary not available",
            str(data.get("simplified_text") or "").strip() or "Simplified text not available",
        )

    parts = [p.strip() for p in raw.split("\n\n") if p.strip()]
    prefixes = ("summary:", "simplified version:", "simplified text:")

    def _clean(part: str) -> str:
        for prefix in prefixes:
            if part.lower().startswith(prefix):
                return part[len(prefix):].strip()
        return part

    if not parts:
        return "Summary not available", "Simplified text not available"
    if len(parts) == 1:
        return "Summary not available", _clean(parts[0])
    return _clean(parts[0]), _clean("\n\n".join(parts[1:]))
