# src/inference/text_analysis.py — v1
"""Text-analysis REST adapter (Lyzer-compatible API).

Optional enrichment service: JSON POST with bearer auth to
``{base_url}/analyze/text``, ``/analyze/image`` and ``/analyze``.
Non-2xx answers and transport errors raise AnalysisFailed; a 2xx body that
is not JSON is returned as ``{"raw": <text>}``.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from accessibilityhub.core.errors import AnalysisFailed
from accessibilityhub.core.models import ContentUnit

logger = logging.getLogger(__name__)


class TextAnalysisAdapter:
    """Thin async client for the text-analysis service.

    Args:
        api_key: Bearer token.
        base_url: Service root, without trailing slash.
        text_model / vision_model / analysis_model: Model per endpoint.
        max_tokens: Bounded generation length sent with every request.
        temperature: Sampling temperature sent with every request.
        timeout: Request timeout in seconds.
        client: Pre-built httpx.AsyncClient (tests inject a MockTransport).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.lyzerstudio.com/v1",
        text_model: str = "lyzer-text-v1",
        vision_model: str = "lyzer-vision-v1",
        analysis_model: str = "lyzer-analysis-v1",
        max_tokens: int = 2048,
        temperature: float = 0.5,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._text_model = text_model
        self._vision_model = vision_model
        self._analysis_model = analysis_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout
        self.__client = client

    @property
    def _client(self) -> httpx.AsyncClient:
        if self.__client is None:
            self.__client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self.__client

    async def analyze_text(self, text: str) -> dict[str, Any]:
        return await self._post("/analyze/text", {"model": self._text_model, "text": text})

    async def analyze_image(self, content: ContentUnit) -> dict[str, Any]:
        payload = {
            "model": self._vision_model,
            "image": base64.b64encode(content.data).decode("ascii"),
            "media_type": content.media_type,
        }
        return await self._post("/analyze/image", payload)

    async def perform_analysis(self, data: dict[str, Any]) -> dict[str, Any]:
        """Generic analysis call; ``data`` is merged into the request body."""
        return await self._post("/analyze", {"model": self._analysis_model, **data})

    async def close(self) -> None:
        if self.__client is not None:
            await self.__client.aclose()
            self.__client = None

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = {**payload, "max_tokens": self._max_tokens, "temperature": self._temperature}
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Text analysis request to %s failed: %s", path, e)
            raise AnalysisFailed(f"Text analysis request failed: {e}") from e

        if response.is_error:
            logger.error("Text analysis %s returned HTTP %d", path, response.status_code)
            raise AnalysisFailed(
                f"Text analysis request failed: HTTP {response.status_code} {response.reason_phrase}"
            )

        try:
            parsed = response.json()
        except ValueError:
            logger.warning("Text analysis %s returned non-JSON body", path)
            return {"raw": response.text}
        return parsed if isinstance(parsed, dict) else {"result": parsed}
