# tests/unit/inference/test_vision.py — v1
"""Tests for inference/vision.py: JSON, labelled and raw-text responses."""

from __future__ import annotations

import pytest

from accessibilityhub.core.errors import AnalysisFailed
from accessibilityhub.inference.vision import VisionAdapter

from conftest import llm_response


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_json_response(self, mock_llm_client, image_unit):
        result = await VisionAdapter(mock_llm_client).analyze(image_unit)
        assert result.caption == "A bar chart"
        assert result.tags == ["chart"]
        assert result.extracted_text == "Sales 2024"
        image = mock_llm_client.complete_with_vision.call_args.kwargs["images"][0]
        assert image.media_type == "image/png"

    @pytest.mark.asyncio
    async def test_fenced_json_with_accessibility(self, mock_llm_client, image_unit):
        mock_llm_client.complete_with_vision.return_value = llm_response(
            '```json\n{"caption": "Logo", "tags": "brand, red", "text": null,'
            ' "accessibility": {"color_contrast": "high", "structural_roles": ["decorative"]}}\n```'
        )
        result = await VisionAdapter(mock_llm_client).analyze(image_unit)
        assert result.tags == ["brand", "red"]
        assert result.extracted_text is None
        assert result.accessibility.color_contrast == "high"
        assert result.accessibility.structural_roles == ["decorative"]

    @pytest.mark.asyncio
    async def test_labelled_lines(self, mock_llm_client, image_unit):
        mock_llm_client.complete_with_vision.return_value = llm_response(
            "Caption: A cat on a sofa\nTags: cat, sofa\nText: none visible"
        )
        result = await VisionAdapter(mock_llm_client).analyze(image_unit)
        assert result.caption == "A cat on a sofa"
        assert result.tags == ["cat", "sofa"]

    @pytest.mark.asyncio
    async def test_raw_text_becomes_caption(self, mock_llm_client, image_unit):
        mock_llm_client.complete_with_vision.return_value = llm_response("Just a sunset.")
        result = await VisionAdapter(mock_llm_client).analyze(image_unit)
        assert result.caption == "Just a sunset."
        assert result.tags == []

    @pytest.mark.asyncio
    async def test_transport_error(self, mock_llm_client, image_unit):
        mock_llm_client.complete_with_vision.side_effect = TimeoutError("slow")
        with pytest.raises(AnalysisFailed, match="Failed to analyze image"):
            await VisionAdapter(mock_llm_client).analyze(image_unit)


class TestAnswerQuestion:
    @pytest.mark.asyncio
    async def test_answer(self, mock_llm_client, image_unit):
        mock_llm_client.complete_with_vision.return_value = llm_response(" Three bars. ")
        answer = await VisionAdapter(mock_llm_client).answer_question(image_unit, "How many bars?")
        assert answer == "Three bars."
        kwargs = mock_llm_client.complete_with_vision.call_args.kwargs
        assert kwargs["messages"][0].content == "How many bars?"
        assert kwargs["max_tokens"] == 512

    @pytest.mark.asyncio
    async def test_error(self, mock_llm_client, image_unit):
        mock_llm_client.complete_with_vision.side_effect = RuntimeError("401")
        with pytest.raises(AnalysisFailed, match="Failed to answer question"):
            await VisionAdapter(mock_llm_client).answer_question(image_unit, "?")
