# src/inference/models.py — v1
"""Normalized adapter outputs for vision and document analysis."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AccessibilityNotes(BaseModel):
    """Accessibility observations returned alongside an image caption."""

    color_contrast: str = ""
    text_alternatives: list[str] = Field(default_factory=list)
    structural_roles: list[str] = Field(default_factory=list)


class ImageAnalysisResult(BaseModel):
    """Vision.analyze output."""

    caption: str
    tags: list[str] = Field(default_factory=list)
    extracted_text: str | None = None
    accessibility: AccessibilityNotes | None = None


class PageStructure(BaseModel):
    page_number: int
    text_length: int


class DocumentAnalysis(BaseModel):
    """Document.parse output."""

    text: str
    page_structure: list[PageStructure] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    summary: str | None = None
    simplified_text: str | None = None
    simplified: bool = False  # True only when simplified_text came from the model

    @property
    def page_count(self) -> int:
        return len(self.page_structure)

    @property
    def accessible_text(self) -> str:
        """Plain-language rewrite when available, else the extracted text."""
        if self.simplified and self.simplified_text:
            return self.simplified_text
        return self.text
