# tests/unit/logging/test_context.py — v1
"""Tests for logging/context.py."""

from __future__ import annotations

from accessibilityhub.logging.context import (
    clear_context,
    get_context,
    set_session_context,
    set_step_context,
)


class TestLogContext:
    def teardown_method(self):
        clear_context()

    def test_empty_by_default(self):
        clear_context()
        assert get_context().as_dict() == {}

    def test_session_then_step(self):
        set_session_context("12", "u1")
        set_step_context("quota", "image")
        ctx = get_context()
        assert ctx.session_id == "12"
        assert ctx.user_id == "u1"
        assert ctx.step == "quota"
        assert ctx.content_type == "image"

    def test_step_keeps_content_type_when_omitted(self):
        set_step_context("validate", "pdf")
        set_step_context("fetch")
        assert get_context().content_type == "pdf"

    def test_clear(self):
        set_session_context("1")
        clear_context()
        assert get_context().session_id is None
