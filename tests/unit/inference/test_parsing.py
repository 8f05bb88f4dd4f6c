# tests/unit/inference/test_parsing.py — v1
"""Tests for inference/parsing.py."""

from __future__ import annotations

from accessibilityhub.inference.parsing import extract_section, parse_json_object, split_list


class TestParseJsonObject:
    def test_bare(self):
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_fenced(self):
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_embedded_in_prose(self):
        assert parse_json_object('Sure! Here it is: {"a": 1} Hope it helps.') == {"a": 1}

    def test_not_an_object(self):
        assert parse_json_object("[1, 2]") is None

    def test_garbage(self):
        assert parse_json_object("no json here") is None
        assert parse_json_object("{broken") is None


class TestExtractSection:
    def test_case_insensitive(self):
        assert extract_section("CAPTION: hi there\nTags: x", "caption") == "hi there"

    def test_missing(self):
        assert extract_section("nothing", "caption") is None


class TestSplitList:
    def test_split(self):
        assert split_list(" a, b ,,c ") == ["a", "b", "c"]

    def test_empty(self):
        assert split_list(None) == []
