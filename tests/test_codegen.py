"""Tests for the JSON code representation."""

from __future__ import annotations

import json

import pytest

from dash_builders._constants import DEFAULT_COMPONENTS
from dash_builders.codegen import serialize_state, to_json, unescape_codegen

STATES = [
    [],
    DEFAULT_COMPONENTS,
    [{"type": 10, "content": 'She said "hi" \\o/'}],
    [{"type": 10, "content": "emoji 🎉 and ünïcode"}],
    [{"type": 10, "content": 'trailing backslash \\'}],
]


class TestSerializeState:
    def test_matches_json_stringify_shape(self) -> None:
        assert to_json([{"type": 10, "content": "a"}]) == '[{"type":10,"content":"a"}]'

    def test_quotes_escaped(self) -> None:
        assert serialize_state([{"a": 1}]) == '[{\\"a\\":1}]'

    @pytest.mark.parametrize("state", STATES)
    def test_no_unescaped_quotes(self, state) -> None:
        text = serialize_state(state)
        assert all(text[i - 1] == "\\" for i, ch in enumerate(text) if ch == '"')

    @pytest.mark.parametrize("state", STATES)
    def test_unescape_gives_back_the_json(self, state) -> None:
        text = unescape_codegen(serialize_state(state))
        assert text == to_json(state)
        assert json.loads(text) == state

    def test_non_ascii_kept(self) -> None:
        assert "🎉" in serialize_state([{"content": "🎉"}])
