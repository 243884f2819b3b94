"""Unit tests for position name resolution."""

import pytest

from app.services.position import CENTER, Anchor, Position, resolve_position

CANONICAL = [
    "top-left", "top-center", "top-right",
    "center-left", "center", "center-right",
    "bottom-left", "bottom-center", "bottom-right",
]


class TestResolvePosition:
    @pytest.mark.parametrize("name", CANONICAL)
    def test_canonical_names(self, name: str) -> None:
        pos = resolve_position(name)
        assert pos.anchor.value == name
        assert pos.x is None and pos.y is None

    @pytest.mark.parametrize("name", CANONICAL)
    def test_case_insensitive(self, name: str) -> None:
        assert resolve_position(name.upper()) == resolve_position(name)

    def test_mixed_case(self) -> None:
        assert resolve_position("Bottom-Right").anchor is Anchor.BOTTOM_RIGHT

    @pytest.mark.parametrize("name", ["", "middle", "top_left", "topleft", "left", "custom", "CUSTOM"])
    def test_unknown_names_are_center(self, name: str) -> None:
        assert resolve_position(name) == CENTER

    def test_surrounding_whitespace_ignored(self) -> None:
        assert resolve_position("  top-left ").anchor is Anchor.TOP_LEFT


class TestCustomPosition:
    def test_custom_carries_offset(self) -> None:
        pos = Position.custom(12, 34)
        assert pos.is_custom
        assert (pos.x, pos.y) == (12, 34)

    def test_named_positions_are_not_custom(self) -> None:
        assert not resolve_position("center").is_custom
