"""Caption anchor positions."""

from dataclasses import dataclass
from enum import Enum


class Anchor(str, Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER = "center"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"
    CUSTOM = "custom"  # x/y carried on Position; placed like CENTER for now


# Names accepted from callers; "custom" is only reachable via Position.custom()
_NAMED_ANCHORS: dict[str, Anchor] = {
    a.value: a for a in Anchor if a is not Anchor.CUSTOM
}


@dataclass(frozen=True)
class Position:
    """Where the caption goes: one of the nine anchors, or a custom offset."""
    anchor: Anchor = Anchor.CENTER
    x: int | None = None
    y: int | None = None

    @classmethod
    def custom(cls, x: int, y: int) -> "Position":
        return cls(Anchor.CUSTOM, x, y)

    @property
    def is_custom(self) -> bool:
        return self.anchor is Anchor.CUSTOM


CENTER = Position(Anchor.CENTER)


def resolve_position(name: str) -> Position:
    """Map a position name (case-insensitive) to a Position; unknown names give CENTER."""
    anchor = _NAMED_ANCHORS.get((name or "").strip().lower())
    if anchor is None:
        return CENTER
    return Position(anchor)
