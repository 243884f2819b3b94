"""Hex colour parsing for caption text.

Parsing is permissive: malformed input never raises, it degrades to opaque
white.  Each channel is parsed on its own, so a single corrupt channel only
resets that channel to 255.
"""

import logging
import string
from dataclasses import dataclass

logger = logging.getLogger("lgtm.color")

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit channels."""
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"Color channel {name}={value} outside 0..255")

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Render as ``RRGGBBAA`` (upper-case, no leading ``#``)."""
        return f"{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"


WHITE = Color(255, 255, 255, 255)


def _parse_channel(pair: str) -> int:
    """Parse a two-digit hex channel, falling back to 255."""
    # int(..., 16) also accepts signs, whitespace and underscores
    if len(pair) != 2 or not set(pair) <= _HEX_DIGITS:
        return 255
    return int(pair, 16)


def resolve_color(hex_str: str) -> Color:
    """Parse ``RRGGBB`` / ``RRGGBBAA`` (any leading ``#`` stripped) into a Color.

    Any other length yields opaque white.  Never raises.
    """
    hex_str = hex_str or ""
    digits = hex_str.lstrip("#")

    if len(digits) == 6:
        return Color(
            _parse_channel(digits[0:2]),
            _parse_channel(digits[2:4]),
            _parse_channel(digits[4:6]),
            255,
        )
    if len(digits) == 8:
        return Color(
            _parse_channel(digits[0:2]),
            _parse_channel(digits[2:4]),
            _parse_channel(digits[4:6]),
            _parse_channel(digits[6:8]),
        )

    logger.debug("Unrecognised color %r, using white", hex_str)
    return WHITE
