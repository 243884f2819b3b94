"""Typeface loading and text measurement.

The typeface is parsed once (see ``load_font``) and then shared read-only by
every render.  Sized variants are derived on demand and memoised inside the
handle, so measuring and drawing at the same scale always use the same
``FreeTypeFont`` object.

By default the caption uses the TrueType font bundled with Pillow; a
deployment may point ``font_path`` at another TrueType/OpenType file instead.
"""

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import ImageFont

from app.services.errors import FontLoadError

logger = logging.getLogger("lgtm.fonts")

# Em size used to parse the base face; variants are re-sized from it.
_BASE_SIZE = 64


@dataclass(frozen=True)
class TextMetrics:
    """Measurements of a caption laid out at one scale.

    ``descent`` is baseline-relative and therefore <= 0.
    """
    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent - self.descent


class FontMetrics(Protocol):
    """Measurement capability used by the layout engine."""

    def measure(self, text: str, scale: float) -> TextMetrics: ...


class FontHandle:
    """A loaded typeface; immutable and safe to share between requests.

    A scale is the caption's line height in pixels (ascent to descent), not
    the em size, so ``measure(text, s).height`` is ``s``.
    """

    def __init__(self, base_font: ImageFont.FreeTypeFont, name: str) -> None:
        self._base_font = base_font
        self.name = name
        ascent, descent = base_font.getmetrics()
        line_height = ascent + descent
        if line_height <= 0:
            raise FontLoadError(f"Font {name} reports no line height")
        self._em_per_pixel = base_font.size / line_height
        self._ascent_ratio = ascent / line_height
        self._sized = functools.lru_cache(maxsize=64)(self._load_variant)

    def _load_variant(self, scale: float) -> ImageFont.FreeTypeFont:
        return self._base_font.font_variant(size=scale * self._em_per_pixel)

    def at_scale(self, scale: float) -> ImageFont.FreeTypeFont:
        """Return the font whose line height is *scale* pixels."""
        return self._sized(float(scale))

    def measure(self, text: str, scale: float) -> TextMetrics:
        """Lay *text* out from the origin and report its extent.

        Width is the right edge of the inked pixels, so blanks add nothing
        and a caption without visible glyphs measures 0.
        """
        font = self.at_scale(scale)
        ascent = scale * self._ascent_ratio
        return TextMetrics(width=float(_ink_right(font, text)), ascent=ascent, descent=ascent - scale)

    def __repr__(self) -> str:
        return f"FontHandle({self.name!r})"


def _ink_right(font: ImageFont.FreeTypeFont, text: str) -> int:
    """Rightmost inked column of *text* drawn from a left/baseline origin."""
    if not text:
        return 0
    mask, (left, _) = font.getmask2(text, "L", anchor="ls")
    bbox = mask.getbbox()
    if bbox is None:
        return 0
    return max(left + bbox[2], 0)


def load_font(font_path: Path | str | None = None) -> FontHandle:
    """Load the caption typeface.

    Args:
        font_path: Optional TrueType/OpenType file.  ``None`` selects the
            typeface bundled with Pillow.

    Raises:
        FontLoadError: if the font file is missing or cannot be parsed, or
            Pillow was built without FreeType support.
    """
    if font_path is not None:
        path = Path(font_path)
        try:
            base = ImageFont.truetype(str(path), size=_BASE_SIZE)
        except OSError as exc:
            raise FontLoadError(f"Cannot load font {path}: {exc}") from exc
        name = path.name
    else:
        try:
            base = ImageFont.load_default(size=_BASE_SIZE)
        except (OSError, ImportError) as exc:
            raise FontLoadError(f"Cannot load bundled font: {exc}") from exc
        name = "pillow-default"

    if not isinstance(base, ImageFont.FreeTypeFont):
        raise FontLoadError("Pillow was built without FreeType; scalable fonts are unavailable")

    logger.info("Loaded font %s", name)
    return FontHandle(base, name)
