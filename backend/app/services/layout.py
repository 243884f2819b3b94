"""Fit-and-place engine: choose a caption scale and where to draw it.

Steps:
  1. Guess a scale from the caption length and image height.
  2. Measure the caption at that scale.
  3. If it is wider than 90 % of the image, shrink proportionally once and
     re-measure.  This is a single correction, not a search: glyph hinting
     makes width slightly non-linear in scale, so the result may land a pixel
     or two either side of the 90 % line.
  4. Anchor the measured box against the requested position, clamped to the
     image.
  5. Convert the box top to a baseline for drawing.

The engine only depends on the ``FontMetrics`` protocol, so it can be driven
by any measurement backend (tests use a linear fake).
"""

import logging
from dataclasses import dataclass

from app.services.fonts import FontMetrics, TextMetrics
from app.services.position import Anchor, Position

logger = logging.getLogger("lgtm.layout")

MIN_SCALE = 1.0
MAX_WIDTH_RATIO = 0.90

_LEFT = {Anchor.TOP_LEFT, Anchor.CENTER_LEFT, Anchor.BOTTOM_LEFT}
_RIGHT = {Anchor.TOP_RIGHT, Anchor.CENTER_RIGHT, Anchor.BOTTOM_RIGHT}
_TOP = {Anchor.TOP_LEFT, Anchor.TOP_CENTER, Anchor.TOP_RIGHT}
_BOTTOM = {Anchor.BOTTOM_LEFT, Anchor.BOTTOM_CENTER, Anchor.BOTTOM_RIGHT}


@dataclass(frozen=True)
class Layout:
    """Where and how large to draw a caption.

    ``x``/``y`` are the top-left corner of the caption box; ``baseline_y``
    is the baseline the glyphs sit on.  All measurements refer to ``scale``.
    """
    scale: float
    initial_scale: float
    x: int
    y: int
    baseline_y: float
    text_width: float
    text_height: float
    ascent: float
    descent: float

    @property
    def was_shrunk(self) -> bool:
        return self.scale < self.initial_scale


def initial_scale(text: str, image_height: int) -> float:
    """Length-based first estimate of the caption scale, at least ``MIN_SCALE``."""
    length = len(text)
    if length > 20:
        scale = image_height / (length / 2.5)
    elif length > 10:
        scale = image_height / (length / 1.8)
    else:
        scale = image_height / 5.0
    return max(scale, MIN_SCALE)


def _anchor_offsets(
    anchor: Anchor,
    image_width: int,
    image_height: int,
    text_width: float,
    text_height: float,
) -> tuple[float, float]:
    """Top-left corner of the caption box for *anchor* (unclamped)."""
    if anchor in _LEFT:
        x = 0.0
    elif anchor in _RIGHT:
        x = image_width - text_width
    else:
        x = (image_width - text_width) / 2

    if anchor in _TOP:
        y = 0.0
    elif anchor in _BOTTOM:
        y = image_height - text_height
    else:
        # Centre row; CUSTOM lands here too and its x/y are not applied yet.
        y = (image_height - text_height) / 2

    return x, y


def compute_layout(
    image_width: int,
    image_height: int,
    text: str,
    position: Position,
    font: FontMetrics,
) -> Layout:
    """Compute scale and draw origin for *text* on an image of the given size.

    Args:
        image_width: Image width in pixels (> 0).
        image_height: Image height in pixels (> 0).
        text: Caption; may be empty.
        position: Requested anchor.
        font: Measurement backend.

    Returns:
        A Layout whose measurements were all taken at ``Layout.scale``.
    """
    first_scale = initial_scale(text, image_height)
    scale = first_scale
    metrics: TextMetrics = font.measure(text, scale)

    max_width = image_width * MAX_WIDTH_RATIO
    if metrics.width > max_width and metrics.width > 0:
        scale = max(scale * (max_width / metrics.width), MIN_SCALE)
        metrics = font.measure(text, scale)
        logger.debug(
            "Caption overflow: scale %.2f -> %.2f (width %.1f, limit %.1f)",
            first_scale, scale, metrics.width, max_width,
        )

    x, y = _anchor_offsets(
        position.anchor, image_width, image_height, metrics.width, metrics.height,
    )
    x = min(max(x, 0.0), float(image_width))
    y = min(max(y, 0.0), float(image_height))

    return Layout(
        scale=scale,
        initial_scale=first_scale,
        x=int(x),
        y=int(y),
        baseline_y=y + metrics.ascent,
        text_width=metrics.width,
        text_height=metrics.height,
        ascent=metrics.ascent,
        descent=metrics.descent,
    )
