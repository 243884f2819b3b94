"""Caption compositor: draw a fitted caption onto an image.

Pipeline:
  1. Decode the input bytes into an RGBA buffer (codec backend).
  2. Compute scale and origin with the fit-and-place engine.
  3. Draw the glyphs straight into the buffer at the computed baseline.
  4. Encode the buffer in the requested output format.

The compositor performs no file or network I/O; callers hand it bytes and
get bytes back.  It holds only the shared, read-only font and a stateless
codec, so one instance can serve concurrent renders.
"""

import logging
from dataclasses import dataclass

from PIL import Image, ImageDraw

from app.services.codecs import ImageCodec, OutputFormat, PillowCodec
from app.services.color import Color
from app.services.fonts import FontHandle
from app.services.layout import Layout, compute_layout
from app.services.position import Position

logger = logging.getLogger("lgtm.compositor")


@dataclass(frozen=True)
class TextOverlay:
    """The caption to draw on one image."""
    text: str
    color: Color
    position: Position


class Compositor:
    """Renders a TextOverlay onto encoded image bytes."""

    def __init__(self, font: FontHandle, codec: ImageCodec | None = None) -> None:
        self._font = font
        self._codec = codec or PillowCodec()

    @property
    def font(self) -> FontHandle:
        return self._font

    @property
    def codec(self) -> ImageCodec:
        return self._codec

    def render(
        self,
        image_bytes: bytes,
        overlay: TextOverlay,
        output_format: OutputFormat = OutputFormat.PNG,
        input_format: str | None = None,
    ) -> bytes:
        """Decode, caption and re-encode an image.

        Args:
            image_bytes: Encoded source image.
            overlay: Caption text, colour and position.
            output_format: Format of the returned bytes.
            input_format: Optional decoder hint ("png", "jpeg", ...); the
                format is sniffed from the content when omitted.

        Returns:
            The encoded captioned image.

        Raises:
            ImageDecodeError: *image_bytes* is not a decodable image.
            ImageEncodeError: the result could not be encoded.
        """
        img = self._codec.decode(image_bytes, input_format)
        layout = self.draw(img, overlay)
        data = self._codec.encode(img, output_format)
        logger.info(
            "Rendered %dx%d %s (%d bytes), caption %d chars at scale %.1f",
            img.width, img.height, output_format.value, len(data),
            len(overlay.text), layout.scale,
        )
        return data

    def draw(self, img: Image.Image, overlay: TextOverlay) -> Layout:
        """Draw *overlay* onto the RGBA image *img* in place and return the layout used."""
        layout = compute_layout(img.width, img.height, overlay.text, overlay.position, self._font)
        if overlay.text:
            font = self._font.at_scale(layout.scale)
            # Same-mode drawing on RGBA writes the fill (alpha included) over
            # the destination instead of blending with it.
            draw = ImageDraw.Draw(img)
            draw.text(
                (layout.x, layout.baseline_y),
                overlay.text,
                font=font,
                fill=overlay.color.rgba,
                anchor="ls",
            )
        return layout


def render_overlay(
    image_bytes: bytes,
    overlay: TextOverlay,
    font: FontHandle,
    output_format: OutputFormat = OutputFormat.PNG,
    input_format: str | None = None,
    codec: ImageCodec | None = None,
) -> bytes:
    """One-off convenience wrapper around ``Compositor.render``."""
    return Compositor(font, codec).render(image_bytes, overlay, output_format, input_format)
