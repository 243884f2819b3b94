"""LGTM image generation: turns raw request values into a rendered image.

Normalises the loosely-typed request values (hex colour, position name,
format name), runs the compositor in a worker thread and pairs the result
with its content type.
"""

import asyncio
import logging
from dataclasses import dataclass

from app.services.codecs import OutputFormat, resolve_output_format
from app.services.color import resolve_color
from app.services.compositor import Compositor, TextOverlay
from app.services.errors import InvalidInputError
from app.services.fetcher import ImageFetcher
from app.services.position import Position, resolve_position

logger = logging.getLogger("lgtm.service")


@dataclass(frozen=True)
class RenderedImage:
    data: bytes
    output_format: OutputFormat

    @property
    def content_type(self) -> str:
        return self.output_format.content_type


def build_overlay(
    text: str,
    text_color: str,
    text_position: str,
    custom_offset: tuple[int, int] | None = None,
) -> TextOverlay:
    """Build a TextOverlay from request strings; never raises on bad colour/position."""
    if custom_offset is not None:
        position = Position.custom(*custom_offset)
    else:
        position = resolve_position(text_position)
    return TextOverlay(text=text, color=resolve_color(text_color), position=position)


class LgtmService:
    """Generates captioned images from uploaded bytes or URLs."""

    def __init__(self, compositor: Compositor, fetcher: ImageFetcher | None = None) -> None:
        self._compositor = compositor
        self._fetcher = fetcher or ImageFetcher()

    async def generate_lgtm_image(
        self,
        image_data: bytes,
        text: str,
        text_color: str,
        text_position: str,
        output_format: str,
        custom_offset: tuple[int, int] | None = None,
        input_format: str | None = None,
    ) -> RenderedImage:
        """Caption *image_data* and encode it in *output_format* (PNG if unrecognised)."""
        if not image_data:
            raise InvalidInputError("Image data is empty")

        overlay = build_overlay(text, text_color, text_position, custom_offset)
        fmt = resolve_output_format(output_format)
        logger.info(
            "Generating image: %d bytes in, position=%s, format=%s",
            len(image_data), overlay.position.anchor.value, fmt.value,
        )

        # CPU-bound decode/draw/encode: keep it off the event loop
        data = await asyncio.to_thread(
            self._compositor.render, image_data, overlay, fmt, input_format,
        )
        return RenderedImage(data=data, output_format=fmt)

    async def generate_lgtm_image_from_url(
        self,
        image_url: str,
        text: str,
        text_color: str,
        text_position: str,
        output_format: str,
        custom_offset: tuple[int, int] | None = None,
    ) -> RenderedImage:
        """Fetch *image_url* (http(s) or data URL) and caption it."""
        image_data = await self._fetcher.fetch(image_url)
        return await self.generate_lgtm_image(
            image_data, text, text_color, text_position, output_format,
            custom_offset=custom_offset,
        )
