"""Raster decode/encode backends.

Two interchangeable codecs are provided:
  PillowCodec  → Pillow's plugins (default; honours input format hints)
  OpenCVCodec  → cv2.imdecode / cv2.imencode (content sniffing only)

Both decode into an RGBA ``PIL.Image.Image`` so the compositor draws on the
same buffer type regardless of backend.
"""

import io
import logging
from enum import Enum
from typing import Protocol

import cv2
import numpy as np
from PIL import Image

from app.services.errors import ImageDecodeError, ImageEncodeError

logger = logging.getLogger("lgtm.codecs")


class OutputFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"

    @property
    def content_type(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else "png"

    @property
    def pillow_name(self) -> str:
        return self.value.upper()


_FORMAT_ALIASES: dict[str, OutputFormat] = {
    "png": OutputFormat.PNG,
    "jpeg": OutputFormat.JPEG,
    "jpg": OutputFormat.JPEG,
}


def resolve_output_format(name: str | None) -> OutputFormat:
    """Map an output format name to OutputFormat; unknown names give PNG."""
    return _FORMAT_ALIASES.get((name or "").strip().lower(), OutputFormat.PNG)


def _pillow_format_id(hint: str) -> str:
    """Normalise a format hint ("jpg", "image/png", "PNG") to a Pillow format id."""
    name = hint.strip().lower()
    if name.startswith("image/"):
        name = name[len("image/"):]
    if name in ("jpg", "jpeg"):
        return "JPEG"
    return name.upper()


class ImageCodec(Protocol):
    """Decode/encode capability used by the compositor."""

    name: str

    def decode(self, data: bytes, format_hint: str | None = None) -> Image.Image: ...

    def encode(self, image: Image.Image, output_format: OutputFormat) -> bytes: ...


class PillowCodec:
    name = "pillow"

    def decode(self, data: bytes, format_hint: str | None = None) -> Image.Image:
        """Decode *data* into an RGBA image.

        With *format_hint* only that Pillow plugin is tried; otherwise the
        format is sniffed from the content.
        """
        formats = [_pillow_format_id(format_hint)] if format_hint else None
        try:
            with Image.open(io.BytesIO(data), formats=formats) as img:
                # First frame only for animated inputs
                return img.convert("RGBA")
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
            raise ImageDecodeError(f"Cannot decode image: {exc}") from exc

    def encode(self, image: Image.Image, output_format: OutputFormat) -> bytes:
        if output_format is OutputFormat.JPEG and image.mode != "RGB":
            image = image.convert("RGB")
        buf = io.BytesIO()
        try:
            image.save(buf, format=output_format.pillow_name)
        except (OSError, ValueError, KeyError) as exc:
            raise ImageEncodeError(f"Cannot encode image as {output_format.value}: {exc}") from exc
        return buf.getvalue()


class OpenCVCodec:
    name = "opencv"

    def decode(self, data: bytes, format_hint: str | None = None) -> Image.Image:
        """Decode *data* via cv2.imdecode.

        OpenCV always sniffs the container; *format_hint* is only logged.
        """
        if format_hint:
            logger.debug("OpenCV codec ignores format hint %r", format_hint)
        buf = np.frombuffer(data, dtype=np.uint8)
        if buf.size == 0:
            raise ImageDecodeError("Cannot decode image: empty input")
        try:
            img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        except cv2.error as exc:
            raise ImageDecodeError(f"Cannot decode image: {exc}") from exc
        if img is None:
            raise ImageDecodeError("Cannot decode image: unrecognised format")

        if img.dtype != np.uint8:
            # 16-bit PNG/TIFF
            img = (img / 257).astype(np.uint8)

        if img.ndim == 2:
            rgba = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
        elif img.shape[2] == 4:
            rgba = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
        return Image.fromarray(rgba)

    def encode(self, image: Image.Image, output_format: OutputFormat) -> bytes:
        if output_format is OutputFormat.JPEG:
            arr = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2BGR)
        else:
            arr = cv2.cvtColor(np.array(image.convert("RGBA")), cv2.COLOR_RGBA2BGRA)
        try:
            ok, encoded = cv2.imencode(f".{output_format.extension}", arr)
        except cv2.error as exc:
            raise ImageEncodeError(f"Cannot encode image as {output_format.value}: {exc}") from exc
        if not ok:
            raise ImageEncodeError(f"Cannot encode image as {output_format.value}")
        return encoded.tobytes()


_CODECS: dict[str, type] = {
    PillowCodec.name: PillowCodec,
    OpenCVCodec.name: OpenCVCodec,
}


def get_codec(name: str = "pillow") -> ImageCodec:
    """Return a codec instance by backend name."""
    try:
        return _CODECS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown codec backend {name!r}; expected one of {sorted(_CODECS)}") from None
