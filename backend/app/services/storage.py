"""File cache for the most recently produced image."""

import logging
from pathlib import Path

from app.services.codecs import OutputFormat
from app.services.errors import OutputNotFoundError

logger = logging.getLogger("lgtm.storage")

_STEM = "output"


class OutputStore:
    """Keeps exactly one cached image, ``<directory>/output.<ext>``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path_for(self, output_format: OutputFormat) -> Path:
        return self.directory / f"{_STEM}.{output_format.extension}"

    def save(self, data: bytes, output_format: OutputFormat) -> Path:
        """Replace the cached image with *data*."""
        self.directory.mkdir(parents=True, exist_ok=True)
        for fmt in OutputFormat:
            if fmt is not output_format:
                self._path_for(fmt).unlink(missing_ok=True)
        path = self._path_for(output_format)
        # Write-then-rename so readers never see a half-written file
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_bytes(data)
        tmp.replace(path)
        logger.info("Cached output image: %s (%d bytes)", path, len(data))
        return path

    def load(self) -> tuple[bytes, OutputFormat]:
        """Return the cached image and its format."""
        for fmt in OutputFormat:
            path = self._path_for(fmt)
            try:
                return path.read_bytes(), fmt
            except FileNotFoundError:
                continue
        raise OutputNotFoundError("No image has been generated yet")
