"""Fetch source images from http(s) URLs or inline ``data:`` URLs."""

import base64
import binascii
import logging

import httpx

from app.services.errors import ImageFetchError, InvalidInputError

logger = logging.getLogger("lgtm.fetcher")


def decode_data_url(url: str) -> bytes:
    """Decode the base64 payload of a ``data:`` URL (everything after the first comma)."""
    _, sep, payload = url.partition(",")
    if not sep:
        raise InvalidInputError("Invalid data URL: missing comma")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputError(f"Invalid data URL: {exc}") from exc


class ImageFetcher:
    """Downloads image bytes; a shared ``httpx.AsyncClient`` may be injected."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_bytes: int = 20 * 1024 * 1024,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_bytes = max_bytes
        self._client = client

    async def fetch(self, url: str) -> bytes:
        """Return the raw bytes behind *url*.

        Raises:
            InvalidInputError: malformed data URL or unsupported scheme.
            ImageFetchError: network failure, non-2xx status or oversized body.
        """
        if url.startswith("data:"):
            return decode_data_url(url)
        if not url.startswith(("http://", "https://")):
            raise InvalidInputError(f"Unsupported URL scheme: {url[:32]!r}")

        if self._client is not None:
            return await self._download(self._client, url)
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            return await self._download(client, url)

    async def _download(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            async with client.stream("GET", url) as resp:
                resp.raise_for_status()
                self._check_size(url, resp.headers.get("content-length"))
                chunks: list[bytes] = []
                received = 0
                async for chunk in resp.aiter_bytes():
                    received += len(chunk)
                    self._check_size(url, received)
                    chunks.append(chunk)
        except httpx.HTTPStatusError as exc:
            logger.warning("Fetch %s returned %d", url, exc.response.status_code)
            raise ImageFetchError(f"Remote server returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Fetch %s failed: %s", url, exc)
            raise ImageFetchError(f"Cannot fetch image: {exc}") from exc

        content = b"".join(chunks)
        logger.info("Fetched %d bytes from %s", len(content), url)
        return content

    def _check_size(self, url: str, size: int | str | None) -> None:
        """Abort once *size* (a byte count or a Content-Length header) passes the limit."""
        if isinstance(size, str):
            size = int(size) if size.isdigit() else None
        if size is not None and size > self._max_bytes:
            logger.warning("Fetch %s aborted: body exceeds %d bytes", url, self._max_bytes)
            raise ImageFetchError(f"Remote image exceeds the {self._max_bytes} byte limit")
