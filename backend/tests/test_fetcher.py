"""Unit tests for the image fetcher."""

import base64

import httpx
import pytest

from app.services.errors import ImageFetchError, InvalidInputError
from app.services.fetcher import ImageFetcher, decode_data_url

PAYLOAD = b"\x89PNG\r\n\x1a\nfake"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class ChunkStream(httpx.AsyncByteStream):
    """Response body served in fixed chunks; counts how many were pulled."""

    def __init__(self, chunks: list[bytes]) -> None:
        self.chunks = chunks
        self.sent = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            self.sent += 1
            yield chunk


class TestDecodeDataUrl:
    def test_base64_payload(self) -> None:
        url = "data:image/png;base64," + base64.b64encode(PAYLOAD).decode()
        assert decode_data_url(url) == PAYLOAD

    def test_missing_comma(self) -> None:
        with pytest.raises(InvalidInputError):
            decode_data_url("data:image/png;base64")

    def test_invalid_base64(self) -> None:
        with pytest.raises(InvalidInputError):
            decode_data_url("data:image/png;base64,@@@not-base64@@@")


class TestImageFetcher:
    @pytest.mark.asyncio
    async def test_data_url(self) -> None:
        url = "data:image/png;base64," + base64.b64encode(PAYLOAD).decode()
        assert await ImageFetcher().fetch(url) == PAYLOAD

    @pytest.mark.asyncio
    async def test_http_success(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=PAYLOAD)

        async with _client(handler) as client:
            data = await ImageFetcher(client=client).fetch("https://example.com/cat.png")
        assert data == PAYLOAD
        assert seen == ["https://example.com/cat.png"]

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(ImageFetchError):
                await ImageFetcher(client=client).fetch("https://example.com/missing.png")

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ImageFetchError):
                await ImageFetcher(client=client).fetch("http://unreachable.invalid/x.png")

    @pytest.mark.asyncio
    async def test_oversized_body(self) -> None:
        async with _client(lambda request: httpx.Response(200, content=b"x" * 100)) as client:
            with pytest.raises(ImageFetchError):
                await ImageFetcher(max_bytes=10, client=client).fetch("https://example.com/big.png")

    @pytest.mark.asyncio
    async def test_declared_length_rejected_before_body(self) -> None:
        stream = ChunkStream([b"x" * 4] * 10)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Length": "40"}, stream=stream)

        async with _client(handler) as client:
            with pytest.raises(ImageFetchError):
                await ImageFetcher(max_bytes=10, client=client).fetch("https://example.com/big.png")
        assert stream.sent == 0

    @pytest.mark.asyncio
    async def test_undeclared_length_aborts_mid_stream(self) -> None:
        stream = ChunkStream([b"x" * 4] * 10)

        async with _client(lambda request: httpx.Response(200, stream=stream)) as client:
            with pytest.raises(ImageFetchError):
                await ImageFetcher(max_bytes=10, client=client).fetch("https://example.com/big.png")
        assert stream.sent == 3

    @pytest.mark.asyncio
    async def test_chunked_body_within_limit(self) -> None:
        stream = ChunkStream([b"ab", b"cd", b"ef"])

        async with _client(lambda request: httpx.Response(200, stream=stream)) as client:
            data = await ImageFetcher(max_bytes=6, client=client).fetch("https://example.com/ok.png")
        assert data == b"abcdef"

    @pytest.mark.asyncio
    async def test_unsupported_scheme(self) -> None:
        with pytest.raises(InvalidInputError):
            await ImageFetcher().fetch("ftp://example.com/cat.png")
