import httpx
import pytest

from docqa.errors import FetchError
from docqa.services.documents import HttpDocumentFetcher


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_fetch_returns_response_bytes() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=b"%PDF-1.4 fake")

    fetcher = HttpDocumentFetcher(timeout_seconds=5, transport=_transport(handler))

    data = await fetcher.fetch("https://docs.example.com/policy.pdf")

    assert data == b"%PDF-1.4 fake"
    assert requested == ["https://docs.example.com/policy.pdf"]


@pytest.mark.asyncio
async def test_fetch_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.pdf":
            return httpx.Response(302, headers={"Location": "https://docs.example.com/new.pdf"})
        return httpx.Response(200, content=b"moved")

    fetcher = HttpDocumentFetcher(transport=_transport(handler))

    assert await fetcher.fetch("https://docs.example.com/old.pdf") == b"moved"


@pytest.mark.asyncio
async def test_fetch_maps_error_status_to_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    fetcher = HttpDocumentFetcher(transport=_transport(handler))

    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch("https://docs.example.com/missing.pdf")

    assert exc_info.value.ref == "https://docs.example.com/missing.pdf"
    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_fetch_maps_transport_error_to_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = HttpDocumentFetcher(transport=_transport(handler))

    with pytest.raises(FetchError, match="connection refused"):
        await fetcher.fetch("https://docs.example.com/policy.pdf")
