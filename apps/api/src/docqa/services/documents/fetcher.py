from __future__ import annotations

from typing import Protocol

import httpx

from docqa.errors import FetchError


class DocumentFetcher(Protocol):
    async def fetch(self, ref: str) -> bytes: ...


class HttpDocumentFetcher:
    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch(self, ref: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(ref)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(ref, exc) from exc

        return response.content
