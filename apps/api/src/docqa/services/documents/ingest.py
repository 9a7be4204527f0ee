from __future__ import annotations

import asyncio
import logging
from typing import Callable

from docqa.errors import ParseError, ValidationError
from docqa.services.documents.fetcher import DocumentFetcher
from docqa.services.documents.parser import parse_pdf
from docqa.services.documents.store import DocumentStore
from docqa.services.documents.types import DocumentPair

logger = logging.getLogger(__name__)

DocumentParser = Callable[[bytes], str]


class DocumentIngestor:
    def __init__(
        self,
        *,
        store: DocumentStore,
        fetcher: DocumentFetcher,
        parser: DocumentParser = parse_pdf,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._parser = parser

    async def ingest(self, source_ref: str, target_ref: str) -> DocumentPair:
        """Fetch and parse both documents, then publish them as one pair.

        Nothing is published unless both documents succeed.  When both fail,
        the source document's error is the one raised.
        """
        if not source_ref or not target_ref:
            raise ValidationError("Both source_document_url and target_document_url are required.")

        logger.info("Downloading and parsing documents from: %s and %s", source_ref, target_ref)

        results = await asyncio.gather(
            self._load_text(source_ref),
            self._load_text(target_ref),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                logger.error("Document ingestion failed: %s", result)
                raise result

        source_text, target_text = results
        pair = DocumentPair(
            source_text=source_text,
            target_text=target_text,
            source_ref=source_ref,
            target_ref=target_ref,
        )
        self._store.replace(pair)

        logger.info(
            "Documents parsed successfully (source=%d chars, target=%d chars)",
            len(source_text),
            len(target_text),
        )
        return pair

    async def _load_text(self, ref: str) -> str:
        data = await self._fetcher.fetch(ref)
        try:
            return await asyncio.to_thread(self._parser, data)
        except Exception as exc:
            raise ParseError(ref, exc) from exc
