from docqa.services.documents.fetcher import DocumentFetcher, HttpDocumentFetcher
from docqa.services.documents.ingest import DocumentIngestor, DocumentParser
from docqa.services.documents.parser import parse_pdf
from docqa.services.documents.store import DocumentStore
from docqa.services.documents.types import DocumentPair

__all__ = [
    "DocumentFetcher",
    "DocumentIngestor",
    "DocumentPair",
    "DocumentParser",
    "DocumentStore",
    "HttpDocumentFetcher",
    "parse_pdf",
]
