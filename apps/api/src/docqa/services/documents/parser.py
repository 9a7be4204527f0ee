from __future__ import annotations

from io import BytesIO

from PyPDF2 import PdfReader
from PyPDF2.errors import PyPdfError


def parse_pdf(data: bytes) -> str:
    """Extract the text of every page of a PDF, one page per line block.

    Raises ``ValueError`` when the bytes are not a readable PDF or carry no
    extractable text (scanned pages without OCR, for instance).
    """
    try:
        reader = PdfReader(BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PyPdfError as exc:
        raise ValueError(f"unreadable PDF: {exc}") from exc

    text = "\n".join(pages).strip()
    if not text:
        raise ValueError("no extractable text in PDF")
    return text
