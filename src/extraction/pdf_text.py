"""
PDF text extraction.

Turns the raw bytes of an uploaded PDF into one plain-text corpus, page by
page in document order.

Dependencies:
    - fitz (PyMuPDF): PDF decoding
"""

import logging

import fitz

from src.errors import ExtractionError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


def _open_document(data: bytes) -> fitz.Document:
    if not data:
        raise ExtractionError("Document is empty")
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        # fitz.FileDataError and EmptyFileError both derive from RuntimeError
        raise ExtractionError(f"Could not read PDF document: {e}") from e
    if doc.needs_pass:
        doc.close()
        raise ExtractionError("PDF document is password protected")
    return doc


def extract_text(data: bytes) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts in document order, separated by a blank line

    Raises:
        ExtractionError: If the payload is not a readable PDF or holds no text
    """
    doc = _open_document(data)
    try:
        pages = [page.get_text("text").strip() for page in doc]
        page_total = len(pages)
    finally:
        doc.close()

    text = PAGE_SEPARATOR.join(p for p in pages if p)
    if not text:
        raise ExtractionError("No extractable text found in document")

    logger.debug("Extracted %d characters from %d pages", len(text), page_total)
    return text


def page_count(data: bytes) -> int:
    """Return the number of pages in a PDF."""
    doc = _open_document(data)
    try:
        return doc.page_count
    finally:
        doc.close()
