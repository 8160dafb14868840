"""Source document text extraction."""

from .pdf_text import extract_text, page_count

__all__ = ["extract_text", "page_count"]
