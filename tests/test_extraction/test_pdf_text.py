"""Tests for PDF text extraction."""

import fitz
import pytest
from conftest import make_pdf

from src.errors import ExtractionError
from src.extraction.pdf_text import extract_text, page_count


class TestExtractText:
    """Test text extraction from PDF bytes."""

    def test_extracts_every_page_in_order(self, sample_pdf: bytes):
        """Test that page texts appear in document order."""
        text = extract_text(sample_pdf)

        first = text.index("basic unit of life")
        second = text.index("Mitochondria produce ATP")
        third = text.index("photosynthesis in plants")
        assert first < second < third

    def test_pages_are_whitespace_separated(self):
        """Test that text from adjacent pages does not run together."""
        text = extract_text(make_pdf(["alpha", "beta"]))

        assert "alphabeta" not in text
        assert text.split() == ["alpha", "beta"]

    def test_skips_blank_pages(self):
        """Test that blank pages contribute nothing."""
        text = extract_text(make_pdf(["first", "", "last"]))

        assert text.split() == ["first", "last"]

    def test_empty_payload_raises(self):
        """Test that empty bytes are rejected."""
        with pytest.raises(ExtractionError):
            extract_text(b"")

    def test_non_pdf_payload_raises(self):
        """Test that arbitrary bytes are rejected."""
        with pytest.raises(ExtractionError):
            extract_text(b"this is definitely not a pdf document")

    def test_document_without_text_raises(self):
        """Test that an image-only style PDF with no text is rejected."""
        with pytest.raises(ExtractionError, match="No extractable text"):
            extract_text(make_pdf(["", ""]))

    def test_encrypted_document_raises(self):
        """Test that a password-protected PDF is rejected."""
        doc = fitz.open()
        doc.new_page().insert_text((72, 72), "secret")
        data = doc.tobytes(
            encryption=fitz.PDF_ENCRYPT_AES_256,
            owner_pw="owner",
            user_pw="user",
        )
        doc.close()

        with pytest.raises(ExtractionError, match="password"):
            extract_text(data)


class TestPageCount:
    """Test page counting."""

    def test_counts_pages(self, sample_pdf: bytes):
        assert page_count(sample_pdf) == 3

    def test_empty_payload_raises(self):
        with pytest.raises(ExtractionError):
            page_count(b"")
