"""
Tests for the document reader.
"""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from docx import Document
from pypdf import PdfWriter

from menucheck.config import ErrorCode, ExtractionError, InputValidationError

from .reader import DocumentKind, detect_kind, extract_text, read_document


def _docx_bytes() -> bytes:
    document = Document()
    document.add_paragraph("Tabela de preços")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "X-Burger"
    table.cell(0, 1).text = "R$18"
    table.cell(1, 0).text = "Suco"
    table.cell(1, 1).text = "R$8"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


# --- detect_kind Tests ---


@pytest.mark.parametrize(
    ("filename", "content_type", "expected"),
    [
        ("menu.pdf", None, DocumentKind.PDF),
        ("MENU.PDF", None, DocumentKind.PDF),
        ("precos.docx", None, DocumentKind.DOCX),
        ("upload", "application/pdf", DocumentKind.PDF),
        (
            None,
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            DocumentKind.DOCX,
        ),
    ],
)
def test_detect_kind(
    filename: str | None, content_type: str | None, expected: DocumentKind
) -> None:
    assert detect_kind(filename, content_type) == expected


def test_detect_kind_rejects_unknown_format() -> None:
    with pytest.raises(InputValidationError):
        detect_kind("menu.png", "image/png")


# --- extract_text Tests ---


def test_extract_docx_paragraphs_and_tables() -> None:
    text = extract_text(_docx_bytes(), DocumentKind.DOCX)

    assert "Tabela de preços" in text
    assert "X-Burger | R$18" in text
    assert "Suco | R$8" in text


def test_extract_pdf_joins_pages() -> None:
    """Test each page's text ends up on its own line."""
    pages = [MagicMock(), MagicMock()]
    pages[0].extract_text.return_value = "Frango grelhdo com arroz"
    pages[1].extract_text.return_value = "X-Burger R$20"

    with patch("menucheck.adapters.documents.reader.PdfReader") as reader_cls:
        reader_cls.return_value.pages = pages
        text = extract_text(b"%PDF-1.4 fake", DocumentKind.PDF)

    assert text == "Frango grelhdo com arroz\nX-Burger R$20"


def test_extract_pdf_without_text_layer() -> None:
    with pytest.raises(ExtractionError) as exc_info:
        extract_text(_blank_pdf_bytes(), DocumentKind.PDF)

    assert exc_info.value.code == ErrorCode.EXTRACTION_EMPTY_TEXT


def test_extract_corrupt_pdf() -> None:
    with pytest.raises(ExtractionError) as exc_info:
        extract_text(b"this is not a pdf", DocumentKind.PDF)

    assert exc_info.value.code == ErrorCode.EXTRACTION_FAILED


def test_extract_corrupt_docx() -> None:
    with pytest.raises(ExtractionError) as exc_info:
        extract_text(b"this is not a zip", DocumentKind.DOCX)

    assert exc_info.value.code == ErrorCode.EXTRACTION_FAILED


def test_extract_empty_upload() -> None:
    with pytest.raises(ExtractionError):
        extract_text(b"", DocumentKind.PDF)


# --- read_document Tests ---


def test_read_document_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "referencia.docx"
    path.write_bytes(_docx_bytes())

    assert "X-Burger" in read_document(path)


def test_read_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InputValidationError):
        read_document(tmp_path / "nope.pdf")
