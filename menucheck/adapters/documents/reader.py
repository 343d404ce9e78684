"""
Document Reader - Plain-text extraction from menu PDFs and reference DOCX files.
"""

from __future__ import annotations

import io
import logging
import zipfile
from enum import Enum
from pathlib import Path

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from menucheck.config import ErrorCode, ExtractionError, InputValidationError

logger = logging.getLogger(__name__)

__all__ = ["DocumentKind", "detect_kind", "extract_text", "read_document"]

PDF_CONTENT_TYPES = {"application/pdf"}
DOCX_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class DocumentKind(str, Enum):
    """Supported upload formats."""

    PDF = "pdf"
    DOCX = "docx"


def detect_kind(filename: str | None, content_type: str | None = None) -> DocumentKind:
    """
    Decide the document format from its name or MIME type.

    Raises:
        InputValidationError: Neither hint names a supported format.
    """
    if content_type in PDF_CONTENT_TYPES:
        return DocumentKind.PDF
    if content_type in DOCX_CONTENT_TYPES:
        return DocumentKind.DOCX

    suffix = Path(filename or "").suffix.lower()
    if suffix == ".pdf":
        return DocumentKind.PDF
    if suffix == ".docx":
        return DocumentKind.DOCX

    raise InputValidationError(
        "Formato de arquivo não suportado. Envie um PDF ou um documento Word (.docx).",
        {"filename": filename, "content_type": content_type},
    )


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    pages = []
    for number, page in enumerate(reader.pages, start=1):
        text = page.extract_text() or ""
        logger.debug("PDF page %d: %d chars", number, len(text))
        pages.append(text)
    return "\n".join(pages)


def _docx_text(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    lines = [paragraph.text for paragraph in document.paragraphs]

    # price sheets are usually tables
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))

    return "\n".join(lines)


def extract_text(data: bytes, kind: DocumentKind) -> str:
    """
    Extract plain text from a document.

    Args:
        data: Raw file bytes
        kind: Document format

    Returns:
        The document text

    Raises:
        ExtractionError: File unreadable, or it has no extractable text.
    """
    if not data:
        raise ExtractionError("O arquivo enviado está vazio.", {"kind": kind.value})

    try:
        text = _pdf_text(data) if kind is DocumentKind.PDF else _docx_text(data)
    except (
        PyPdfError,
        PackageNotFoundError,
        zipfile.BadZipFile,
        ValueError,
        KeyError,
        OSError,
    ) as e:
        logger.warning("Failed to read %s document: %s", kind.value, e)
        raise ExtractionError(
            "Falha ao ler o arquivo. Verifique se ele não está corrompido.",
            {"kind": kind.value, "cause": type(e).__name__},
        ) from e

    if not text.strip():
        raise ExtractionError(
            "Não foi possível extrair texto do arquivo. "
            "Ele pode estar vazio ou ser uma imagem.",
            {"kind": kind.value},
            code=ErrorCode.EXTRACTION_EMPTY_TEXT,
        )

    logger.info("Extracted %d chars from %s document", len(text), kind.value)
    return text


def read_document(path: str | Path) -> str:
    """Read a file from disk and extract its text."""
    path = Path(path)
    if not path.exists():
        raise InputValidationError(f"Arquivo não encontrado: {path}")
    return extract_text(path.read_bytes(), detect_kind(path.name))
