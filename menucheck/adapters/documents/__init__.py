"""
Documents Adapter - Text extraction from uploaded files.

PDF menus are read with pypdf, Word reference sheets with python-docx.
"""

from .reader import DocumentKind, detect_kind, extract_text, read_document

__all__ = ["DocumentKind", "detect_kind", "extract_text", "read_document"]
