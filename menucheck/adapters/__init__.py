"""
Adapters - External service integrations.

All external API calls and file-format libraries are wrapped here to isolate
domains from third-party changes.
"""

from .documents import DocumentKind, detect_kind, extract_text, read_document
from .gemini import GeminiClient, GeminiConfig, GeminiRequest, GeminiResponse

__all__ = [
    # Model endpoint
    "GeminiClient",
    "GeminiConfig",
    "GeminiRequest",
    "GeminiResponse",
    # Text extraction
    "DocumentKind",
    "detect_kind",
    "extract_text",
    "read_document",
]
