"""
Gemini Adapter - Google Gemini generateContent client.

This is the ONLY place that calls the Gemini API.
The review domain uses this adapter for every model call.
"""

from .client import GeminiClient
from .models import (
    RETRYABLE_STATUS_CODES,
    GeminiConfig,
    GeminiRequest,
    GeminiResponse,
)

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiRequest",
    "GeminiResponse",
    "RETRYABLE_STATUS_CODES",
]
