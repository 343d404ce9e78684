"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from menucheck.config.errors import ErrorCode, MenuCheckError

    raise MenuCheckError(ErrorCode.VALIDATION_ERROR, "Menu text is empty")

The exception class (and its ``code``) is what calling code dispatches on.
Human-friendly wording for end users lives in
``menucheck.domains.review.messages`` and never changes the kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Configuration errors
    CONFIG_MISSING_CREDENTIAL = "CONFIG_MISSING_CREDENTIAL"

    # Extraction errors
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    EXTRACTION_EMPTY_TEXT = "EXTRACTION_EMPTY_TEXT"

    # LLM/Model errors
    LLM_NETWORK_FAILURE = "LLM_NETWORK_FAILURE"
    LLM_SERVICE_OVERLOADED = "LLM_SERVICE_OVERLOADED"
    LLM_CONTENT_BLOCKED = "LLM_CONTENT_BLOCKED"
    LLM_MALFORMED_RESPONSE = "LLM_MALFORMED_RESPONSE"
    LLM_SHAPE_MISMATCH = "LLM_SHAPE_MISMATCH"
    LLM_REQUEST_FAILED = "LLM_REQUEST_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class MenuCheckError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(MenuCheckError):
    """Missing or invalid process configuration (e.g. no API key)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CONFIG_MISSING_CREDENTIAL, message, details)


class InputValidationError(MenuCheckError):
    """Local precondition failure, raised before any network call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class ExtractionError(MenuCheckError):
    """Text could not be extracted from an uploaded document."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.EXTRACTION_FAILED,
    ) -> None:
        super().__init__(code, message, details)


class NetworkError(MenuCheckError):
    """Transport failure after the retry budget was exhausted."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.LLM_NETWORK_FAILURE, message, details)


class TransientServiceError(MenuCheckError):
    """Endpoint still rate-limited or unavailable (429/500/503) after retries."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.LLM_SERVICE_OVERLOADED, message, details)


class ContentPolicyError(MenuCheckError):
    """Request or response blocked by the provider's safety filter."""

    def __init__(
        self,
        reason: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.reason = reason
        super().__init__(
            ErrorCode.LLM_CONTENT_BLOCKED,
            message or f"A solicitação foi bloqueada por motivos de segurança: {reason}",
            {"block_reason": reason, **(details or {})},
        )


class LLMRequestError(MenuCheckError):
    """Non-retryable, non-success HTTP status from the model endpoint."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.LLM_REQUEST_FAILED, message, details)


class MalformedResponseError(MenuCheckError):
    """Model output could not be parsed as structured data.

    ``raw_text`` keeps the model output for diagnostics. It is deliberately
    kept out of ``details`` so it never reaches an API response.
    """

    default_code = ErrorCode.LLM_MALFORMED_RESPONSE

    def __init__(
        self,
        message: str,
        raw_text: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.raw_text = raw_text
        super().__init__(self.default_code, message, details)


class ShapeMismatchError(MalformedResponseError):
    """Parsed data does not match the expected record shape."""

    default_code = ErrorCode.LLM_SHAPE_MISMATCH
