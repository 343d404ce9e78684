"""
Configuration - Application settings, error taxonomy, and logging setup.
"""

from .errors import (
    ConfigurationError,
    ContentPolicyError,
    ErrorCode,
    ExtractionError,
    InputValidationError,
    LLMRequestError,
    MalformedResponseError,
    MenuCheckError,
    NetworkError,
    ShapeMismatchError,
    TransientServiceError,
)
from .log_setup import configure_logging
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "ErrorCode",
    "MenuCheckError",
    "ConfigurationError",
    "InputValidationError",
    "ExtractionError",
    "NetworkError",
    "TransientServiceError",
    "ContentPolicyError",
    "LLMRequestError",
    "MalformedResponseError",
    "ShapeMismatchError",
]
