"""
User Messages - Friendlier wording for errors shown to end users.

Presentation only: the error's class and code stay the source of truth for
control flow. Raw model output is never part of a message.
"""

from __future__ import annotations

import re

from menucheck.config import (
    ConfigurationError,
    LLMRequestError,
    MalformedResponseError,
    MenuCheckError,
    TransientServiceError,
)

__all__ = ["friendly_message"]

AUTH_MESSAGE = (
    "A chave da API Gemini é inválida ou não foi configurada corretamente. "
    "Verifique a variável GEMINI_API_KEY."
)
OVERLOADED_MESSAGE = (
    "O serviço de IA está temporariamente sobrecarregado. "
    "Tente novamente em alguns instantes."
)
UNREADABLE_MESSAGE = (
    "A IA retornou uma resposta em formato inesperado. Tente novamente."
)

_AUTH_MARKERS = ("api key not valid", "api_key_invalid", "invalid api key")
_SERVER_ERROR = re.compile(r"\b5\d\d\b|overloaded|unavailable", re.IGNORECASE)


def friendly_message(error: MenuCheckError) -> str:
    """
    Pick the message to show for an error.

    Args:
        error: Any error from the taxonomy

    Returns:
        A single human-readable sentence or two
    """
    text = error.message
    # Provider wording is only sniffed on errors that carry provider text.
    from_provider = isinstance(error, LLMRequestError)

    if isinstance(error, ConfigurationError) or (
        from_provider and any(m in text.lower() for m in _AUTH_MARKERS)
    ):
        return AUTH_MESSAGE
    if isinstance(error, TransientServiceError) or (
        from_provider and _SERVER_ERROR.search(text)
    ):
        return OVERLOADED_MESSAGE
    if isinstance(error, MalformedResponseError):
        return UNREADABLE_MESSAGE
    return text
