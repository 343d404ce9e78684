"""
API Dependencies - Dependency injection for FastAPI routes.

The Gemini client is built once in the lifespan handler and kept on
``app.state``; routes reach it through these providers.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from menucheck.adapters.gemini import GeminiClient, GeminiConfig
from menucheck.config import ConfigurationError, get_settings
from menucheck.domains.review import MenuReviewer

logger = logging.getLogger(__name__)


def get_gemini_client(request: Request) -> GeminiClient:
    """Get the process-wide Gemini client."""
    client: GeminiClient | None = getattr(request.app.state, "gemini", None)
    if client is None:
        raise ConfigurationError(
            "Cliente Gemini não inicializado. Verifique GEMINI_API_KEY."
        )
    return client


def get_reviewer(request: Request) -> MenuReviewer:
    """Get a reviewer bound to the shared client."""
    return MenuReviewer(get_gemini_client(request))


async def init_services(app: FastAPI) -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler. A missing API key
    is logged and left for the first request to report.
    """
    settings = get_settings()
    try:
        app.state.gemini = GeminiClient(GeminiConfig.from_settings(settings))
    except ConfigurationError as e:
        logger.error("Gemini client not configured: %s", e.message)
        app.state.gemini = None


async def cleanup_services(app: FastAPI) -> None:
    """Cleanup services on shutdown."""
    client: GeminiClient | None = getattr(app.state, "gemini", None)
    if client is not None:
        await client.aclose()
