"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter, Request

from menucheck import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "menucheck",
        "llm_configured": getattr(request.app.state, "gemini", None) is not None,
    }


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "MenuCheck API",
        "version": __version__,
        "description": "AI review of restaurant menus against reference price sheets",
        "docs": "/docs",
    }
