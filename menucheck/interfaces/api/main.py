"""
FastAPI Main Application - Unified API entry point.

Run with: uvicorn menucheck.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from menucheck import __version__
from menucheck.config import configure_logging, get_settings

from .deps import cleanup_services, init_services
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RequestIDMiddleware,
)
from .routes import health, review

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting MenuCheck API...")
    logger.info("  Model: %s", settings.gemini_model)

    await init_services(app)
    logger.info("  Services initialized")

    yield

    logger.info("Shutting down MenuCheck API...")
    await cleanup_services(app)


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="MenuCheck API",
        description="AI review of restaurant menus against reference price sheets",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters - first added = innermost)
    # 1. Error handling (catch exceptions from routes)
    app.add_middleware(ErrorHandlerMiddleware)

    # 2. Latency tracking
    app.add_middleware(LatencyMiddleware)

    # 3. Request ID (outermost custom - runs first)
    app.add_middleware(RequestIDMiddleware)

    # 4. CORS (framework middleware)
    allowed_origins = [
        "http://localhost:3000",  # Vite dev server
        "http://localhost:8000",  # FastAPI (same-origin)
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_origin_regex=r"http://localhost:\d+" if settings.api_debug else None,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(review.router, prefix="/api/review", tags=["Review"])

    return app


# Create app instance
app = create_app()
