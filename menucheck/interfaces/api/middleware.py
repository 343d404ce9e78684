"""
API Middleware - Request/response processing.

Provides:
- Request ID tracking
- Response latency measurement
- Error handling with taxonomy codes
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from menucheck.config.errors import ErrorCode, MalformedResponseError, MenuCheckError
from menucheck.domains.review import friendly_message

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach request ID for tracing across logs and responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        # Store in request state for access in handlers
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """Track and log request latency."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        request_id = getattr(request.state, "request_id", "unknown")
        logger.info(
            "%s %s status=%d latency_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )

        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert MenuCheckError exceptions to structured JSON responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except MenuCheckError as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.error(
                "MenuCheckError: %s request_id=%s details=%s",
                e.message,
                request_id,
                e.details,
            )
            if isinstance(e, MalformedResponseError):
                logger.error("Raw model output request_id=%s: %s", request_id, e.raw_text)
            return error_response(e, request_id)
        except Exception as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception("Unhandled error: %s request_id=%s", str(e), request_id)
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "code": ErrorCode.INTERNAL_ERROR.value,
                        "message": "Erro interno no servidor ao processar a solicitação.",
                    },
                    "request_id": request_id,
                },
            )


def error_response(error: MenuCheckError, request_id: str) -> JSONResponse:
    """Render an error for the client: code and friendly message only."""
    return JSONResponse(
        status_code=error_code_to_status(error.code),
        content={
            "error": {
                "code": error.code.value,
                "message": friendly_message(error),
            },
            "request_id": request_id,
        },
    )


def error_code_to_status(code: ErrorCode) -> int:
    """Map error codes to HTTP status codes."""
    mapping = {
        # 400 Bad Request
        ErrorCode.VALIDATION_ERROR: 400,
        # 422 Unprocessable
        ErrorCode.EXTRACTION_FAILED: 422,
        ErrorCode.EXTRACTION_EMPTY_TEXT: 422,
        ErrorCode.LLM_CONTENT_BLOCKED: 422,
        # 502 Bad Gateway
        ErrorCode.LLM_MALFORMED_RESPONSE: 502,
        ErrorCode.LLM_SHAPE_MISMATCH: 502,
        ErrorCode.LLM_REQUEST_FAILED: 502,
        # 503 Service Unavailable
        ErrorCode.LLM_NETWORK_FAILURE: 503,
        ErrorCode.LLM_SERVICE_OVERLOADED: 503,
    }
    return mapping.get(code, 500)
