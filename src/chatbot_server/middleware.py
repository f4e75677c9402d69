"""Middleware for request logging and error handling.

Provides reusable middleware components for consistent logging and JSON
error responses across every API route.
"""

import logging
import time
import traceback
import uuid

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from chatbot.exceptions import (
    ChatbotError,
    CompletionError,
    InvalidArgumentError,
    InvalidSessionError,
    MissingAPIConfigError,
    SessionNotFoundError,
)

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and tag the response with its request id.

    A client-supplied X-Request-ID is kept so browser and server logs can be
    correlated. Errors never reach this layer: the error middleware inside it
    has already turned them into responses.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or f"req-{uuid.uuid4().hex[:12]}"
        started = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "request_id": request_id,
                "client": request.client.host if request.client else None,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for catching exceptions and returning JSON error responses.

    Converts chatbot exceptions into ``{"error": ...}`` bodies with the
    status codes the browser client expects. Upstream and configuration
    failures are logged in full but reported with a generic message.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)

        except ChatbotError as e:
            return self._format_chatbot_error(request, e)

        except Exception as e:
            return self._format_unexpected_error(request, e)

    def _format_chatbot_error(self, request: Request, error: ChatbotError) -> JSONResponse:
        status_code, public_message = error_response(error)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Request error",
            extra={
                "error_type": type(error).__name__,
                "error_message": str(error),
                "status_code": status_code,
                "path": request.url.path,
            },
        )

        return JSONResponse(status_code=status_code, content={"error": public_message})

    def _format_unexpected_error(self, request: Request, error: Exception) -> JSONResponse:
        logger.exception(
            "Unexpected error",
            extra={
                "error_type": type(error).__name__,
                "error_message": str(error),
                "path": request.url.path,
                "traceback": traceback.format_exc(),
            },
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An unexpected error occurred"},
        )


def error_response(error: ChatbotError) -> tuple[int, str]:
    """Map a chatbot error to an HTTP status code and client-facing message."""
    if isinstance(error, SessionNotFoundError):
        return status.HTTP_404_NOT_FOUND, "Session not found"
    if isinstance(error, (InvalidArgumentError, InvalidSessionError)):
        return status.HTTP_400_BAD_REQUEST, error.message
    if isinstance(error, MissingAPIConfigError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "Server configuration error"
    if isinstance(error, CompletionError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get AI response"
    return status.HTTP_500_INTERNAL_SERVER_ERROR, error.message


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request body and query validation failures as 400."""
    logger.warning(
        "Validation error",
        extra={"path": request.url.path, "errors": exc.errors()},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware stack and validation error handler.

    Middleware added last runs first, so request logging wraps error
    handling and sees the final status code.
    """
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
