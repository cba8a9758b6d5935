"""Custom exceptions and centralized FastAPI error handlers."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PropheticError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ClientInputError(PropheticError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class ConfigurationError(PropheticError):
    """Required deployment configuration is absent."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class UpstreamError(PropheticError):
    """Prophetic backend answered with a non-success status; forwarded as-is.

    *body*, when given, replaces the default ``{"error": message}`` response.
    """

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message, status_code=status_code)
        self.body = body


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(PropheticError)
    async def handle_prophetic_error(_request: Request, exc: PropheticError):
        body = getattr(exc, "body", None)
        if body is None:
            body = {"error": str(exc)}
        return JSONResponse(body, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
