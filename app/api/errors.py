"""
app/api/errors.py

API error type and its FastAPI exception handler.

Error bodies are ``{"message": ...}`` for client errors and
``{"message": ..., "error": ...}`` for server faults, where ``error`` is
a plain message string.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CatalogAPIError(Exception):
    """
    Raised by routers to end a request with a ``{message[, error]}`` body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error

    def to_dict(self) -> dict[str, str]:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


def register_error_handlers(app: FastAPI) -> None:
    """
    Attach the CatalogAPIError handler to ``app``.
    """

    @app.exception_handler(CatalogAPIError)
    async def catalog_api_error_handler(request: Request, exc: CatalogAPIError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed path=%s status=%s message=%s error=%s",
                request.url.path,
                exc.status_code,
                exc.message,
                exc.error,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
