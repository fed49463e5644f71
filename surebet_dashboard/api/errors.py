from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

"""HTTP error taxonomy and the handlers that render it as JSON.

- ValidationError -> 400 {error}
- NotFoundError   -> 404 {error}
- InternalError   -> 500 {error, detail}

Route handlers wrap every failure that is not already an ApiError in an
InternalError with a message describing the failed operation, so 500 bodies
still pass through the CORS middleware.
"""

__all__ = [
    "ApiError",
    "ValidationError",
    "NotFoundError",
    "InternalError",
    "register_error_handlers",
]

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class InternalError(ApiError):
    status_code = 500


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Requisição inválida", "detail": str(exc.errors())})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Erro interno", "detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
