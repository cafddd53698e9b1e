"""
Exception handlers mapping domain errors to ErrorResponse payloads.

Dependencies: fastapi, docsearch.core.exceptions, docsearch.observability
System role: Structured HTTP error responses
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docsearch.core.exceptions import (
    DocSearchException,
    RetrievalError,
    ValidationError,
    VectorStoreError,
)
from docsearch.models.common import ErrorResponse
from docsearch.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, details: dict | None = None) -> JSONResponse:
    payload = ErrorResponse(error=error, details=details or None)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        422,
        "Invalid request",
        {"errors": jsonable_encoder(exc.errors())},
    )


async def upstream_error_handler(request: Request, exc: DocSearchException) -> JSONResponse:
    log_with_context(
        logger,
        logging.ERROR,
        f"{__name__}:upstream_error_handler - {type(exc).__name__}",
        path=request.url.path,
        error=exc.message,
        details=exc.details,
    )
    return _error_response(status.HTTP_502_BAD_GATEWAY, exc.message, exc.details)


async def domain_error_handler(request: Request, exc: DocSearchException) -> JSONResponse:
    log_with_context(
        logger,
        logging.ERROR,
        f"{__name__}:domain_error_handler - {type(exc).__name__}",
        path=request.url.path,
        error=exc.message,
        details=exc.details,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, exc.details)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach domain exception handlers to the application."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RetrievalError, upstream_error_handler)
    app.add_exception_handler(VectorStoreError, upstream_error_handler)
    app.add_exception_handler(DocSearchException, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
