"""
Global exception handler for the Drug Inventory API.
Provides centralized error handling with a uniform error body.
"""
import logging
from typing import Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from src.core.timeutils import iso_timestamp
from src.models.dto.drug_dto import ErrorResponse
from .exceptions import (
    ValidationException,
    DrugStoreException
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"

HTTP_ERROR_NAMES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
}


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[list] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """Build the uniform error body."""
    body = ErrorResponse(
        error=error,
        message=message,
        status_code=status_code,
        timestamp=iso_timestamp(),
        details=details
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""

    @app.exception_handler(ValidationException)
    async def handle_validation_error(request: Request, exc: ValidationException):
        return error_response(400, "Validation Error", exc.message, details=exc.details)

    @app.exception_handler(DrugStoreException)
    async def handle_store_error(request: Request, exc: DrugStoreException):
        logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response(500, "Internal Server Error", GENERIC_ERROR_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        error = HTTP_ERROR_NAMES.get(exc.status_code, "Error")
        # Keeps Allow on 405.
        return error_response(exc.status_code, error, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal Server Error", GENERIC_ERROR_MESSAGE)
