"""Exception handlers mapping errors onto JSON bodies."""

from __future__ import annotations

from typing import Any, Dict, List

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from email_builder.core.config import Settings
from email_builder.core.exceptions import AppError, DocumentValidationError, ValidationError

logger = structlog.get_logger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def validation_details(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten FastAPI validation errors into ``{path, message, code}`` entries."""
    details = []
    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]
        message = str(err.get("msg", ""))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        details.append(
            {
                "path": ".".join(str(part) for part in loc),
                "message": message,
                "code": err.get("type", "invalid"),
            }
        )
    return details


def _validation_response(details: List[Dict[str, Any]]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "code": "VALIDATION_ERROR", "details": details},
    )


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _validation_response(validation_details(exc.errors()))

    @app.exception_handler(DocumentValidationError)
    async def handle_document_validation(request: Request, exc: DocumentValidationError):
        return _validation_response(exc.errors)

    @app.exception_handler(ValidationError)
    async def handle_app_validation(request: Request, exc: ValidationError):
        return _validation_response(exc.errors)

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        logger.info("Request failed", path=request.url.path, code=exc.code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "code": exc.code})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={"error": "Not Found", "code": "NOT_FOUND", "path": request.url.path},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": "HTTP_ERROR"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
        content = {"error": "Internal Server Error", "code": "INTERNAL_ERROR"}
        if settings.is_development:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)
