"""
Exception handlers rendering every failure in the response envelope
``{"success": false, "error": {"message", "code"}}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fleetflow.config import settings
from fleetflow.domain.errors import FleetFlowError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, message: str, code: str, details: list | None = None
) -> JSONResponse:
    error = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": error}
    )


async def fleetflow_error_handler(request: Request, exc: FleetFlowError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message, exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return error_response(
        422,
        "Validation failed. Please fix the errors below.",
        "VALIDATION_ERROR",
        details,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
    return error_response(exc.status_code, str(exc.detail), code)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = "Internal Server Error" if settings.is_production else str(exc)
    return error_response(500, message or "Internal Server Error", "SERVER_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FleetFlowError, fleetflow_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
