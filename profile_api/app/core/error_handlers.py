"""
Exception handlers for the FastAPI application.

Client errors are answered with the message they carry.  Database
faults are logged server-side with their traceback and answered with a
fixed message so no internal detail reaches the client.
"""

import logging
import sqlite3

import requests
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import NotFoundError, RequestValidationFailed

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"


def _field_name(loc) -> str:
    # ("body", "skills") -> "skills"; a malformed body reports just ("body",)
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationFailed)
    async def validation_failed_handler(request: Request, exc: RequestValidationFailed):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"errors": [e.to_dict() for e in exc.errors]},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
            for err in exc.errors()
        ]
        logger.info("Malformed request %s %s: %s", request.method, request.url.path, errors)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=exc.status_code, content={"msg": exc.msg})

    @app.exception_handler(sqlite3.Error)
    async def storage_error_handler(request: Request, exc: sqlite3.Error):
        logger.error(
            "Database error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"msg": SERVER_ERROR_MESSAGE},
        )

    @app.exception_handler(requests.RequestException)
    async def upstream_error_handler(request: Request, exc: requests.RequestException):
        logger.error("Upstream request failed on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"msg": SERVER_ERROR_MESSAGE},
        )
