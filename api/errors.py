"""
Exception handlers mapping the error taxonomy to ``{status, message}`` bodies.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import TaskTrackerError, ValidationError

logger = logging.getLogger(__name__)


def error_body(status_code: int, message: str) -> dict:
    return {"status": "Fail" if status_code < 500 else "Error", "message": message}


def _describe(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{field}: {err.get('msg', 'invalid')}" if field else err.get("msg", "invalid"))
    return "; ".join(problems) or ValidationError.default_message


def register_error_handlers(app: FastAPI) -> None:
    """Attach the taxonomy, validation and catch-all handlers to ``app``."""

    @app.exception_handler(TaskTrackerError)
    async def handle_task_tracker_error(request: Request, exc: TaskTrackerError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=ValidationError.status_code,
            content=error_body(ValidationError.status_code, _describe(exc)),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
        )
