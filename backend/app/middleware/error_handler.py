from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.services.auth import UnauthorizedError
from app.services.validation import FeedbackValidationError
from app.storage.document_store import StorageError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"
NOT_FOUND = "Endpoint not found"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _describe_request_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid field '{location}': {message}" if location else f"Invalid request body: {message}"


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    @app.exception_handler(FeedbackValidationError)
    async def feedback_validation_handler(request: Request, exc: FeedbackValidationError):
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, _describe_request_error(exc))

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return _error(401, "Unauthorized")

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return _error(500, INTERNAL_ERROR)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Wrong method on a known path is reported like an unknown path
        if exc.status_code in (404, 405):
            return _error(404, NOT_FOUND)
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        # Don't expose internals in production
        return _error(500, str(exc) if debug else INTERNAL_ERROR)
