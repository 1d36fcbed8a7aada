import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from cafe_api.core.errors import CafeError
from cafe_api.schemas.response import ErrorDetail, ErrorResponse

log = logging.getLogger("uvicorn")


def _error(status_code: int, code: str, message, details=None, headers=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details)).body()
    return JSONResponse(status_code=status_code, content=body, headers=headers)


# ----------- Exception Handlers (called by FastAPI) -----------

def cafe_error_handler(request: Request, exc: CafeError):
    """Handles domain errors raised by the service layer."""
    if exc.status_code >= 500:
        log.error(f"{exc.code} on {request.url.path}: {exc.message} {exc.details or ''}")
    return _error(exc.status_code, exc.code, exc.message, exc.details)


def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (e.g., 404, 400)."""
    return _error(exc.status_code, "http_error", exc.detail, headers=getattr(exc, "headers", None))


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles Pydantic validation errors (422 Unprocessable Entity)."""
    return _error(422, "validation_error", "Invalid input data", jsonable_encoder(exc.errors()))


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    log.exception(f"Unhandled exception on path: {request.url.path}", exc_info=exc)
    return _error(500, "server_error", "Internal Server Error")


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(CafeError, cafe_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app
