"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses. Clients only ever see {"message": ...};
error codes, details and causes go to the log.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.exceptions import GatewayException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; anything unlisted is an upstream failure
_ERROR_CODE_STATUS: dict[str, int] = {
    "UNAUTHORIZED": 401,
    "INVALID_CREDENTIALS": 401,
    "FORBIDDEN": 403,
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
}


def _gateway_exception_handler(request: Request, exc: GatewayException) -> JSONResponse:
    """Return {"message"} with the status for exc.error_code (500 when unmapped)."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 500)
    if status >= 500:
        logger.error(
            "%s %s failed: %s %s",
            request.method,
            request.url.path,
            exc.error_code,
            exc.details,
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.info(
            "%s %s -> %d %s %s",
            request.method,
            request.url.path,
            status,
            exc.error_code,
            exc.details,
        )
    return JSONResponse(status_code=status, content={"message": exc.message})


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400; the first error names the offending field."""
    errors = exc.errors()
    logger.info("Request validation failed on %s: %s", request.url.path, errors)
    message = "Request validation failed"
    if errors:
        loc = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
        message = f"Invalid request: {loc} {errors[0].get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"message": message})


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 without leaking the cause."""
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: GatewayException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(GatewayException, _gateway_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
