"""Maps service errors and framework errors to JSON responses.

Every error body has the shape {"success": false, "message": ...}.
Register with register_exception_handlers(app).
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carmarket.configs import configs
from carmarket.exceptions import CarMarketError

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error. Please try again later."


def _error_body(message, **extra) -> dict:
    body = {"success": False, "message": message}
    body.update(extra)
    return body


def _carmarket_error_handler(request: Request, exc: CarMarketError) -> JSONResponse:
    if exc.status_code < 500:
        logger.warning(
            f"{request.method} {request.url.path} rejected "
            f"({exc.status_code}): {exc.message}"
        )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and query strings surface as 400, like validator errors."""
    errors = exc.errors()
    message = "Invalid request."
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid value for '{location}': {first.get('msg')}"
    logger.warning(f"{request.method} {request.url.path} rejected (400): {message}")
    return JSONResponse(
        status_code=400,
        content=_error_body(
            message,
            errors=[
                {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
                for err in errors
            ],
        ),
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    extra = {}
    if configs.get("app", {}).get("debug_mode"):
        extra["error"] = str(exc)
    return JSONResponse(status_code=500, content=_error_body(SERVER_ERROR_MESSAGE, **extra))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CarMarketError, _carmarket_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
