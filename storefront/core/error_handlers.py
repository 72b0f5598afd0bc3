# storefront/core/error_handlers.py

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
import uuid

from .exceptions import StorefrontError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _field_name(loc) -> str:
    # Drop the leading "body"/"query"/"path" segment FastAPI adds
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


def setup_error_handlers(app: FastAPI):
    """Set up global error handlers for the FastAPI application."""

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        """Handle domain errors raised by the services."""
        logger.warning(
            f"{exc.code.value} on {request.method} {request.url.path}: {exc.user_message}",
            extra={
                "error_code": exc.code.value,
                "context": exc.context,
                "request_url": str(request.url),
                "request_method": request.method,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Translate request schema failures into the 400 validation envelope."""
        fields = []
        for error in exc.errors():
            name = _field_name(error["loc"])
            if name not in fields:
                fields.append(name)

        logger.warning(
            "Request validation failed",
            extra={
                "validation_errors": fields,
                "request_url": str(request.url),
                "request_method": request.method,
            },
        )

        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": f"Invalid request: {', '.join(fields)}" if fields else "Invalid request",
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle standard HTTP exceptions with the same envelope."""
        logger.warning(f"HTTP Exception: {exc.status_code} {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions; details stay in the log."""
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            extra={
                "exception_type": type(exc).__name__,
                "request_url": str(request.url),
                "request_method": request.method,
                "traceback": traceback.format_exc(),
            },
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": INTERNAL_ERROR_MESSAGE},
        )


# Middleware for request ID tracking
async def add_request_id_middleware(request: Request, call_next):
    """Add request ID for better error tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response
