"""API middleware and exception handlers."""
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.exceptions import BaseAPIException
from ..core.logging import RequestLogger
from ..schemas.common import ErrorResponse

logger = structlog.get_logger("api.errors")


def error_body(message: str, error_code: str, details: dict = None) -> dict:
    return ErrorResponse(
        error=message,
        error_code=error_code,
        details=details or {},
    ).model_dump(mode="json")


async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Render application errors as a short message plus a stable kind."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_code, exc.details),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body validation failures in the same envelope."""
    fields = [
        ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=error_body(
            "Validation failed",
            "VALIDATION_ERROR",
            {"fields": [f for f in fields if f]},
        ),
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate request ID
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        # Log request
        start_time = time.time()
        RequestLogger.log_request(
            method=request.method,
            path=str(request.url.path),
            request_id=request_id,
            extra_data={
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent")
            }
        )

        # Process request
        response = await call_next(request)

        # Calculate response time
        response_time_ms = (time.time() - start_time) * 1000

        # Principal is attached by the security dependency when an endpoint reads it
        principal = getattr(request.state, "principal", None)

        # Log response
        RequestLogger.log_response(
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            user_id=principal.user_id if principal is not None else None,
            request_id=request_id
        )

        # Add request ID to response headers
        response.headers["X-Request-ID"] = request_id

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn unexpected exceptions into a generic 500 without internals."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except BaseAPIException as e:
            return await api_exception_handler(request, e)

        except Exception:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=str(request.url.path),
            )
            return JSONResponse(
                status_code=500,
                content=error_body("Internal server error", "INTERNAL_ERROR"),
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
