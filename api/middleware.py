"""
Consolidated middleware and error handlers for the FoodOps API
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import AppError

logger = logging.getLogger("foodops.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    return obj


def error_body(error: dict) -> dict:
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        logger.info(
            f"Request started {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                f"Request completed {request.method} {request.url.path} "
                f"{response.status_code} in {process_time:.4f}s",
                extra={"request_id": request_id},
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed {request.method} {request.url.path} "
                f"after {process_time:.4f}s: {exc}",
                extra={"request_id": request_id},
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def app_error_handler(request: Request, exc: AppError):
    """Handle domain errors raised by services and dependencies"""
    if exc.http_status >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(make_serializable(exc.to_dict())),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(
            {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": make_serializable(exc.errors()),
            }
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body({"code": f"HTTP_{exc.status_code}", "message": exc.detail}),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url.path}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            }
        ),
    )
