"""
Error envelope and exception handlers.

Every error response has the same shape:
{success: false, message, error, status_code, path, request_id, timestamp}
"""
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..api.exceptions import DocVaultError, UploadFailedError
from ..core.logging_config import get_logger
from ..domain.entities import utc_now

logger = get_logger(__name__)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error: str,
    headers: Optional[dict] = None,
    **extra: Any,
) -> JSONResponse:
    content = {
        "success": False,
        "message": message,
        "error": error,
        "status_code": status_code,
        "path": request.url.path,
        "request_id": getattr(request.state, "request_id", None),
        "timestamp": utc_now().isoformat(),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content), headers=headers)


async def docvault_error_handler(request: Request, exc: DocVaultError) -> JSONResponse:
    extra = {}
    if isinstance(exc, UploadFailedError):
        extra["errors"] = exc.errors

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"Business exception for {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(request, exc.status_code, exc.message, exc.error_code, headers=headers, **extra)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.debug(f"HTTP exception for {request.method} {request.url.path}: {exc.status_code} - {exc.detail}")
    return error_response(
        request, exc.status_code, str(exc.detail), "http_error", headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")
    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request validation failed",
        "validation_error",
        detail=exc.errors(),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.method} {request.url.path}: {exc.detail}")
    return error_response(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        f"Rate limit exceeded: {exc.detail}",
        "rate_limited",
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(DocVaultError, docvault_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
