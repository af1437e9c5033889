"""
Error Handling Middleware

Last line of defence: anything the exception handlers did not render
becomes a 500 envelope. Details and stack only outside production.
"""
import traceback

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..errors import docvault_error_handler, error_response
from ...api.exceptions import DocVaultError
from ...core.config import IS_PRODUCTION
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that converts unexpected exceptions to JSON error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except DocVaultError as e:
            return await docvault_error_handler(request, e)
        except Exception as e:
            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)
            if IS_PRODUCTION:
                return error_response(
                    request,
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "Internal server error",
                    "internal_error",
                )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                str(e) or type(e).__name__,
                "internal_error",
                stack=traceback.format_exc(),
            )
