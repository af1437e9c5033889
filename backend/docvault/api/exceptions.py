"""
Custom exceptions for the service and API layers.
Separates business exceptions from HTTP exceptions: services raise these,
the gateway turns them into JSON error envelopes.
"""
from typing import Any, Dict, List, Optional

from fastapi import status


class DocVaultError(Exception):
    """Base class for every business error the API knows how to render."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "internal_error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DocVaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_error"


class FileTooLargeError(ValidationError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    error_code = "file_too_large"


class UnsupportedFileTypeError(ValidationError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    error_code = "unsupported_file_type"


class AuthenticationError(DocVaultError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "authentication_failed"


class AccessDeniedError(DocVaultError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "access_denied"


class DocumentNotFoundError(DocVaultError):
    """Raised when a document (or its backing file) is not found."""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"


class ConflictError(DocVaultError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "conflict"


class UploadFailedError(DocVaultError):
    """Raised when no file of an upload batch could be stored."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "upload_failed"

    def __init__(self, message: str, errors: List[Dict[str, str]]):
        super().__init__(message, details=errors)
        self.errors = errors


class StorageError(DocVaultError):
    """Raised when the file system refuses a read, write or delete."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "storage_error"


class StoreUnavailableError(DocVaultError):
    """Raised when the record store cannot be reached."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "store_unavailable"


class ProviderError(Exception):
    """Raised by AI providers on transport failures; absorbed by the enrichment fallback."""


class ProviderResponseError(ProviderError):
    """The ML service answered, but reported success=false or an unusable body."""

