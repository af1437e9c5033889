"""
File storage abstraction.
Business logic depends on FileStorageInterface; LocalFileStorage lays files
out per department under the configured upload root.
"""
from .base import FileStorageInterface, StoredFile
from .local_storage import LocalFileStorage

__all__ = [
    "FileStorageInterface",
    "StoredFile",
    "LocalFileStorage",
]
