"""
Abstract base class for file storage adapters.
All storage implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile


@dataclass
class StoredFile:
    """Result of persisting one upload."""
    path: str
    filename: str
    size: int
    sha256: str


class FileStorageInterface(ABC):
    """
    Abstract interface for file storage operations.
    Business logic only talks to this interface, never to the file system.
    """

    @abstractmethod
    def build_destination(self, department: str, original_filename: str) -> Path:
        """
        Produce a unique destination for a new upload.

        Args:
            department: Department code; selects the subdirectory
            original_filename: Client supplied filename

        Returns:
            Path whose parent directory already exists
        """
        pass

    @abstractmethod
    async def save_upload(self, file: UploadFile, department: str, max_bytes: int) -> StoredFile:
        """
        Stream an upload into storage.

        Returns:
            StoredFile describing the written file

        Raises:
            FileTooLargeError: If the upload exceeds max_bytes
            StorageError: If the write fails (partial files are removed)
        """
        pass

    @abstractmethod
    async def delete_file(self, file_path: str) -> bool:
        """
        Delete a stored file.

        Returns:
            True if the file was deleted, False if it was already missing
        """
        pass

    @abstractmethod
    async def file_exists(self, file_path: str) -> bool:
        pass

    @abstractmethod
    async def read_bytes(self, file_path: str) -> bytes:
        pass

    @abstractmethod
    async def initialize(self):
        """Create the directory layout and verify the root is writable."""
        pass

    async def close(self):
        pass
