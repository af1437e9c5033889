"""
Local filesystem storage adapter implementing FileStorageInterface.

Layout: <root>/documents/<department>/<YYYY-MM-DD>_<8 hex>_<sanitized name>
"""
import asyncio
import hashlib
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from .base import FileStorageInterface, StoredFile
from ...api.exceptions import FileTooLargeError, StorageError
from ...domain.value_objects import Department
from ...utils.validators import sanitize_filename
from ...core.logging_config import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


class LocalFileStorage(FileStorageInterface):
    """
    Local filesystem storage adapter.
    Files are grouped per department under a single configured root.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize local file storage.

        Args:
            base_dir: Storage root (defaults to UPLOAD_DIR from config)
        """
        if base_dir is None:
            from ...core.config import UPLOAD_DIR
            base_dir = UPLOAD_DIR

        self.base_dir = Path(base_dir)
        self.documents_dir = self.base_dir / "documents"

    async def initialize(self):
        """Create documents/ plus one directory per known department."""
        try:
            self.documents_dir.mkdir(parents=True, exist_ok=True)
            for department in Department:
                (self.documents_dir / department.directory_name).mkdir(exist_ok=True)
        except OSError as e:
            raise StorageError(f"Storage root {self.base_dir} is not writable: {e}") from e

        if not os.access(self.documents_dir, os.W_OK):
            raise StorageError(f"Storage root {self.base_dir} is not writable")
        logger.info(f"✅ Local storage ready at {self.documents_dir}")

    def build_destination(self, department: str, original_filename: str) -> Path:
        department_dir = self.documents_dir / department.lower()
        try:
            department_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create department directory {department_dir}: {e}") from e

        date_stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        disambiguator = uuid.uuid4().hex[:8]
        return department_dir / f"{date_stamp}_{disambiguator}_{sanitize_filename(original_filename)}"

    async def save_upload(self, file: UploadFile, department: str, max_bytes: int) -> StoredFile:
        destination = self.build_destination(department, file.filename or "upload")

        def _write() -> StoredFile:
            sha256 = hashlib.sha256()
            size = 0
            try:
                # "x" refuses to overwrite an existing file
                with open(destination, "xb") as buffer:
                    for chunk in iter(lambda: file.file.read(CHUNK_SIZE), b""):
                        size += len(chunk)
                        if size > max_bytes:
                            raise FileTooLargeError(
                                f"File {file.filename} exceeds the maximum size of {max_bytes} bytes"
                            )
                        sha256.update(chunk)
                        buffer.write(chunk)
            except FileTooLargeError:
                self._remove_partial(destination)
                raise
            except OSError as e:
                self._remove_partial(destination)
                raise StorageError(f"Failed to write {destination}: {e}") from e
            return StoredFile(
                path=str(destination),
                filename=destination.name,
                size=size,
                sha256=sha256.hexdigest(),
            )

        loop = asyncio.get_event_loop()
        stored = await loop.run_in_executor(None, _write)
        logger.debug(f"Stored {file.filename} → {stored.path} ({stored.size} bytes)")
        return stored

    @staticmethod
    def _remove_partial(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Could not remove partially written file {path}: {e}")

    async def delete_file(self, file_path: str) -> bool:
        path = Path(file_path)

        def _delete() -> bool:
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            except OSError as e:
                raise StorageError(f"Failed to delete {path}: {e}") from e
            return True

        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, _delete)

    async def file_exists(self, file_path: str) -> bool:
        return Path(file_path).is_file()

    async def read_bytes(self, file_path: str) -> bytes:
        path = Path(file_path)

        def _read() -> bytes:
            try:
                return path.read_bytes()
            except OSError as e:
                raise StorageError(f"Failed to read {path}: {e}") from e

        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, _read)
