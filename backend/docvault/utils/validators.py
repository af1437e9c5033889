"""
Validation utilities - Pure validation functions for uploads.
"""
import re
from pathlib import PurePath
from typing import List, Optional

from ..core.config import SUPPORTED_FORMATS

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".dwg": "application/acad",
    ".dxf": "application/dxf",
    ".txt": "text/plain",
}

FILE_TYPES = {
    ".pdf": "document",
    ".doc": "document",
    ".docx": "document",
    ".txt": "document",
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".bmp": "image",
    ".tiff": "image",
    ".xlsx": "spreadsheet",
    ".dwg": "cad",
    ".dxf": "cad",
}


def get_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def extract_filename(filename: str) -> str:
    """Strip any client-supplied directory components (both separators)."""
    return (filename or "").replace("\\", "/").split("/")[-1].strip()


def sanitize_filename(filename: str) -> str:
    """
    Replace every character outside [A-Za-z0-9.-] with an underscore.

    Path separators are replaced too, so the result can never escape the
    directory it is joined onto.
    """
    safe = _UNSAFE_FILENAME_CHARS.sub("_", extract_filename(filename))
    # A name made only of dots would resolve to the directory itself
    if not safe.strip("."):
        safe = safe.replace(".", "_") or "file"
    return safe


def is_supported_format(filename: str, supported: Optional[List[str]] = None) -> bool:
    return get_extension(filename) in (supported if supported is not None else SUPPORTED_FORMATS)


def get_mime_type(filename: str) -> str:
    return MIME_TYPES.get(get_extension(filename), "application/octet-stream")


def get_file_type(filename: str) -> str:
    return FILE_TYPES.get(get_extension(filename), "unknown")

