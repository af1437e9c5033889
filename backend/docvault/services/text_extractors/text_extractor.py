"""
Plain Text Extractor.
"""
from .base import BaseTextExtractor


class TextExtractor(BaseTextExtractor):
    """Extractor for plain text files."""

    def extract(self, file_bytes: bytes) -> str:
        return file_bytes.decode("utf-8", errors="ignore")
