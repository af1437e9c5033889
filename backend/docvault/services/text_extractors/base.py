"""
Base Text Extractor Interface.

All text extractors must inherit from this base class and implement
the extract() method.
"""
from abc import ABC, abstractmethod


class TextExtractionError(Exception):
    """Raised when a file cannot be turned into text."""


class BaseTextExtractor(ABC):
    """
    Abstract base class for text extractors.

    Each file format has its own extractor registered by extension.
    """

    def __init__(self, file_extension: str, format_name: str):
        """
        Initialize the extractor.

        Args:
            file_extension: File extension (e.g., '.pdf', '.docx')
            format_name: Human-readable format name (e.g., 'PDF', 'DOCX')
        """
        self.file_extension = file_extension.lower()
        self.format_name = format_name

    @abstractmethod
    def extract(self, file_bytes: bytes) -> str:
        """
        Extract text from file bytes.

        Args:
            file_bytes: Raw file content as bytes

        Returns:
            Extracted text content (may be empty for scanned documents)

        Raises:
            TextExtractionError: If the file is corrupt or unreadable
        """
        pass
