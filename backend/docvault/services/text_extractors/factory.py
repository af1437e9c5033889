"""
Text Extractor Factory.

Registry of extractors keyed by file extension. Formats without an
extractor (images, CAD drawings, spreadsheets) are left to remote OCR.
"""
from pathlib import PurePath
from typing import Dict, Optional

from .base import BaseTextExtractor
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .text_extractor import TextExtractor
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class TextExtractorFactory:
    """Centralized registry of extractors."""

    _extractors: Dict[str, BaseTextExtractor] = {}
    _initialized = False

    @classmethod
    def _initialize(cls):
        if cls._initialized:
            return
        cls._initialized = True
        cls.register(PDFExtractor())
        cls.register(DOCXExtractor())
        cls.register(TextExtractor(".txt", "TXT"))
        logger.debug(f"TextExtractorFactory initialized with {len(cls._extractors)} extractors")

    @classmethod
    def register(cls, extractor: BaseTextExtractor):
        cls._initialize()
        if extractor.file_extension in cls._extractors:
            logger.warning(f"Overriding existing extractor for {extractor.file_extension}")
        cls._extractors[extractor.file_extension] = extractor

    @classmethod
    def get_extractor(cls, filename: str) -> Optional[BaseTextExtractor]:
        """
        Get extractor for a file based on its extension.

        Returns:
            Text extractor instance or None if the format has no local extractor
        """
        cls._initialize()
        return cls._extractors.get(PurePath(filename).suffix.lower())
