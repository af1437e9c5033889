"""
Text Extractors Module - local text extraction per file format.

To add support for a new file format:
1. Create a class inheriting from BaseTextExtractor
2. Implement extract()
3. Register it in TextExtractorFactory
"""
from .base import BaseTextExtractor, TextExtractionError
from .factory import TextExtractorFactory
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .text_extractor import TextExtractor

__all__ = [
    "BaseTextExtractor",
    "TextExtractionError",
    "TextExtractorFactory",
    "PDFExtractor",
    "DOCXExtractor",
    "TextExtractor",
]
