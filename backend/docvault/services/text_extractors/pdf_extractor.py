"""
PDF Text Extractor.

Extracts text from PDF files using pypdf library.
"""
import io

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .base import BaseTextExtractor, TextExtractionError
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class PDFExtractor(BaseTextExtractor):
    """Extractor for PDF files."""

    def __init__(self):
        super().__init__(".pdf", "PDF")

    def extract(self, file_bytes: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            pages = []
            for page in reader.pages:
                page_text = page.extract_text()
                if page_text:
                    pages.append(page_text)
            return "\n".join(pages)
        except (PdfReadError, ValueError, KeyError, OSError) as e:
            raise TextExtractionError(f"Error extracting text from PDF: {e}") from e
