"""
DOCX Text Extractor.

Extracts paragraph and table text from DOCX files using python-docx.
"""
import io
import zipfile

from docx import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError

from .base import BaseTextExtractor, TextExtractionError


class DOCXExtractor(BaseTextExtractor):
    """Extractor for DOCX files."""

    def __init__(self):
        super().__init__(".docx", "DOCX")

    def extract(self, file_bytes: bytes) -> str:
        try:
            doc = DocxDocument(io.BytesIO(file_bytes))
        except (zipfile.BadZipFile, PackageNotFoundError, KeyError, ValueError) as e:
            raise TextExtractionError(f"Error extracting text from DOCX: {e}") from e

        lines = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return "\n".join(lines)
