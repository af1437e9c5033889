"""
Base AI Provider Interface.

All AI providers must inherit from this base class and implement
the classification and summarization contract.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...domain.entities import empty_entities


@dataclass
class ClassificationResult:
    document_type: str
    confidence: float
    keywords: List[str] = field(default_factory=list)
    entities: Dict[str, Any] = field(default_factory=empty_entities)
    processing_time: float = 0.0
    language: Optional[str] = None
    key_points: List[str] = field(default_factory=list)
    compliance_flags: List[str] = field(default_factory=list)
    department_relevance: List[str] = field(default_factory=list)
    summary: Optional[str] = None
    source: str = "remote"


@dataclass
class SummaryResult:
    summary: str
    keywords: List[str] = field(default_factory=list)
    confidence: float = 0.0
    processing_time: float = 0.0
    source: str = "remote"


@dataclass
class TextExtractionResult:
    text: str
    confidence: Optional[float] = None
    source: str = "remote"


class AIProvider(ABC):
    """
    Abstract base class for AI providers.

    name is recorded as the `source` of every result the provider returns.
    """
    name = "base"

    @abstractmethod
    async def classify(self, text: str, filename: str, file_type: str,
                       department: Optional[str] = None) -> ClassificationResult:
        """
        Classify a document into the metro document taxonomy.

        Args:
            text: Extracted document text (may be empty)
            filename: Original filename
            file_type: document, image, spreadsheet, cad or unknown
            department: Uploading department, used as a relevance hint

        Returns:
            ClassificationResult
        """
        pass

    @abstractmethod
    async def summarize(self, text: str, filename: str, document_type: Optional[str],
                        max_summary_length: int = 500) -> SummaryResult:
        """
        Summarize a document, seeded with its detected type.

        Returns:
            SummaryResult
        """
        pass

    async def extract_text(self, file_path: str, filename: str, mime_type: str) -> Optional[TextExtractionResult]:
        """Remote OCR / text extraction. Providers without it return None."""
        return None

    async def health_check(self) -> bool:
        return True

    async def close(self):
        pass
