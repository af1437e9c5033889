"""
Enrichment service.

Wraps the configured AI provider and guarantees an answer: whatever the
remote service does (timeout, non-2xx, success=false, garbage body), the
caller gets a result from the local heuristic provider instead.
"""
import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .providers import AIProvider, AIProviderFactory, HeuristicProvider
from .providers.base import ClassificationResult, SummaryResult
from .text_extractors import TextExtractorFactory, TextExtractionError
from ..api.exceptions import ProviderError
from ..domain import taxonomy
from ..utils.text_analysis import extract_entities
from ..core.config import (
    CLASSIFICATION_CONFIDENCE_THRESHOLD,
    MAX_SUMMARY_LENGTH,
    NORMALIZE_LEGACY_LABELS,
    OCR_CONFIDENCE_THRESHOLD,
)
from ..core.logging_config import get_logger

logger = get_logger(__name__)


def clamp_confidence(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return max(0.0, min(1.0, float(value)))


class EnrichmentService:
    """
    AI enrichment with a deterministic fallback.
    classify() and summarize() never raise for provider failures.
    """

    def __init__(
        self,
        provider: Optional[AIProvider] = None,
        fallback: Optional[HeuristicProvider] = None,
        remap_legacy: bool = NORMALIZE_LEGACY_LABELS,
    ):
        self.provider = provider or AIProviderFactory.get_provider()
        self.fallback = fallback or HeuristicProvider()
        self.remap_legacy = remap_legacy
        logger.info(f"Initialized EnrichmentService with provider: {type(self.provider).__name__}")

    async def classify(self, text: str, filename: str, file_type: str,
                       department: Optional[str] = None) -> ClassificationResult:
        """
        Classify a document.

        Args:
            text: Extracted text (may be empty)
            filename: Original filename
            file_type: document, image, spreadsheet, cad or unknown
            department: Uploading department, used as a relevance hint

        Returns:
            ClassificationResult with a taxonomy label and clamped confidence
        """
        try:
            result = await self.provider.classify(text, filename, file_type, department)
        except ProviderError as e:
            logger.warning(f"⚠️  Classification via {self.provider.name} failed ({e}), using heuristic fallback")
            result = await self.fallback.classify(text, filename, file_type, department)
        except Exception as e:
            logger.error(f"Unexpected classification error from {self.provider.name}: {e}", exc_info=True)
            result = await self.fallback.classify(text, filename, file_type, department)

        entities = dict(result.entities or {})
        local_entities = extract_entities(text)
        for key, values in local_entities.items():
            if not entities.get(key):
                entities[key] = values

        result = replace(
            result,
            document_type=taxonomy.normalize_label(result.document_type, self.remap_legacy),
            confidence=clamp_confidence(result.confidence),
            entities=entities,
        )
        if result.confidence < CLASSIFICATION_CONFIDENCE_THRESHOLD:
            logger.info(
                f"Low classification confidence for {filename}: "
                f"{result.document_type} ({result.confidence:.2f})"
            )
        logger.debug(f"Classified {filename} as {result.document_type} via {result.source}")
        return result

    async def summarize(self, text: str, filename: str, document_type: Optional[str],
                        max_summary_length: int = MAX_SUMMARY_LENGTH) -> SummaryResult:
        """Summarize a document, seeded with its detected type."""
        try:
            result = await self.provider.summarize(text, filename, document_type, max_summary_length)
        except ProviderError as e:
            logger.warning(f"⚠️  Summarization via {self.provider.name} failed ({e}), using heuristic fallback")
            result = await self.fallback.summarize(text, filename, document_type, max_summary_length)
        except Exception as e:
            logger.error(f"Unexpected summarization error from {self.provider.name}: {e}", exc_info=True)
            result = await self.fallback.summarize(text, filename, document_type, max_summary_length)

        return replace(
            result,
            summary=result.summary[:max_summary_length],
            confidence=clamp_confidence(result.confidence),
        )

    async def extract_text(self, file_path: str, filename: str, mime_type: str) -> str:
        """
        Extract text for enrichment.

        Local extractors (PDF, DOCX, plain text) run first; other formats go
        to the provider's OCR endpoint. Any failure yields an empty string so
        classification can still run on the filename.
        """
        extractor = TextExtractorFactory.get_extractor(filename)
        if extractor is not None:
            loop = asyncio.get_event_loop()
            try:
                content = await loop.run_in_executor(None, Path(file_path).read_bytes)
                text = await loop.run_in_executor(None, extractor.extract, content)
                logger.debug(f"Extracted {len(text)} chars from {filename} ({extractor.format_name})")
                return text.strip()
            except (OSError, TextExtractionError) as e:
                logger.warning(f"⚠️  Local text extraction failed for {filename}: {e}")
                return ""
            except Exception as e:
                logger.error(f"Unexpected {extractor.format_name} extraction error for {filename}: {e}", exc_info=True)
                return ""

        try:
            result = await self.provider.extract_text(file_path, filename, mime_type)
        except ProviderError as e:
            logger.warning(f"⚠️  OCR via {self.provider.name} failed for {filename}: {e}")
            return ""
        except Exception as e:
            logger.error(f"Unexpected OCR error for {filename}: {e}", exc_info=True)
            return ""

        if result is None:
            return ""
        if result.confidence is not None and result.confidence < OCR_CONFIDENCE_THRESHOLD:
            logger.warning(f"⚠️  Low OCR confidence for {filename}: {result.confidence:.2f}")
        return result.text.strip()

    async def health_check(self) -> bool:
        try:
            return await self.provider.health_check()
        except Exception as e:
            logger.warning(f"AI provider health check raised: {e}")
            return False

    async def close(self):
        await self.provider.close()
