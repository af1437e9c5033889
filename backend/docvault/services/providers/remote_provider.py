"""
Remote ML Provider.

Talks to the external classification / summarization service over HTTP.
Every failure (transport, timeout, non-2xx, success=false, malformed body)
is raised as a ProviderError so the enrichment service can fall back.
"""
import asyncio
import time
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from .base import AIProvider, ClassificationResult, SummaryResult, TextExtractionResult
from ...api.exceptions import ProviderError, ProviderResponseError
from ...domain.entities import empty_entities
from ...core.config import (
    ML_SERVICE_URL,
    ML_CLASSIFICATION_API,
    ML_SUMMARY_API,
    ML_OCR_API,
    ML_REQUEST_TIMEOUT,
    ML_OCR_TIMEOUT,
    ML_HEALTH_TIMEOUT,
)
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class RemoteMLProvider(AIProvider):
    """HTTP client for the external ML service."""
    name = "remote"

    def __init__(
        self,
        base_url: str = ML_SERVICE_URL,
        classify_url: str = ML_CLASSIFICATION_API,
        summary_url: str = ML_SUMMARY_API,
        ocr_url: str = ML_OCR_API,
        timeout: float = ML_REQUEST_TIMEOUT,
        ocr_timeout: float = ML_OCR_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.classify_url = classify_url
        self.summary_url = summary_url
        self.ocr_url = ocr_url
        self.timeout = timeout
        self.ocr_timeout = ocr_timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        logger.info(f"Remote ML provider configured for {self.base_url}")

    async def _post_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise ProviderError(f"ML service timed out after {self.timeout}s: {url}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"ML service request failed: {e}") from e
        except ValueError as e:
            raise ProviderResponseError(f"ML service returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderResponseError("ML service returned an unexpected payload")
        if not data.get("success"):
            raise ProviderResponseError(data.get("error") or data.get("message") or "ML service reported failure")
        return data

    async def classify(self, text: str, filename: str, file_type: str,
                       department: Optional[str] = None) -> ClassificationResult:
        started = time.perf_counter()
        data = await self._post_json(self.classify_url, {
            "text": text,
            "filename": filename,
            "file_type": file_type,
        })

        label = data.get("category") or data.get("document_type") or data.get("classification")
        if not label:
            raise ProviderResponseError("ML classification response has no document type")

        entities = empty_entities()
        raw_entities = data.get("entities") or {}
        if isinstance(raw_entities, dict):
            for key, values in raw_entities.items():
                if isinstance(values, list):
                    entities[key] = [str(v) for v in values]

        return ClassificationResult(
            document_type=str(label),
            confidence=_as_float(data.get("confidence"), 0.0),
            keywords=[str(k) for k in data.get("keywords") or []],
            entities=entities,
            processing_time=_as_float(data.get("processing_time"), time.perf_counter() - started),
            language=data.get("language"),
            key_points=[str(k) for k in data.get("key_points") or []],
            compliance_flags=[str(f) for f in data.get("compliance_flags") or []],
            department_relevance=[str(d) for d in data.get("department_relevance") or []],
            source=self.name,
        )

    async def summarize(self, text: str, filename: str, document_type: Optional[str],
                        max_summary_length: int = 500) -> SummaryResult:
        started = time.perf_counter()
        data = await self._post_json(self.summary_url, {
            "text": text,
            "filename": filename,
            "document_type": document_type or "unknown",
            "max_summary_length": max_summary_length,
        })

        summary = data.get("summary")
        if not summary:
            raise ProviderResponseError("ML summary response has no summary")

        return SummaryResult(
            summary=str(summary),
            keywords=[str(k) for k in data.get("keywords") or []],
            confidence=_as_float(data.get("confidence"), 0.8),
            processing_time=_as_float(data.get("processing_time"), time.perf_counter() - started),
            source=self.name,
        )

    async def extract_text(self, file_path: str, filename: str, mime_type: str) -> Optional[TextExtractionResult]:
        loop = asyncio.get_event_loop()
        try:
            content = await loop.run_in_executor(None, Path(file_path).read_bytes)
        except OSError as e:
            raise ProviderError(f"Cannot read {file_path} for OCR: {e}") from e

        try:
            response = await self._client.post(
                self.ocr_url,
                files={"file": (filename, content, mime_type)},
                timeout=self.ocr_timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"ML OCR request failed: {e}") from e
        except ValueError as e:
            raise ProviderResponseError(f"ML OCR returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not data.get("success"):
            raise ProviderResponseError("ML OCR reported failure")

        return TextExtractionResult(
            text=str(data.get("text") or data.get("extracted_text") or ""),
            confidence=_as_float(data.get("confidence"), None),
            source=self.name,
        )

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(f"{self.base_url}/health", timeout=ML_HEALTH_TIMEOUT)
            return response.status_code == 200
        except httpx.HTTPError:
            logger.warning("ML service health check failed")
            return False

    async def close(self):
        await self._client.aclose()


def _as_float(value: Any, default: Optional[float]) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
