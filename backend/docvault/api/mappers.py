"""
Mappers between domain entities and DTOs.
Separates domain layer from API layer.
"""
import math
from typing import Any, Dict, List, Optional

from ..domain.entities import Document
from ..services.query_service import ScoredDocument
from .dto import (
    DocumentDTO,
    DocumentInsightsDTO,
    DocumentIntelligenceDTO,
    PaginationDTO,
    SearchResultDTO,
    UploadedDocumentDTO,
)


class DocumentMapper:
    """Maps between Document entity and DocumentDTO."""

    @staticmethod
    def to_dto(document: Document) -> DocumentDTO:
        """Convert domain entity to DTO. The storage path stays server-side."""
        return DocumentDTO.model_validate(document)

    @staticmethod
    def to_dto_list(documents: List[Document]) -> List[DocumentDTO]:
        return [DocumentMapper.to_dto(doc) for doc in documents]

    @staticmethod
    def to_upload_dto(document: Document, duplicate_of: Optional[int] = None) -> UploadedDocumentDTO:
        return UploadedDocumentDTO(
            id=document.id,
            original_filename=document.original_filename,
            file_size=document.file_size,
            department=document.department,
            processing_status=document.processing_status,
            ai_classification=document.ai_classification,
            classification_confidence=document.classification_confidence,
            ai_summary=document.ai_summary,
            duplicate_of=duplicate_of,
        )

    @staticmethod
    def to_search_dto(item: ScoredDocument) -> SearchResultDTO:
        data = DocumentMapper.to_dto(item.document).model_dump()
        return SearchResultDTO(
            **data,
            relevance_score=item.relevance_score,
            search_highlights=item.search_highlights,
        )

    @staticmethod
    def to_intelligence_dto(document: Document, insights: Dict[str, Any]) -> DocumentIntelligenceDTO:
        return DocumentIntelligenceDTO(
            document_id=document.id,
            filename=document.original_filename,
            department=document.department,
            processing_status=document.processing_status,
            ai_classification=document.ai_classification,
            classification_confidence=document.classification_confidence,
            ai_summary=document.ai_summary,
            summary_confidence=document.summary_confidence,
            ai_keywords=document.ai_keywords,
            extracted_entities=document.extracted_entities,
            compliance_flags=document.compliance_flags,
            language=document.language,
            insights=DocumentInsightsDTO(**insights),
        )


def build_pagination(page: int, limit: int, total: int) -> PaginationDTO:
    return PaginationDTO(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if limit else 0,
        has_more=page * limit < total,
    )
