"""
Data Transfer Objects (DTOs) for API layer.
Separates API contracts from domain entities.

Every response body carries `success` and a `timestamp`.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.entities import utc_now


class ResponseDTO(BaseModel):
    success: bool = True
    timestamp: datetime = Field(default_factory=utc_now)


class DocumentDTO(BaseModel):
    """Document DTO for API responses."""
    id: int
    filename: str
    original_filename: str
    file_size: int
    mime_type: str
    department: str
    project_id: Optional[int] = None
    uploaded_by: Optional[int] = None
    file_hash: Optional[str] = None
    urgency_level: str
    processing_status: str
    ai_classification: Optional[str] = None
    classification_confidence: Optional[float] = None
    ai_summary: Optional[str] = None
    summary_confidence: Optional[float] = None
    ai_keywords: List[str] = []
    extracted_entities: Dict[str, Any] = {}
    compliance_flags: List[str] = []
    language: Optional[str] = None
    processing_error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    processing_started_at: Optional[datetime] = None
    processing_completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UploadedDocumentDTO(BaseModel):
    """Short per-file summary returned by an upload."""
    id: int
    original_filename: str
    file_size: int
    department: str
    processing_status: str
    ai_classification: Optional[str] = None
    classification_confidence: Optional[float] = None
    ai_summary: Optional[str] = None
    duplicate_of: Optional[int] = None


class UploadResponseDTO(ResponseDTO):
    message: str
    documents: List[UploadedDocumentDTO]
    errors: List[Dict[str, str]] = []


class PaginationDTO(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class DocumentListResponseDTO(ResponseDTO):
    documents: List[DocumentDTO]
    pagination: PaginationDTO


class DocumentResponseDTO(ResponseDTO):
    document: DocumentDTO


class SearchResultDTO(DocumentDTO):
    relevance_score: int
    search_highlights: List[str] = []


class SearchResponseDTO(ResponseDTO):
    query: str
    results: List[SearchResultDTO]
    total_found: int
    search_suggestions: List[str]
    search_time_ms: float
    pagination: PaginationDTO


class DocumentInsightsDTO(BaseModel):
    estimated_read_time: str
    document_category: str
    priority_score: int
    sharing_recommendations: List[str]


class DocumentIntelligenceDTO(ResponseDTO):
    """Stored AI output for one document plus derived insights."""
    document_id: int
    filename: str
    department: str
    processing_status: str
    ai_classification: Optional[str] = None
    classification_confidence: Optional[float] = None
    ai_summary: Optional[str] = None
    summary_confidence: Optional[float] = None
    ai_keywords: List[str] = []
    extracted_entities: Dict[str, Any] = {}
    compliance_flags: List[str] = []
    language: Optional[str] = None
    insights: DocumentInsightsDTO


class ProcessResponseDTO(ResponseDTO):
    message: str
    document: DocumentDTO


class DeleteResponseDTO(ResponseDTO):
    message: str
    document_id: int
