"""
Documents Router - upload, listing, search, retrieval, download, delete
and manual reprocessing.

Architecture:
- Router handles HTTP request/response only
- Business logic delegated to IngestionService and DocumentQueryService
- Every route requires a verified bearer token

Example Usage:
    POST   /api/documents/upload            - Upload files for a department
    GET    /api/documents                   - Paginated listing
    GET    /api/documents/search?q=...      - Ranked keyword search
    GET    /api/documents/{doc_id}          - Single document
    GET    /api/documents/{doc_id}/summary  - AI intelligence and insights
    GET    /api/documents/{doc_id}/download - File bytes
    DELETE /api/documents/{doc_id}          - Delete file and record
    POST   /api/documents/{doc_id}/process  - Re-run AI enrichment
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import FileResponse

from .dependencies import get_ingestion_service, get_query_service
from ..api.dto import (
    DeleteResponseDTO,
    DocumentIntelligenceDTO,
    DocumentListResponseDTO,
    DocumentResponseDTO,
    ProcessResponseDTO,
    SearchResponseDTO,
    UploadResponseDTO,
)
from ..api.exceptions import ValidationError
from ..api.mappers import DocumentMapper, build_pagination
from ..auth import get_current_user
from ..core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.logging_config import get_logger
from ..domain.entities import DocumentFilters, User
from ..domain.value_objects import Department, ProcessingStatus, UrgencyLevel
from ..middleware.rate_limit import upload_rate_limit
from ..services.ingestion_service import IngestionService
from ..services.query_service import DocumentQueryService

logger = get_logger(__name__)

router = APIRouter()


def _parse_department(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    department = Department.parse(value)
    if department is None:
        raise ValidationError(f"Invalid department: {value}")
    return department.value


def _parse_urgency(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    urgency = UrgencyLevel.parse(value)
    if urgency is None:
        raise ValidationError(f"Invalid urgency level: {value}")
    return urgency.value


def _parse_status(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    try:
        return ProcessingStatus(value.strip().lower()).value
    except ValueError:
        raise ValidationError(f"Invalid processing status: {value}")


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadResponseDTO,
)
@upload_rate_limit
async def upload_documents(
    request: Request,
    files: Optional[List[UploadFile]] = File(None),
    department: Optional[str] = Form(None),
    project_id: Optional[int] = Form(None),
    urgency_level: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    """
    Upload one or more files for a department.

    Each file is stored, recorded and enriched independently. The request
    succeeds (201) when at least one file was stored; per-file failures are
    listed under `errors`.

    Status Codes:
        201: At least one file stored
        400: Missing or invalid department, urgency, project or no files
        401: Missing or invalid token
        422: No file could be stored
    """
    batch = await ingestion.upload(files or [], department, project_id, urgency_level, user)
    documents = [
        DocumentMapper.to_upload_dto(doc, batch.duplicates.get(doc.id))
        for doc in batch.documents
    ]
    return UploadResponseDTO(
        message=f"{len(documents)} file(s) uploaded successfully",
        documents=documents,
        errors=batch.errors,
    )


@router.get("", response_model=DocumentListResponseDTO)
async def list_documents(
    department: Optional[str] = Query(None),
    project_id: Optional[int] = Query(None),
    urgency_level: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    user: User = Depends(get_current_user),
    query_service: DocumentQueryService = Depends(get_query_service),
):
    """
    Newest-first, paginated listing. Non-elevated users only ever see
    their own department, whatever `department` says.
    """
    filters = DocumentFilters(
        department=_parse_department(department),
        project_id=project_id,
        urgency_level=_parse_urgency(urgency_level),
        processing_status=_parse_status(status_filter),
    )
    documents, total, page, limit = await query_service.list(user, filters, page, limit)
    return DocumentListResponseDTO(
        documents=DocumentMapper.to_dto_list(documents),
        pagination=build_pagination(page, limit, total),
    )


@router.get("/search", response_model=SearchResponseDTO)
async def search_documents(
    q: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    document_type: Optional[str] = Query(None),
    urgency_level: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    user: User = Depends(get_current_user),
    query_service: DocumentQueryService = Depends(get_query_service),
):
    """Keyword search ranked by relevance, with highlights and suggestions."""
    filters = DocumentFilters(
        department=_parse_department(department),
        urgency_level=_parse_urgency(urgency_level),
        document_type=document_type.strip().lower() if document_type and document_type.strip() else None,
    )
    results = await query_service.search(q, user, filters, page, limit)
    return SearchResponseDTO(
        query=results.query,
        results=[DocumentMapper.to_search_dto(item) for item in results.results],
        total_found=results.total_found,
        search_suggestions=results.search_suggestions,
        search_time_ms=results.search_time_ms,
        pagination=build_pagination(results.page, results.page_size, results.total_found),
    )


@router.get("/{doc_id}", response_model=DocumentResponseDTO)
async def get_document(
    doc_id: int,
    user: User = Depends(get_current_user),
    query_service: DocumentQueryService = Depends(get_query_service),
):
    document = await query_service.get_by_id(doc_id, user)
    return DocumentResponseDTO(document=DocumentMapper.to_dto(document))


@router.get("/{doc_id}/summary", response_model=DocumentIntelligenceDTO)
async def get_document_summary(
    doc_id: int,
    user: User = Depends(get_current_user),
    query_service: DocumentQueryService = Depends(get_query_service),
):
    """Stored AI intelligence plus read time, priority and sharing hints."""
    intelligence = await query_service.get_intelligence(doc_id, user)
    return DocumentMapper.to_intelligence_dto(intelligence["document"], intelligence["insights"])


@router.get("/{doc_id}/download")
async def download_document(
    doc_id: int,
    user: User = Depends(get_current_user),
    query_service: DocumentQueryService = Depends(get_query_service),
):
    target = await query_service.download(doc_id, user)
    logger.info(f"Document {doc_id} downloaded by {user.username}")
    return FileResponse(target.path, media_type=target.media_type, filename=target.filename)


@router.delete("/{doc_id}", response_model=DeleteResponseDTO)
async def delete_document(
    doc_id: int,
    user: User = Depends(get_current_user),
    query_service: DocumentQueryService = Depends(get_query_service),
):
    document = await query_service.delete(doc_id, user)
    return DeleteResponseDTO(message="Document deleted successfully", document_id=document.id)


@router.post("/{doc_id}/process", response_model=ProcessResponseDTO)
async def process_document(
    doc_id: int,
    user: User = Depends(get_current_user),
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    """
    Re-run AI enrichment for an existing document.

    Status Codes:
        200: Processing finished (completed or failed)
        404: Unknown document or backing file missing
        409: Document is already processing
    """
    document = await ingestion.reprocess(doc_id, user)
    return ProcessResponseDTO(
        message=f"Document processing {document.processing_status}",
        document=DocumentMapper.to_dto(document),
    )
