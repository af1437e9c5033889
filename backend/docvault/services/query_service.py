"""
Document query service - listing, retrieval, search, download and delete.

Every read is department-scoped unless the caller holds an elevated role.
"""
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .database.base import DatabaseInterface
from .storage.base import FileStorageInterface
from ..api.exceptions import DocumentNotFoundError, ValidationError
from ..auth.permissions import ensure_department_access, ensure_owner_or_elevated, scoped_department
from ..core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SEARCH_CANDIDATE_LIMIT
from ..core.logging_config import get_logger
from ..domain.entities import Document, DocumentFilters, User
from ..utils.insights import (
    calculate_priority_score,
    categorize_document,
    estimate_read_time,
    sharing_recommendations,
)
from ..utils.search_utils import (
    calculate_relevance_score,
    extract_search_highlights,
    generate_search_suggestions,
    summary_contains_phrase,
)
from ..utils.validators import get_mime_type

logger = get_logger(__name__)


@dataclass
class ScoredDocument:
    document: Document
    relevance_score: int
    exact_match: bool = False
    search_highlights: List[str] = field(default_factory=list)


@dataclass
class SearchResults:
    query: str
    results: List[ScoredDocument]
    total_found: int
    page: int
    page_size: int
    search_suggestions: List[str]
    search_time_ms: float

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total_found


@dataclass
class DownloadTarget:
    path: str
    filename: str
    media_type: str


def normalize_paging(page: Optional[int], page_size: Optional[int]) -> Tuple[int, int]:
    page = page or 1
    page_size = page_size or DEFAULT_PAGE_SIZE
    if page < 1:
        raise ValidationError("Page must be 1 or greater")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    return page, page_size


class DocumentQueryService:
    """Read-side facade over the record store and file storage."""

    def __init__(self, store: DatabaseInterface, storage: FileStorageInterface):
        self.store = store
        self.storage = storage

    async def _get_authorized(self, doc_id: int, user: User) -> Document:
        document = await self.store.get_document(doc_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {doc_id} not found")
        ensure_department_access(user, document)
        return document

    async def list(
        self,
        user: User,
        filters: Optional[DocumentFilters] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Tuple[List[Document], int, int, int]:
        """
        Newest-first page of documents visible to the user.

        Returns:
            (documents, total, page, page_size)
        """
        page, page_size = normalize_paging(page, page_size)
        requested = filters or DocumentFilters()
        filters = replace(requested, department=scoped_department(user, requested.department))
        documents, total = await self.store.list_documents(filters, page, page_size)
        logger.debug(f"Listed {len(documents)}/{total} documents for {user.username} (page {page})")
        return documents, total, page, page_size

    async def get_by_id(self, doc_id: int, user: User) -> Document:
        return await self._get_authorized(doc_id, user)

    async def search(
        self,
        query: Optional[str],
        user: User,
        filters: Optional[DocumentFilters] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> SearchResults:
        """
        Keyword search ranked by relevance.

        Args:
            query: Search text; required and non-empty after trimming
            user: Caller, used for department scoping
            filters: Optional department, document_type and urgency filters
            page: 1-based page number
            page_size: Results per page

        Returns:
            SearchResults for the requested page

        Raises:
            ValidationError: If the query is empty
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required")
        page, page_size = normalize_paging(page, page_size)

        started = time.perf_counter()
        requested = filters or DocumentFilters()
        filters = replace(requested, department=scoped_department(user, requested.department))
        candidates = await self.store.search_documents(query, filters, SEARCH_CANDIDATE_LIMIT)

        scored = [
            ScoredDocument(
                document=doc,
                relevance_score=calculate_relevance_score(query, doc),
                exact_match=summary_contains_phrase(query, doc),
            )
            for doc in candidates
        ]
        # An exact phrase in the summary always outranks a higher weighted score.
        # sorted() is stable, so full ties keep the store's newest-first order.
        scored = sorted(scored, key=lambda item: (item.exact_match, item.relevance_score), reverse=True)

        start = (page - 1) * page_size
        page_items = scored[start:start + page_size]
        for item in page_items:
            item.search_highlights = extract_search_highlights(query, item.document.ai_summary or "")

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(f"Search '{query}' by {user.username}: {len(scored)} matches in {elapsed_ms}ms")
        return SearchResults(
            query=query,
            results=page_items,
            total_found=len(scored),
            page=page,
            page_size=page_size,
            search_suggestions=generate_search_suggestions(query),
            search_time_ms=elapsed_ms,
        )

    async def download(self, doc_id: int, user: User) -> DownloadTarget:
        document = await self._get_authorized(doc_id, user)
        if not await self.storage.file_exists(document.file_path):
            logger.warning(f"⚠️  File for document {doc_id} missing on disk: {document.file_path}")
            raise DocumentNotFoundError(f"File for document {doc_id} not found on disk")
        return DownloadTarget(
            path=document.file_path,
            filename=document.original_filename,
            media_type=document.mime_type or get_mime_type(document.original_filename),
        )

    async def delete(self, doc_id: int, user: User) -> Document:
        """
        Delete a document's file and record (uploader or elevated role only).

        A file that is already gone is logged as an anomaly and the record is
        still removed. A file that cannot be deleted fails the request and
        keeps the record.
        """
        document = await self._get_authorized(doc_id, user)
        ensure_owner_or_elevated(user, document)

        removed = await self.storage.delete_file(document.file_path)
        if not removed:
            logger.warning(
                f"⚠️  Anomaly: file for document {doc_id} was already missing "
                f"({document.file_path}); removing record anyway"
            )

        await self.store.delete_document(doc_id)
        logger.info(f"Document {doc_id} deleted by {user.username}")
        return document

    async def get_intelligence(self, doc_id: int, user: User) -> Dict[str, Any]:
        """Stored AI fields plus derived insights for one document."""
        document = await self._get_authorized(doc_id, user)
        return {
            "document": document,
            "insights": {
                "estimated_read_time": estimate_read_time(document.file_size),
                "document_category": categorize_document(document),
                "priority_score": calculate_priority_score(document),
                "sharing_recommendations": sharing_recommendations(document),
            },
        }
