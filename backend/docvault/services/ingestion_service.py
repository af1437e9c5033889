"""
Ingestion Service - upload, storage and AI enrichment of documents.

Workflow per file:
1. Extension and size checks
2. Storage write (per-department directory, SHA-256 while streaming)
3. Record creation in `pending`
4. Enrichment: pending -> processing -> completed | failed

Files in one batch are handled one after another, and a failure on one file
never aborts the others. Enrichment problems never fail the upload: the
file is stored and the record's status reports the degraded outcome.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from fastapi import UploadFile

from .database.base import DatabaseInterface
from .enrichment_service import EnrichmentService
from .storage.base import FileStorageInterface, StoredFile
from ..api.exceptions import (
    ConflictError,
    DocVaultError,
    DocumentNotFoundError,
    UnsupportedFileTypeError,
    UploadFailedError,
    ValidationError,
)
from ..auth.permissions import ensure_department_access
from ..core.config import MAX_FILE_SIZE, MAX_FILES_PER_UPLOAD, PROCESSING_STALE_AFTER, SUPPORTED_FORMATS
from ..core.logging_config import get_logger
from ..domain.entities import Document, User
from ..domain.value_objects import Department, ProcessingStatus, UrgencyLevel
from ..utils.text_analysis import detect_language
from ..utils.validators import extract_filename, get_file_type, get_mime_type, is_supported_format

logger = get_logger(__name__)

MAX_MERGED_KEYWORDS = 10


@dataclass
class UploadBatch:
    """Outcome of one multi-file upload."""
    documents: List[Document] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    duplicates: Dict[int, int] = field(default_factory=dict)  # new id -> existing id


def merge_keywords(*keyword_lists: List[str], limit: int = MAX_MERGED_KEYWORDS) -> List[str]:
    """Concatenate keyword lists in order, dropping case-insensitive repeats."""
    merged = []
    seen = set()
    for keywords in keyword_lists:
        for keyword in keywords or []:
            cleaned = str(keyword).strip()
            if not cleaned or cleaned.lower() in seen:
                continue
            seen.add(cleaned.lower())
            merged.append(cleaned)
    return merged[:limit]


class IngestionService:
    """
    Coordinates storage, the record store and enrichment for uploads.

    Attributes:
        store: Record store the documents are written to
        storage: File storage the uploads are streamed into
        enrichment: AI enrichment with heuristic fallback
    """

    def __init__(self, store: DatabaseInterface, storage: FileStorageInterface,
                 enrichment: EnrichmentService):
        self.store = store
        self.storage = storage
        self.enrichment = enrichment

    async def upload(
        self,
        files: List[UploadFile],
        department: Optional[str],
        project_id: Optional[int],
        urgency_level: Optional[str],
        user: User,
    ) -> UploadBatch:
        """
        Store and enrich a batch of uploaded files.

        Args:
            files: Uploaded files (1..MAX_FILES_PER_UPLOAD)
            department: Department code, case-insensitive
            project_id: Optional project the documents belong to
            urgency_level: routine (default), priority, urgent or critical
            user: Verified uploader

        Returns:
            UploadBatch with the created documents and per-file errors

        Raises:
            ValidationError: If the batch metadata is invalid
            UploadFailedError: If not a single file could be stored
        """
        if not department or not department.strip():
            raise ValidationError("Department is required")
        dept = Department.parse(department)
        if dept is None:
            raise ValidationError(f"Invalid department: {department}")

        files = [f for f in files or [] if f is not None]
        if not files:
            raise ValidationError("No files uploaded")
        if len(files) > MAX_FILES_PER_UPLOAD:
            raise ValidationError(f"Too many files: at most {MAX_FILES_PER_UPLOAD} per upload")

        urgency = UrgencyLevel.parse(urgency_level)
        if urgency is None:
            raise ValidationError(f"Invalid urgency level: {urgency_level}")

        if project_id is not None and await self.store.get_project(project_id) is None:
            raise ValidationError(f"Project {project_id} does not exist")

        await self.store.upsert_user(user)

        batch = UploadBatch()
        for upload in files:
            filename = extract_filename(upload.filename) or "unknown"
            try:
                document, duplicate_of = await self._ingest_file(upload, filename, dept, project_id, urgency, user)
            except DocVaultError as e:
                logger.warning(f"⚠️  Upload of {filename} rejected: {e.message}")
                batch.errors.append({"filename": filename, "error": e.message})
                continue
            except Exception as e:
                logger.error(f"Upload of {filename} failed: {e}", exc_info=True)
                batch.errors.append({"filename": filename, "error": str(e)})
                continue

            if duplicate_of is not None:
                batch.duplicates[document.id] = duplicate_of
            batch.documents.append(await self._process_after_upload(document))

        if not batch.documents:
            raise UploadFailedError("No files could be uploaded", batch.errors)

        logger.info(
            f"✅ Upload by {user.username}: {len(batch.documents)} stored, "
            f"{len(batch.errors)} failed ({dept.value})"
        )
        return batch

    async def _ingest_file(
        self,
        upload: UploadFile,
        filename: str,
        department: Department,
        project_id: Optional[int],
        urgency: UrgencyLevel,
        user: User,
    ):
        if not is_supported_format(filename, SUPPORTED_FORMATS):
            raise UnsupportedFileTypeError(f"Unsupported file type: {filename}")

        stored = await self.storage.save_upload(upload, department.value, MAX_FILE_SIZE)
        duplicate_of = await self._find_duplicate(stored)

        doc_data = {
            "filename": stored.filename,
            "original_filename": filename,
            "file_size": stored.size,
            "mime_type": upload.content_type or get_mime_type(filename),
            "file_path": stored.path,
            "file_hash": stored.sha256,
            "department": department.value,
            "uploaded_by": user.id,
            "project_id": project_id,
            "urgency_level": urgency.value,
        }
        try:
            document = await self.store.create_document(doc_data)
        except Exception:
            await self._discard_file(stored)
            raise

        logger.info(f"Stored {filename} as document {document.id} → {stored.path}")
        return document, duplicate_of

    async def _find_duplicate(self, stored: StoredFile) -> Optional[int]:
        try:
            existing = await self.store.find_document_by_checksum(stored.sha256)
        except DocVaultError as e:
            logger.warning(f"Duplicate check skipped for {stored.filename}: {e.message}")
            return None
        if existing is None:
            return None
        logger.info(f"Upload {stored.filename} duplicates document {existing.id}")
        return existing.id

    async def _discard_file(self, stored: StoredFile):
        try:
            await self.storage.delete_file(stored.path)
        except DocVaultError as e:
            logger.error(f"Could not remove orphaned file {stored.path}: {e.message}")

    async def _process_after_upload(self, document: Document) -> Document:
        try:
            return await self.process(document)
        except DocVaultError as e:
            logger.error(f"Processing bookkeeping failed for document {document.id}: {e.message}")
            return await self._stored_state(document)

    async def _stored_state(self, document: Document) -> Document:
        """The record as the store holds it; failed when it cannot be read back."""
        try:
            stored = await self.store.get_document(document.id)
        except DocVaultError as e:
            logger.error(f"Could not re-read document {document.id}: {e.message}")
            stored = None
        if stored is not None:
            return stored
        return replace(
            document,
            processing_status=ProcessingStatus.FAILED.value,
            processing_error="Processing outcome could not be recorded",
        )

    async def process(self, document: Document) -> Document:
        """
        Run enrichment for one document and persist the outcome.

        The record moves to processing first; any enrichment exception marks
        it failed instead of propagating.

        Returns:
            The document as stored after the final transition
        """
        updates = document.start_processing()
        await self.store.update_document(document.id, updates)
        logger.info(f"→ Processing document {document.id} ({document.original_filename})")

        try:
            intelligence = await self._enrich(document)
            updates = document.complete(intelligence)
            logger.info(
                f"✅ Document {document.id} classified as {document.ai_classification} "
                f"({document.classification_confidence:.2f})"
            )
        except Exception as e:
            logger.error(f"Processing failed for document {document.id}: {e}", exc_info=True)
            updates = document.fail(str(e) or type(e).__name__)

        stored = await self.store.update_document(document.id, updates)
        return stored or document

    async def _enrich(self, document: Document) -> Dict[str, Any]:
        text = await self.enrichment.extract_text(
            document.file_path, document.original_filename, document.mime_type
        )
        classification = await self.enrichment.classify(
            text, document.original_filename, get_file_type(document.original_filename), document.department
        )
        summary = await self.enrichment.summarize(
            text, document.original_filename, classification.document_type
        )

        return {
            "ai_classification": classification.document_type,
            "classification_confidence": classification.confidence,
            "ai_summary": summary.summary,
            "summary_confidence": summary.confidence,
            "ai_keywords": merge_keywords(summary.keywords, classification.keywords),
            "extracted_entities": classification.entities,
            "compliance_flags": list(classification.compliance_flags),
            "language": classification.language or detect_language(text),
        }

    async def reprocess(self, doc_id: int, user: User) -> Document:
        """
        Re-run enrichment for an existing document. Never creates a new row.

        Raises:
            DocumentNotFoundError: Unknown id, or the backing file is gone
            AccessDeniedError: Document belongs to another department
            ConflictError: Document is currently processing (and not stale)
        """
        document = await self.store.get_document(doc_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {doc_id} not found")
        ensure_department_access(user, document)

        if document.is_processing():
            if not document.is_stale(PROCESSING_STALE_AFTER):
                raise ConflictError(f"Document {doc_id} is already being processed")
            logger.warning(
                f"⚠️  Document {doc_id} stuck in processing since {document.processing_started_at}; "
                f"marking it failed before retrying"
            )
            await self.store.update_document(doc_id, document.fail("Processing was interrupted"))

        if not await self.storage.file_exists(document.file_path):
            raise DocumentNotFoundError(f"File for document {doc_id} not found on disk")

        logger.info(f"Reprocessing document {doc_id} requested by {user.username}")
        return await self.process(document)
