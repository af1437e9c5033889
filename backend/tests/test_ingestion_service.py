import io
from datetime import timedelta

import pytest
from fastapi import UploadFile

from docvault.api.exceptions import (
    ConflictError,
    DocumentNotFoundError,
    StoreUnavailableError,
    UploadFailedError,
    ValidationError,
)
from docvault.domain import User
from docvault.domain.entities import utc_now
from docvault.services.database import MemoryAdapter
from docvault.services.enrichment_service import EnrichmentService
from docvault.services.ingestion_service import IngestionService, merge_keywords
from docvault.services.providers import HeuristicProvider
from docvault.services.storage import LocalFileStorage

ENGINEER = User(id=1, username="asha", department="SAFETY", role="engineer")


def _file(name, content=b"Inspection of escalator 3 completed."):
    return UploadFile(file=io.BytesIO(content), filename=name)


@pytest.fixture
async def parts(tmp_path):
    store = MemoryAdapter()
    storage = LocalFileStorage(tmp_path)
    await storage.initialize()
    service = IngestionService(store, storage, EnrichmentService(provider=HeuristicProvider()))
    return service, store, storage


def test_merge_keywords_dedupes_case_insensitively():
    merged = merge_keywords(["Signal", "track"], ["signal", "depot"], limit=3)
    assert merged == ["Signal", "track", "depot"]


@pytest.mark.parametrize("department, message", [
    (None, "Department is required"),
    ("  ", "Department is required"),
    ("CATERING", "Invalid department: CATERING"),
])
async def test_department_is_validated(parts, department, message):
    service, _, _ = parts
    with pytest.raises(ValidationError) as exc:
        await service.upload([_file("a.txt")], department, None, None, ENGINEER)
    assert exc.value.message == message


async def test_too_many_files(parts):
    service, _, _ = parts
    files = [_file(f"{i}.txt") for i in range(11)]
    with pytest.raises(ValidationError):
        await service.upload(files, "SAFETY", None, None, ENGINEER)


async def test_upload_records_uploader_and_completes(parts):
    service, store, _ = parts
    batch = await service.upload([_file("escalator.txt")], "safety", None, "urgent", ENGINEER)

    document = batch.documents[0]
    assert document.department == "SAFETY"
    assert document.urgency_level == "urgent"
    assert document.uploaded_by == 1
    assert document.processing_status == "completed"
    assert document.file_hash
    assert (await store.get_user(1)).username == "asha"


async def test_failed_record_creation_removes_stored_file(parts, monkeypatch):
    service, store, storage = parts

    async def broken_create(doc_data):
        raise StoreUnavailableError("Document store is unavailable")

    monkeypatch.setattr(store, "create_document", broken_create)

    with pytest.raises(UploadFailedError) as exc:
        await service.upload([_file("report.txt")], "SAFETY", None, None, ENGINEER)

    assert exc.value.errors == [{"filename": "report.txt", "error": "Document store is unavailable"}]
    assert list((storage.documents_dir / "safety").iterdir()) == []


async def test_enrichment_crash_marks_document_failed(parts, monkeypatch):
    service, _, _ = parts

    async def explode(*args, **kwargs):
        raise RuntimeError("extractor blew up")

    monkeypatch.setattr(service.enrichment, "extract_text", explode)

    batch = await service.upload([_file("report.txt")], "SAFETY", None, None, ENGINEER)

    document = batch.documents[0]
    assert document.processing_status == "failed"
    assert document.processing_error == "extractor blew up"
    assert document.processing_completed_at is not None


async def test_reprocess_rejects_document_in_progress(parts):
    service, store, _ = parts
    document = await store.create_document({
        "filename": "x.txt", "original_filename": "x.txt", "file_size": 1,
        "mime_type": "text/plain", "file_path": "/nonexistent/x.txt",
        "department": "SAFETY", "processing_status": "processing",
        "processing_started_at": utc_now(),
    })

    with pytest.raises(ConflictError):
        await service.reprocess(document.id, ENGINEER)


async def test_reprocess_unknown_document(parts):
    service, _, _ = parts
    with pytest.raises(DocumentNotFoundError):
        await service.reprocess(99, ENGINEER)



def _fail_terminal_writes(store, monkeypatch):
    original_update = store.update_document

    async def flaky_update(doc_id, updates):
        if updates.get("processing_status") in ("completed", "failed"):
            raise StoreUnavailableError("Document store is unavailable")
        return await original_update(doc_id, updates)

    monkeypatch.setattr(store, "update_document", flaky_update)


async def test_lost_final_write_reports_stored_status(parts, monkeypatch):
    service, store, _ = parts
    _fail_terminal_writes(store, monkeypatch)

    batch = await service.upload([_file("report.txt")], "SAFETY", None, None, ENGINEER)

    reported = batch.documents[0]
    stored = await store.get_document(reported.id)
    assert stored.processing_status == "processing"
    assert reported.processing_status == stored.processing_status


async def test_unreadable_store_reports_failure(parts, monkeypatch):
    service, store, _ = parts
    _fail_terminal_writes(store, monkeypatch)

    async def unreadable(doc_id):
        raise StoreUnavailableError("Document store is unavailable")

    created = []
    original_create = store.create_document

    async def create_then_break(doc_data):
        document = await original_create(doc_data)
        created.append(document.id)
        monkeypatch.setattr(store, "get_document", unreadable)
        return document

    monkeypatch.setattr(store, "create_document", create_then_break)

    batch = await service.upload([_file("report.txt")], "SAFETY", None, None, ENGINEER)

    assert batch.documents[0].id == created[0]
    assert batch.documents[0].processing_status == "failed"


async def test_stuck_document_can_be_reprocessed(parts, monkeypatch):
    service, store, _ = parts
    _fail_terminal_writes(store, monkeypatch)
    doc_id = (await service.upload([_file("report.txt")], "SAFETY", None, None, ENGINEER)).documents[0].id
    monkeypatch.undo()

    with pytest.raises(ConflictError):
        await service.reprocess(doc_id, ENGINEER)

    await store.update_document(doc_id, {"processing_started_at": utc_now() - timedelta(hours=2)})
    document = await service.reprocess(doc_id, ENGINEER)

    assert document.id == doc_id
    assert document.processing_status == "completed"
    assert document.processing_error is None
