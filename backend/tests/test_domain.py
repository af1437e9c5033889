from datetime import datetime, timedelta, timezone

import pytest

from docvault.domain import Department, Document, ProcessingStatus, UrgencyLevel, InvalidStatusTransition
from docvault.domain import taxonomy
from docvault.utils.validators import extract_filename, is_supported_format, sanitize_filename


def _document(status="pending"):
    return Document(
        id=1, filename="f.txt", original_filename="f.txt", file_size=1,
        mime_type="text/plain", file_path="/tmp/f.txt", department="SAFETY",
        processing_status=status,
    )


def test_status_never_returns_to_pending():
    for status in ProcessingStatus:
        assert not status.can_transition_to(ProcessingStatus.PENDING)


def test_allowed_transitions():
    assert ProcessingStatus.PENDING.can_transition_to(ProcessingStatus.PROCESSING)
    assert ProcessingStatus.PROCESSING.can_transition_to(ProcessingStatus.COMPLETED)
    assert ProcessingStatus.PROCESSING.can_transition_to(ProcessingStatus.FAILED)
    assert ProcessingStatus.COMPLETED.can_transition_to(ProcessingStatus.PROCESSING)
    assert ProcessingStatus.FAILED.can_transition_to(ProcessingStatus.PROCESSING)
    assert not ProcessingStatus.PENDING.can_transition_to(ProcessingStatus.COMPLETED)


def test_document_lifecycle_updates():
    document = _document()

    started = document.start_processing()
    assert started["processing_status"] == "processing"
    assert started["processing_started_at"] is not None

    completed = document.complete({"ai_classification": "safety&training", "classification_confidence": 0.9})
    assert completed["processing_status"] == "completed"
    assert document.ai_classification == "safety&training"
    assert document.processing_completed_at is not None


def test_completing_a_pending_document_is_rejected():
    with pytest.raises(InvalidStatusTransition):
        _document().complete({})


def test_failure_records_reason():
    document = _document("processing")
    updates = document.fail("extractor crashed")
    assert updates["processing_status"] == "failed"
    assert document.processing_error == "extractor crashed"


def test_department_parsing():
    assert Department.parse("safety") is Department.SAFETY
    assert Department.parse(" track systems ") is Department.TRACK_SYSTEMS
    assert Department.parse("rolling-stock") is Department.ROLLING_STOCK
    assert Department.parse("catering") is None
    assert Department.parse("") is None


def test_urgency_parsing():
    assert UrgencyLevel.parse(None) is UrgencyLevel.ROUTINE
    assert UrgencyLevel.parse("URGENT") is UrgencyLevel.URGENT
    assert UrgencyLevel.parse("whenever") is None


@pytest.mark.parametrize("label,expected", [
    ("vendor_bill", "finance&procurement"),
    ("engineering_drawing", "maintenance&operation"),
    ("board_minutes", "legal&governance"),
    ("Safety&Training", "safety&training"),
    ("something new", "general communication"),
    (None, "general communication"),
])
def test_label_normalization(label, expected):
    assert taxonomy.normalize_label(label) == expected


def test_label_normalization_can_be_disabled():
    assert taxonomy.normalize_label("vendor_bill", remap_legacy=False) == "vendor_bill"


def test_filename_helpers():
    assert sanitize_filename("my report (v2).pdf") == "my_report__v2_.pdf"
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("...") == "___"
    assert extract_filename("C:\\scans\\notice.pdf") == "notice.pdf"
    assert is_supported_format("Drawing.DWG")
    assert not is_supported_format("payload.exe")


def test_stale_processing_detection():
    now = datetime(2024, 3, 12, 10, 0, tzinfo=timezone.utc)
    document = _document("processing")
    document.processing_started_at = now - timedelta(minutes=5)

    assert not document.is_stale(600, now=now)
    assert document.is_stale(60, now=now)
    assert not _document("completed").is_stale(0, now=now)
    assert _document("processing").is_stale(600, now=now)


def test_stale_check_accepts_naive_timestamps():
    now = datetime(2024, 3, 12, 10, 0, tzinfo=timezone.utc)
    document = _document("processing")
    document.processing_started_at = datetime(2024, 3, 12, 9, 0)
    assert document.is_stale(600, now=now)
