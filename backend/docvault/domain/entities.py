"""
Domain entities - Core business objects.
These represent the business concepts, not database models.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from .value_objects import ProcessingStatus, UrgencyLevel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def empty_entities() -> Dict[str, List[str]]:
    return {
        "dates": [],
        "amounts": [],
        "project_codes": [],
        "departments": [],
        "personnel": [],
    }


class InvalidStatusTransition(Exception):
    """Raised when a processing status change would move backwards."""

    def __init__(self, current: ProcessingStatus, target: ProcessingStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move document from '{current.value}' to '{target.value}'")


@dataclass
class User:
    """Authenticated principal, built from verified token claims."""
    id: int
    username: str
    department: str
    role: str
    email: Optional[str] = None
    is_active: bool = True

    def has_role(self, roles: List[str]) -> bool:
        return (self.role or "").lower() in roles


@dataclass
class Project:
    id: int
    name: str
    department: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Document:
    """
    Document entity - one uploaded file plus its AI-derived intelligence.
    This is a pure domain object, independent of persistence.
    """
    id: int
    filename: str
    original_filename: str
    file_size: int
    mime_type: str
    file_path: str
    department: str
    uploaded_by: Optional[int] = None
    project_id: Optional[int] = None
    file_hash: Optional[str] = None
    urgency_level: str = UrgencyLevel.ROUTINE.value
    processing_status: str = ProcessingStatus.PENDING.value
    ai_classification: Optional[str] = None
    classification_confidence: Optional[float] = None
    ai_summary: Optional[str] = None
    summary_confidence: Optional[float] = None
    ai_keywords: List[str] = field(default_factory=list)
    extracted_entities: Dict[str, Any] = field(default_factory=empty_entities)
    compliance_flags: List[str] = field(default_factory=list)
    language: Optional[str] = None
    processing_error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    processing_started_at: Optional[datetime] = None
    processing_completed_at: Optional[datetime] = None

    @property
    def status(self) -> ProcessingStatus:
        return ProcessingStatus(self.processing_status)

    def is_processing(self) -> bool:
        return self.status == ProcessingStatus.PROCESSING

    def is_stale(self, max_age_seconds: float, now: Optional[datetime] = None) -> bool:
        """True when the record has been processing for longer than max_age_seconds."""
        if not self.is_processing():
            return False
        started = self.processing_started_at
        if started is None:
            return True
        if started.tzinfo is None:
            # SQLite hands back naive datetimes
            started = started.replace(tzinfo=timezone.utc)
        return ((now or utc_now()) - started).total_seconds() > max_age_seconds

    def belongs_to(self, department: Optional[str]) -> bool:
        return bool(department) and self.department.upper() == department.upper()

    def _transition(self, target: ProcessingStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransition(self.status, target)
        self.processing_status = target.value

    def start_processing(self) -> Dict[str, Any]:
        """Move into processing and return the column updates to persist."""
        self._transition(ProcessingStatus.PROCESSING)
        self.processing_started_at = utc_now()
        self.processing_completed_at = None
        self.processing_error = None
        return {
            "processing_status": self.processing_status,
            "processing_started_at": self.processing_started_at,
            "processing_completed_at": None,
            "processing_error": None,
        }

    def complete(self, intelligence: Dict[str, Any]) -> Dict[str, Any]:
        """Record enrichment results and return the column updates to persist."""
        self._transition(ProcessingStatus.COMPLETED)
        self.processing_completed_at = utc_now()
        updates = dict(intelligence)
        for key, value in updates.items():
            setattr(self, key, value)
        updates["processing_status"] = self.processing_status
        updates["processing_completed_at"] = self.processing_completed_at
        return updates

    def fail(self, reason: str) -> Dict[str, Any]:
        self._transition(ProcessingStatus.FAILED)
        self.processing_completed_at = utc_now()
        self.processing_error = reason
        return {
            "processing_status": self.processing_status,
            "processing_completed_at": self.processing_completed_at,
            "processing_error": reason,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DocumentFilters:
    """Optional equality filters shared by listing and search."""
    department: Optional[str] = None
    project_id: Optional[int] = None
    urgency_level: Optional[str] = None
    processing_status: Optional[str] = None
    document_type: Optional[str] = None

    def matches(self, document: Document) -> bool:
        if self.department and document.department != self.department:
            return False
        if self.project_id is not None and document.project_id != self.project_id:
            return False
        if self.urgency_level and document.urgency_level != self.urgency_level:
            return False
        if self.processing_status and document.processing_status != self.processing_status:
            return False
        if self.document_type and document.ai_classification != self.document_type:
            return False
        return True
