"""
Value Objects - Immutable objects that represent domain concepts.
These have no identity and are compared by value.
"""
from enum import Enum
from typing import NewType, Optional

# Value objects for type safety and domain clarity
FileChecksum = NewType("FileChecksum", str)
FilePath = NewType("FilePath", str)


class Department(str, Enum):
    """Closed set of metro departments a document can belong to."""
    METRO_ENGINEERING = "METRO_ENGINEERING"
    ENGINEERING = "ENGINEERING"
    TRACK_SYSTEMS = "TRACK_SYSTEMS"
    ELECTRICAL = "ELECTRICAL"
    ROLLING_STOCK = "ROLLING_STOCK"
    CIVIL = "CIVIL"
    SAFETY = "SAFETY"
    ADMINISTRATION = "ADMINISTRATION"
    PLANNING = "PLANNING"
    FINANCE = "FINANCE"
    HR = "HR"
    LEGAL = "LEGAL"
    MAINTENANCE = "MAINTENANCE"
    OPERATIONS = "OPERATIONS"
    PROCUREMENT = "PROCUREMENT"
    IT = "IT"
    SECURITY = "SECURITY"
    QUALITY_ASSURANCE = "QUALITY_ASSURANCE"
    MANAGEMENT = "MANAGEMENT"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Department"]:
        """Case-insensitive lookup; returns None for unknown or empty values."""
        if not value or not value.strip():
            return None
        normalized = value.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return None

    @property
    def directory_name(self) -> str:
        return self.value.lower()


class UrgencyLevel(str, Enum):
    ROUTINE = "routine"
    PRIORITY = "priority"
    URGENT = "urgent"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UrgencyLevel"]:
        if value is None or not value.strip():
            return cls.ROUTINE
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class ProcessingStatus(str, Enum):
    """
    Lifecycle of a document's AI enrichment.

    pending -> processing -> completed | failed. A manual reprocess moves a
    terminal record back to processing; nothing ever returns to pending.
    """
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def can_transition_to(self, target: "ProcessingStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingStatus.COMPLETED, ProcessingStatus.FAILED)


_ALLOWED_TRANSITIONS = {
    ProcessingStatus.PENDING: {ProcessingStatus.PROCESSING},
    ProcessingStatus.PROCESSING: {ProcessingStatus.COMPLETED, ProcessingStatus.FAILED},
    ProcessingStatus.COMPLETED: {ProcessingStatus.PROCESSING},
    ProcessingStatus.FAILED: {ProcessingStatus.PROCESSING},
}


class Language(str, Enum):
    ENGLISH = "english"
    MALAYALAM = "malayalam"
    MIXED = "mixed"
