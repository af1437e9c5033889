"""
Domain layer - Core business logic and entities.
Independent of infrastructure and frameworks.
"""
from .entities import Document, DocumentFilters, User, Project, InvalidStatusTransition
from .value_objects import Department, UrgencyLevel, ProcessingStatus, Language

__all__ = [
    "Document",
    "DocumentFilters",
    "User",
    "Project",
    "InvalidStatusTransition",
    "Department",
    "UrgencyLevel",
    "ProcessingStatus",
    "Language",
]
