"""
Abstract base class for database adapters.
All database implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ...domain.entities import Document, DocumentFilters, Project, User


class DatabaseInterface(ABC):
    """
    Abstract interface for document record storage.

    Lookups of missing records return None (or False) rather than raising;
    infrastructure faults surface as StoreUnavailableError.
    """

    # Document operations
    @abstractmethod
    async def create_document(self, doc_data: Dict[str, Any]) -> Document:
        """Create a new document record; the store assigns the id."""
        pass

    @abstractmethod
    async def get_document(self, doc_id: int) -> Optional[Document]:
        pass

    @abstractmethod
    async def update_document(self, doc_id: int, updates: Dict[str, Any]) -> Optional[Document]:
        """Apply updates to one record atomically; None if it does not exist."""
        pass

    @abstractmethod
    async def delete_document(self, doc_id: int) -> bool:
        pass

    @abstractmethod
    async def list_documents(
        self, filters: DocumentFilters, page: int, page_size: int
    ) -> Tuple[List[Document], int]:
        """
        Newest-first page of documents matching the filters.

        Returns:
            (documents on the page, total matching documents)
        """
        pass

    @abstractmethod
    async def search_documents(
        self, query: str, filters: DocumentFilters, limit: int
    ) -> List[Document]:
        """
        Candidate documents for a keyword query, newest first.

        A document matches when any query token occurs (case-insensitively)
        in its original filename, AI summary or AI keywords.
        """
        pass

    @abstractmethod
    async def find_document_by_checksum(self, checksum: str) -> Optional[Document]:
        pass

    # Users and projects
    @abstractmethod
    async def upsert_user(self, user: User) -> None:
        pass

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def create_project(self, name: str, department: Optional[str] = None,
                             description: Optional[str] = None) -> Project:
        pass

    @abstractmethod
    async def get_project(self, project_id: int) -> Optional[Project]:
        pass

    # Lifecycle
    @abstractmethod
    async def initialize(self):
        """Initialize database (create tables, indexes, etc.)."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Raise StoreUnavailableError if the store cannot be reached."""
        pass

    @abstractmethod
    async def close(self):
        pass
