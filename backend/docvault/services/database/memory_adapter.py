"""
In-memory adapter implementing DatabaseInterface.
Perfect for demos and testing - stores all data in Python dicts.
Data is lost on restart.
"""
import copy
from dataclasses import fields
from itertools import count
from typing import Any, Dict, List, Optional, Tuple

from .base import DatabaseInterface
from ...domain.entities import Document, DocumentFilters, Project, User, utc_now

_DOCUMENT_FIELDS = {f.name for f in fields(Document)}


class MemoryAdapter(DatabaseInterface):
    """
    In-memory database adapter.
    Every read and write deep-copies so callers never share state with the store.
    """

    def __init__(self):
        self._documents: Dict[int, Document] = {}
        self._users: Dict[int, User] = {}
        self._projects: Dict[int, Project] = {}
        self._document_ids = count(1)
        self._project_ids = count(1)

    async def initialize(self):
        """Clear any existing data (useful for testing)."""
        self._documents.clear()
        self._users.clear()
        self._projects.clear()
        self._document_ids = count(1)
        self._project_ids = count(1)

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass

    # Document operations
    async def create_document(self, doc_data: Dict[str, Any]) -> Document:
        values = {k: copy.deepcopy(v) for k, v in doc_data.items() if k in _DOCUMENT_FIELDS and k != "id"}
        now = utc_now()
        values.setdefault("created_at", now)
        values.setdefault("updated_at", now)

        document = Document(id=next(self._document_ids), **values)
        self._documents[document.id] = document
        return copy.deepcopy(document)

    async def get_document(self, doc_id: int) -> Optional[Document]:
        document = self._documents.get(doc_id)
        return copy.deepcopy(document) if document else None

    async def update_document(self, doc_id: int, updates: Dict[str, Any]) -> Optional[Document]:
        document = self._documents.get(doc_id)
        if document is None:
            return None

        for key, value in updates.items():
            if key in _DOCUMENT_FIELDS and key != "id":
                setattr(document, key, copy.deepcopy(value))
        document.updated_at = utc_now()
        return copy.deepcopy(document)

    async def delete_document(self, doc_id: int) -> bool:
        return self._documents.pop(doc_id, None) is not None

    def _newest_first(self, documents: List[Document]) -> List[Document]:
        return sorted(documents, key=lambda d: (d.created_at, d.id), reverse=True)

    async def list_documents(
        self, filters: DocumentFilters, page: int, page_size: int
    ) -> Tuple[List[Document], int]:
        matching = self._newest_first([d for d in self._documents.values() if filters.matches(d)])
        start = (page - 1) * page_size
        return copy.deepcopy(matching[start:start + page_size]), len(matching)

    async def search_documents(
        self, query: str, filters: DocumentFilters, limit: int
    ) -> List[Document]:
        tokens = query.lower().split()
        if not tokens:
            return []

        def _matches(document: Document) -> bool:
            haystacks = [
                (document.original_filename or "").lower(),
                (document.ai_summary or "").lower(),
            ] + [str(k).lower() for k in document.ai_keywords or []]
            return any(token in haystack for token in tokens for haystack in haystacks)

        matching = [d for d in self._documents.values() if filters.matches(d) and _matches(d)]
        return copy.deepcopy(self._newest_first(matching)[:limit])

    async def find_document_by_checksum(self, checksum: str) -> Optional[Document]:
        for doc_id in sorted(self._documents):
            if self._documents[doc_id].file_hash == checksum:
                return copy.deepcopy(self._documents[doc_id])
        return None

    # Users and projects
    async def upsert_user(self, user: User) -> None:
        existing = self._users.get(user.id)
        if existing is not None:
            # The active flag is owned by the store, not by token claims
            user = User(
                id=user.id,
                username=user.username,
                department=user.department,
                role=user.role,
                email=user.email or existing.email,
                is_active=existing.is_active,
            )
        self._users[user.id] = copy.deepcopy(user)

    async def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def create_project(self, name: str, department: Optional[str] = None,
                             description: Optional[str] = None) -> Project:
        project = Project(id=next(self._project_ids), name=name, department=department,
                          description=description)
        self._projects[project.id] = project
        return copy.deepcopy(project)

    async def get_project(self, project_id: int) -> Optional[Project]:
        project = self._projects.get(project_id)
        return copy.deepcopy(project) if project else None
