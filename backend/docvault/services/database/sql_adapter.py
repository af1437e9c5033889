"""
SQLAlchemy async adapter implementing DatabaseInterface.

Works with SQLite (aiosqlite) out of the box and with PostgreSQL (asyncpg),
where keyword search also uses the full-text index over ai_summary.
"""
import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import String, cast, delete, func, literal_column, or_, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .base import DatabaseInterface
from .models import Base, DocumentModel, ProjectModel, UserModel, SUMMARY_FULLTEXT_INDEX_DDL
from ...api.exceptions import StoreUnavailableError
from ...domain.entities import Document, DocumentFilters, Project, User, empty_entities
from ...core.logging_config import get_logger

logger = get_logger(__name__)

_DOCUMENT_COLUMNS = {column.name for column in DocumentModel.__table__.columns}


def _json_serializer(value: Any) -> str:
    # Keep Malayalam keywords searchable as text
    return json.dumps(value, ensure_ascii=False)


class SQLAdapter(DatabaseInterface):
    """Async relational store for document records."""

    def __init__(self, database_url: str, echo: bool = False):
        """
        Initialize the adapter.

        Args:
            database_url: SQLAlchemy URL (e.g. sqlite+aiosqlite:///./data/docvault.db)
            echo: Log emitted SQL
        """
        self.database_url = database_url
        self.engine = create_async_engine(
            database_url, echo=echo, json_serializer=_json_serializer
        )
        self.async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def _session(self):
        try:
            async with self.async_session() as session:
                yield session
        except (OperationalError, InterfaceError, OSError) as e:
            logger.error(f"Database unavailable: {e}")
            raise StoreUnavailableError("Document store is unavailable") from e

    async def initialize(self):
        """Create tables and indexes."""
        url = make_url(self.database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                if self.dialect == "postgresql":
                    await conn.execute(text(SUMMARY_FULLTEXT_INDEX_DDL))
        except (OperationalError, InterfaceError, OSError) as e:
            raise StoreUnavailableError(f"Could not initialize document store: {e}") from e
        logger.info(f"✅ SQL document store initialized ({self.dialect})")

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (OperationalError, InterfaceError, OSError) as e:
            raise StoreUnavailableError("Document store is unavailable") from e
        return True

    async def close(self):
        await self.engine.dispose()

    # Document operations
    async def create_document(self, doc_data: Dict[str, Any]) -> Document:
        values = {k: v for k, v in doc_data.items() if k in _DOCUMENT_COLUMNS and k != "id"}
        async with self._session() as session:
            model = DocumentModel(**values)
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._to_document(model)

    async def get_document(self, doc_id: int) -> Optional[Document]:
        async with self._session() as session:
            model = await session.get(DocumentModel, doc_id)
            return self._to_document(model) if model else None

    async def update_document(self, doc_id: int, updates: Dict[str, Any]) -> Optional[Document]:
        async with self._session() as session:
            model = await session.get(DocumentModel, doc_id)
            if model is None:
                return None

            for key, value in updates.items():
                if key in _DOCUMENT_COLUMNS and key != "id":
                    setattr(model, key, value)
            model.updated_at = datetime.now(timezone.utc)

            await session.commit()
            await session.refresh(model)
            return self._to_document(model)

    async def delete_document(self, doc_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(
                delete(DocumentModel).where(DocumentModel.id == doc_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def list_documents(
        self, filters: DocumentFilters, page: int, page_size: int
    ) -> Tuple[List[Document], int]:
        conditions = self._filter_conditions(filters)
        async with self._session() as session:
            count_query = select(func.count()).select_from(DocumentModel).where(*conditions)
            total = (await session.execute(count_query)).scalar_one()

            query = (
                select(DocumentModel)
                .where(*conditions)
                .order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            result = await session.execute(query)
            return [self._to_document(m) for m in result.scalars().all()], total

    async def search_documents(
        self, query: str, filters: DocumentFilters, limit: int
    ) -> List[Document]:
        tokens = query.lower().split()
        if not tokens:
            return []

        keyword_text = cast(DocumentModel.ai_keywords, String)
        predicates = []
        for token in tokens:
            predicates.append(DocumentModel.original_filename.icontains(token, autoescape=True))
            predicates.append(DocumentModel.ai_summary.icontains(token, autoescape=True))
            predicates.append(keyword_text.icontains(token, autoescape=True))

        if self.dialect == "postgresql":
            language = literal_column("'english'")
            predicates.append(
                func.to_tsvector(language, func.coalesce(DocumentModel.ai_summary, ""))
                .op("@@")(func.plainto_tsquery(language, query))
            )

        statement = (
            select(DocumentModel)
            .where(or_(*predicates), *self._filter_conditions(filters))
            .order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
            .limit(limit)
        )
        async with self._session() as session:
            result = await session.execute(statement)
            return [self._to_document(m) for m in result.scalars().all()]

    async def find_document_by_checksum(self, checksum: str) -> Optional[Document]:
        async with self._session() as session:
            result = await session.execute(
                select(DocumentModel)
                .where(DocumentModel.file_hash == checksum)
                .order_by(DocumentModel.id)
                .limit(1)
            )
            model = result.scalar_one_or_none()
            return self._to_document(model) if model else None

    # Users and projects
    async def upsert_user(self, user: User) -> None:
        try:
            await self._write_user(user)
        except IntegrityError:
            # A concurrent request inserted the same user between our read and insert
            logger.debug(f"User {user.id} inserted concurrently, retrying as update")
            await self._write_user(user)

    async def _write_user(self, user: User) -> None:
        async with self._session() as session:
            model = await session.get(UserModel, user.id)
            if model is None:
                session.add(UserModel(
                    id=user.id,
                    username=user.username,
                    email=user.email,
                    department=user.department,
                    role=user.role,
                    is_active=user.is_active,
                ))
            else:
                model.username = user.username
                model.department = user.department
                model.role = user.role
                if user.email:
                    model.email = user.email
            await session.commit()

    async def get_user(self, user_id: int) -> Optional[User]:
        async with self._session() as session:
            model = await session.get(UserModel, user_id)
            if model is None:
                return None
            return User(
                id=model.id,
                username=model.username,
                department=model.department,
                role=model.role,
                email=model.email,
                is_active=model.is_active,
            )

    async def create_project(self, name: str, department: Optional[str] = None,
                             description: Optional[str] = None) -> Project:
        async with self._session() as session:
            model = ProjectModel(name=name, department=department, description=description)
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return Project(id=model.id, name=model.name, department=model.department,
                           description=model.description)

    async def get_project(self, project_id: int) -> Optional[Project]:
        async with self._session() as session:
            model = await session.get(ProjectModel, project_id)
            if model is None:
                return None
            return Project(id=model.id, name=model.name, department=model.department,
                           description=model.description)

    @staticmethod
    def _filter_conditions(filters: DocumentFilters) -> list:
        conditions = []
        if filters.department:
            conditions.append(DocumentModel.department == filters.department)
        if filters.project_id is not None:
            conditions.append(DocumentModel.project_id == filters.project_id)
        if filters.urgency_level:
            conditions.append(DocumentModel.urgency_level == filters.urgency_level)
        if filters.processing_status:
            conditions.append(DocumentModel.processing_status == filters.processing_status)
        if filters.document_type:
            conditions.append(DocumentModel.ai_classification == filters.document_type)
        return conditions

    @staticmethod
    def _to_document(model: DocumentModel) -> Document:
        return Document(
            id=model.id,
            filename=model.filename,
            original_filename=model.original_filename,
            file_size=model.file_size,
            mime_type=model.mime_type,
            file_path=model.file_path,
            department=model.department,
            uploaded_by=model.uploaded_by,
            project_id=model.project_id,
            file_hash=model.file_hash,
            urgency_level=model.urgency_level,
            processing_status=model.processing_status,
            ai_classification=model.ai_classification,
            classification_confidence=model.classification_confidence,
            ai_summary=model.ai_summary,
            summary_confidence=model.summary_confidence,
            ai_keywords=list(model.ai_keywords or []),
            extracted_entities=dict(model.extracted_entities or empty_entities()),
            compliance_flags=list(model.compliance_flags or []),
            language=model.language,
            processing_error=model.processing_error,
            created_at=model.created_at,
            updated_at=model.updated_at,
            processing_started_at=model.processing_started_at,
            processing_completed_at=model.processing_completed_at,
        )
