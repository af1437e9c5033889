"""SQLAlchemy ORM models for users, projects and documents."""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, JSON, String, Text
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utc_now():
    return datetime.now(timezone.utc)


class UserModel(Base):
    """Users mirrored from verified token claims."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=False)
    username = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    department = Column(String(50), nullable=False)
    role = Column(String(50), nullable=False, default="staff")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now)

    def __repr__(self):
        return f"<UserModel(id={self.id}, username={self.username})>"


class ProjectModel(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    department = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)

    def __repr__(self):
        return f"<ProjectModel(id={self.id}, name={self.name})>"


class DocumentModel(Base):
    """Document metadata plus persisted AI intelligence."""
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_department_status", "department", "processing_status"),
        Index("ix_documents_created_at_id", "created_at", "id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(255), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    mime_type = Column(String(100), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_hash = Column(String(64), nullable=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    department = Column(String(50), nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    urgency_level = Column(String(20), nullable=False, default="routine")
    processing_status = Column(String(20), nullable=False, default="pending")

    ai_classification = Column(String(100), nullable=True, index=True)
    classification_confidence = Column(Float, nullable=True)
    ai_summary = Column(Text, nullable=True)
    summary_confidence = Column(Float, nullable=True)
    ai_keywords = Column(JSON, nullable=False, default=list)
    extracted_entities = Column(JSON, nullable=False, default=dict)
    compliance_flags = Column(JSON, nullable=False, default=list)
    language = Column(String(20), nullable=True)
    processing_error = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now)
    processing_started_at = Column(DateTime(timezone=True), nullable=True)
    processing_completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<DocumentModel(id={self.id}, original_filename={self.original_filename})>"


# PostgreSQL only; created after metadata.create_all
SUMMARY_FULLTEXT_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS ix_documents_ai_summary_fts ON documents "
    "USING gin (to_tsvector('english', coalesce(ai_summary, '')))"
)
