"""Database table definitions for documents and their immutable versions"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from mdcompare.core.models import TextSnapshot


class VersionStatus(str, Enum):
    """Publication state of a version; at most one version per document is production"""
    draft = "draft"
    production = "production"
    archived = "archived"


class Document(SQLModel, table=True):
    """A markdown document; content lives in its versions"""
    __tablename__ = "documents"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(..., nullable=False)
    slug: str = Field(..., index=True, unique=True, nullable=False)
    current_version_id: Optional[UUID] = Field(default=None, nullable=True)
    production_version_id: Optional[UUID] = Field(default=None, nullable=True)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class DocumentVersion(SQLModel, table=True):
    """Immutable snapshot of a Document's markdown."""
    __tablename__ = "document_versions"
    __table_args__ = (UniqueConstraint("document_id", "version_number", name="uq_docver_doc_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    document_id: UUID = Field(..., foreign_key="documents.id", index=True, nullable=False)
    version_number: int = Field(..., nullable=False, description="Monotonically increasing per-document version number")
    content_markdown: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    change_summary: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    status: VersionStatus = Field(default=VersionStatus.draft, nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))

    def to_snapshot(self) -> TextSnapshot:
        return TextSnapshot(
            id=str(self.id),
            version_number=self.version_number,
            content=self.content_markdown,
            created_at=self.created_at,
            change_summary=self.change_summary,
        )
