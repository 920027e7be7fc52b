"""Database table definitions for the page catalog and its version history"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class PageRecord(SQLModel, table=True):
    """Last synced state of one content file, keyed by its path in the content tree"""
    __tablename__ = "pages"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    output_path: str = Field(..., sa_column=Column(Text, nullable=False))
    kind: str = Field(..., sa_column=Column(String(8), nullable=False))
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
    draft: bool = Field(default=False, nullable=False)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    frontmatter: str = Field(..., sa_column=Column(Text, nullable=False))   # canonical YAML
    body: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))


class PageVersion(SQLModel, table=True):
    """Immutable snapshot of a PageRecord at a prior state."""
    __tablename__ = "page_versions"
    __table_args__ = (UniqueConstraint("page_id", "version_num", name="uq_pagever_page_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    page_id: UUID = Field(..., foreign_key="pages.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-page version number")
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    frontmatter: str = Field(..., sa_column=Column(Text, nullable=False))
    body: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
