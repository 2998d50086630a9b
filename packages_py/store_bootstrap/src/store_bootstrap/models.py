"""
SQLAlchemy 2.0 schema of the vocabulary store.

Uses Mapped[] and mapped_column() with portable column types so the same
schema loads on PostgreSQL and SQLite.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, String, Text, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for store tables."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Rows moved to the trash keep a deletion timestamp."""

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class WordRecord(Base, TimestampMixin, SoftDeleteMixin):
    """
    One saved vocabulary entry.

    The autofill_* columns record how the entry was filled in: the autofill
    status, which lookup tier answered, its confidence and when.
    """

    __tablename__ = "words"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    jp_text: Mapped[str] = mapped_column(String(255), index=True)
    reading: Mapped[Optional[str]] = mapped_column(String(255))
    meaning: Mapped[str] = mapped_column(Text, default="")
    source_type: Mapped[Optional[str]] = mapped_column(String(32))
    source_text: Mapped[Optional[str]] = mapped_column(Text)
    source_link: Mapped[Optional[str]] = mapped_column(String(500))
    is_favorite: Mapped[bool] = mapped_column(default=False)

    autofill_status: Mapped[str] = mapped_column(String(16), default="none")
    autofill_provider: Mapped[Optional[str]] = mapped_column(String(32))
    autofill_confidence: Mapped[Optional[float]] = mapped_column(Float)
    autofill_fetched_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"WordRecord(id={self.id!s}, jp_text={self.jp_text!r})"
