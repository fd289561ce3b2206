"""
SQLAlchemy declarative base and common mixins.

Dependencies: sqlalchemy
System role: Foundation for the documents and document_chunks tables
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base; every table model registers its metadata here."""


class UUIDMixin:
    """
    UUID v4 primary key.

    Uses the generic Uuid type: native UUID on PostgreSQL, CHAR(32) on SQLite.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """
    created_at / updated_at columns in UTC.

    updated_at is refreshed by ORM flushes and by Core update() statements.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
