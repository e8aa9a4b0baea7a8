"""Declarative base, shared column mixins and the Pydantic base schemas.

The registry runs on SQLite locally and on PostgreSQL in production, so the
shared columns only use portable types: ``Uuid`` (native on PostgreSQL,
``CHAR(32)`` on SQLite) and timezone-aware timestamps stamped in Python.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from sqlalchemy import JSON, DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for the case registry tables."""

    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
        list: JSON,
    }


class TimestampMixin:
    """created_at / updated_at, stamped by the application.

    ``server_default`` covers rows inserted outside the ORM; the Python-side
    default keeps sub-second ordering on SQLite, whose ``CURRENT_TIMESTAMP``
    only has one-second resolution.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


class UUIDPrimaryKeyMixin:
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


class BaseSchema(BaseModel):
    """Pydantic base: reads ORM rows and trims pasted/typed strings."""

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


class BaseEntitySchema(BaseSchema):
    """Read schema for a persisted row (id + timestamps)."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
