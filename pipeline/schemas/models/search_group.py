"""SearchGroup (staff tag grouping cases under a shareable id) — model and schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, BaseEntitySchema, BaseSchema, TimestampMixin, UUIDPrimaryKeyMixin


class SearchGroup(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "search_groups"

    search_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    processos = relationship("Processo", back_populates="search_group")


class SearchGroupSchema(BaseEntitySchema):
    search_id: str
    name: str
    description: Optional[str] = None


class SearchGroupCreateSchema(BaseSchema):
    search_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
