"""Cpf (registered taxpayer) — SQLAlchemy model and Pydantic schema."""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, BaseEntitySchema, BaseSchema, TimestampMixin, UUIDPrimaryKeyMixin
from models.processo import CPF_PATTERN


class Cpf(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "cpfs"

    cpf: Mapped[str] = mapped_column(String(14), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255))

    processos = relationship("Processo", back_populates="cpf")


class CpfSchema(BaseEntitySchema):
    cpf: str = Field(pattern=CPF_PATTERN)
    name: Optional[str] = None


class CpfCreateSchema(BaseSchema):
    cpf: str = Field(pattern=CPF_PATTERN)
    name: Optional[str] = None
