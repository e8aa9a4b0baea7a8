"""Processo (registered case) — SQLAlchemy model and Pydantic schemas."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from pydantic import Field
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, BaseEntitySchema, BaseSchema, TimestampMixin, UUIDPrimaryKeyMixin

CASE_NUMBER_PATTERN = r"^\d{7}-\d{2}\.\d{4}\.\d{1}\.\d{2}\.\d{4}$"
CPF_PATTERN = r"^\d{3}\.\d{3}\.\d{3}-\d{2}$"

# Fallbacks applied by the assembler when the pasted text carries no value.
NOT_INFORMED = "Não informado"
DEFAULT_COURT = "Justiça dos Estados e do Distrito Federal e Territórios"
DEFAULT_ACTIVE_ROLE = "Requerente"
DEFAULT_PASSIVE_ROLE = "Requerido"
DEFAULT_CLAIM_VALUE = "0"
DEFAULT_STATUS = "Ativo"
WON_STATUS = "Ganho"


class Processo(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "processes"

    cpf_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("cpfs.id"), nullable=False)
    search_group_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("search_groups.id", ondelete="SET NULL")
    )
    process_number: Mapped[str] = mapped_column(String(25), nullable=False, index=True)
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    start_year: Mapped[int] = mapped_column(Integer, nullable=False)
    nature: Mapped[str] = mapped_column(Text, nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    judge: Mapped[str] = mapped_column(Text, nullable=False)
    court: Mapped[str] = mapped_column(Text, nullable=False)
    active_pole_main: Mapped[str] = mapped_column(Text, nullable=False)
    active_pole_role: Mapped[str] = mapped_column(String(50), nullable=False)
    active_pole_lawyers: Mapped[list] = mapped_column(nullable=False, default=list)
    passive_pole_main: Mapped[str] = mapped_column(Text, nullable=False)
    passive_pole_role: Mapped[str] = mapped_column(String(50), nullable=False)
    passive_pole_lawyers: Mapped[list] = mapped_column(nullable=False, default=list)
    other_parties: Mapped[list] = mapped_column(nullable=False, default=list)
    filing_date: Mapped[Optional[str]] = mapped_column(String(50))
    last_event: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=DEFAULT_STATUS)

    # Relationships
    cpf = relationship("Cpf", back_populates="processos")
    search_group = relationship("SearchGroup", back_populates="processos")
    payout_requests = relationship(
        "PayoutRequest", back_populates="processo", cascade="all, delete-orphan"
    )


class PartySchema(BaseSchema):
    """One side (pole) of a case: main party, its role and its lawyers."""

    main_name: str = NOT_INFORMED
    role: str
    lawyers: list[str] = []


class CaseRecord(BaseSchema):
    """Fully-defaulted case payload handed to the storage boundary."""

    case_number: str = Field(pattern=CASE_NUMBER_PATTERN)
    taxpayer_id: str = Field(pattern=CPF_PATTERN)
    filing_year: int = Field(ge=1000, le=9999)
    nature_of_action: str = NOT_INFORMED
    subject_matter: str = NOT_INFORMED
    court: str = DEFAULT_COURT
    judge: str = NOT_INFORMED
    claim_value: str = DEFAULT_CLAIM_VALUE
    filing_date: str = ""
    last_event_description: str = ""
    active_party: PartySchema = Field(
        default_factory=lambda: PartySchema(role=DEFAULT_ACTIVE_ROLE)
    )
    passive_party: PartySchema = Field(
        default_factory=lambda: PartySchema(role=DEFAULT_PASSIVE_ROLE)
    )
    other_parties: list[str] = []


class ProcessoSchema(BaseEntitySchema):
    cpf_id: uuid.UUID
    search_group_id: Optional[uuid.UUID] = None
    process_number: str
    value: Decimal
    start_year: int
    nature: str
    subject: str
    judge: str
    court: str
    active_pole_main: str
    active_pole_role: str
    active_pole_lawyers: list[str] = []
    passive_pole_main: str
    passive_pole_role: str
    passive_pole_lawyers: list[str] = []
    other_parties: list[str] = []
    filing_date: Optional[str] = None
    last_event: Optional[str] = None
    status: str = DEFAULT_STATUS
