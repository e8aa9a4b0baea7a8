"""PayoutRequest (disbursement request for a won case) — model and schemas."""

from __future__ import annotations

import uuid

from pydantic import Field
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, BaseEntitySchema, BaseSchema, TimestampMixin, UUIDPrimaryKeyMixin

DEFAULT_PAYOUT_STATUS = "Novo"


class PayoutRequest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "payout_requests"

    process_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("processes.id", ondelete="CASCADE"), nullable=False
    )
    cpf: Mapped[str] = mapped_column(String(14), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    bank_name: Mapped[str] = mapped_column(String(120), nullable=False)
    agency: Mapped[str] = mapped_column(String(20), nullable=False)
    account: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=DEFAULT_PAYOUT_STATUS)

    processo = relationship("Processo", back_populates="payout_requests")


class BankDetailsSchema(BaseSchema):
    bank_name: str = Field(min_length=1)
    agency: str = Field(min_length=1)
    account: str = Field(min_length=1)


class PayoutRequestCreateSchema(BaseSchema):
    """Citizen-submitted payout request; the CPF is taken from the case."""

    process_id: uuid.UUID
    phone: str = Field(min_length=1)
    bank_details: BankDetailsSchema


class PayoutRequestSchema(BaseEntitySchema):
    process_id: uuid.UUID
    cpf: str
    phone: str
    bank_name: str
    agency: str
    account: str
    status: str = DEFAULT_PAYOUT_STATUS
