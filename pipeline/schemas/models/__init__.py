"""Case registry schemas — SQLAlchemy ORM models and Pydantic validation schemas."""

from models.base import Base, TimestampMixin
from models.cpf import Cpf, CpfCreateSchema, CpfSchema
from models.processo import CaseRecord, PartySchema, Processo, ProcessoSchema
from models.payout_request import (
    BankDetailsSchema,
    PayoutRequest,
    PayoutRequestCreateSchema,
    PayoutRequestSchema,
)
from models.search_group import SearchGroup, SearchGroupCreateSchema, SearchGroupSchema
from models.system_setting import SystemSetting, SystemSettingSchema

__all__ = [
    "Base",
    "TimestampMixin",
    "Cpf",
    "CpfSchema",
    "CpfCreateSchema",
    "Processo",
    "ProcessoSchema",
    "CaseRecord",
    "PartySchema",
    "PayoutRequest",
    "PayoutRequestSchema",
    "PayoutRequestCreateSchema",
    "BankDetailsSchema",
    "SearchGroup",
    "SearchGroupSchema",
    "SearchGroupCreateSchema",
    "SystemSetting",
    "SystemSettingSchema",
]
