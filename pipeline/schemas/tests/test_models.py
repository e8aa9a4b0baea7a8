"""Tests for SQLAlchemy ORM models and Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session

from models import (
    Cpf,
    CpfCreateSchema,
    PayoutRequest,
    PayoutRequestCreateSchema,
    PayoutRequestSchema,
    Processo,
    ProcessoSchema,
    SearchGroupCreateSchema,
    SystemSetting,
    SystemSettingSchema,
)
from models.base import Base
from models.processo import CaseRecord, PartySchema


@pytest.fixture
def engine():
    """In-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


def _processo(cpf: Cpf, **overrides) -> Processo:
    data = {
        "cpf": cpf,
        "process_number": "4010991-84.2025.8.26.0100",
        "value": Decimal("10000.00"),
        "start_year": 2025,
        "nature": "Indenização por Dano Moral",
        "subject": "Dano moral",
        "judge": "Não informado",
        "court": "Justiça dos Estados e do Distrito Federal e Territórios",
        "active_pole_main": "ROGER DIAS FERNANDES",
        "active_pole_role": "Requerente",
        "passive_pole_main": "FACEBOOK SERVICOS ONLINE DO BRASIL LTDA.",
        "passive_pole_role": "Requerido",
    }
    data.update(overrides)
    return Processo(**data)


class TestTableCreation:
    """Verify all tables are registered in metadata."""

    def test_all_tables_in_metadata(self):
        table_names = set(Base.metadata.tables.keys())

        for table in ("cpfs", "processes", "payout_requests", "search_groups", "system_settings"):
            assert table in table_names, f"Missing table: {table}"

    def test_tables_create_in_sqlite(self, engine):
        tables = inspect(engine).get_table_names()

        assert "processes" in tables
        assert "payout_requests" in tables


class TestCaseRecord:
    """The assembled payload validates its identifiers."""

    def test_minimal_record_gets_defaults(self):
        record = CaseRecord(
            case_number="4010991-84.2025.8.26.0100",
            taxpayer_id="095.076.756-55",
            filing_year=2025,
        )

        assert record.court == "Justiça dos Estados e do Distrito Federal e Territórios"
        assert record.claim_value == "0"
        assert record.active_party.role == "Requerente"
        assert record.passive_party.role == "Requerido"
        assert record.passive_party.main_name == "Não informado"

    def test_case_number_pattern(self):
        with pytest.raises(ValidationError):
            CaseRecord(case_number="4010991-84.2025", taxpayer_id="095.076.756-55", filing_year=2025)

    def test_taxpayer_id_must_be_formatted(self):
        with pytest.raises(ValidationError):
            CaseRecord(
                case_number="4010991-84.2025.8.26.0100",
                taxpayer_id="09507675655",
                filing_year=2025,
            )

    def test_filing_year_has_four_digits(self):
        with pytest.raises(ValidationError):
            CaseRecord(
                case_number="4010991-84.2025.8.26.0100",
                taxpayer_id="095.076.756-55",
                filing_year=202,
            )

    def test_whitespace_is_stripped(self):
        party = PartySchema(main_name="  MARIA  ", role=" Autor ")

        assert party.main_name == "MARIA"
        assert party.role == "Autor"


class TestPydanticSchemas:
    def test_cpf_create_schema(self):
        assert CpfCreateSchema(cpf="095.076.756-55").cpf == "095.076.756-55"

    def test_cpf_create_schema_rejects_raw_digits(self):
        with pytest.raises(ValidationError):
            CpfCreateSchema(cpf="09507675655")

    def test_payout_request_requires_bank_details(self):
        with pytest.raises(ValidationError):
            PayoutRequestCreateSchema(process_id=uuid.uuid4(), phone="48999990000")

    def test_payout_request_rejects_blank_bank_fields(self):
        with pytest.raises(ValidationError):
            PayoutRequestCreateSchema(
                process_id=uuid.uuid4(),
                phone="48999990000",
                bank_details={"bank_name": "", "agency": "1", "account": "2"},
            )

    def test_search_group_requires_id(self):
        with pytest.raises(ValidationError):
            SearchGroupCreateSchema(search_id="", name="Lote")

    def test_setting_schema(self):
        now = datetime.now(tz=timezone.utc)
        schema = SystemSettingSchema(
            id=uuid.uuid4(), key="k", value="v", created_at=now, updated_at=now
        )

        assert schema.description is None


class TestFromAttributes:
    """Verify Pydantic schemas can load from ORM objects."""

    def test_from_orm_processo(self, session):
        cpf = Cpf(cpf="095.076.756-55")
        processo = _processo(cpf, passive_pole_lawyers=["ANA COSTA"])
        session.add(processo)
        session.flush()

        schema = ProcessoSchema.model_validate(processo)

        assert schema.process_number == "4010991-84.2025.8.26.0100"
        assert schema.cpf_id == cpf.id
        assert schema.value == Decimal("10000.00")
        assert schema.passive_pole_lawyers == ["ANA COSTA"]
        assert schema.status == "Ativo"

    def test_from_orm_payout_request(self, session):
        processo = _processo(Cpf(cpf="095.076.756-55"))
        payout = PayoutRequest(
            processo=processo,
            cpf="095.076.756-55",
            phone="48999990000",
            bank_name="Banco do Brasil",
            agency="1234",
            account="56789-0",
        )
        session.add(payout)
        session.flush()

        schema = PayoutRequestSchema.model_validate(payout)

        assert schema.process_id == processo.id
        assert schema.status == "Novo"

    def test_from_orm_setting(self, session):
        setting = SystemSetting(key="whatsapp_message_template", value="Olá")
        session.add(setting)
        session.flush()

        assert SystemSettingSchema.model_validate(setting).value == "Olá"


class TestRelationships:
    def test_cpf_collects_processes(self, session):
        cpf = Cpf(cpf="095.076.756-55")
        session.add_all(
            [
                _processo(cpf),
                _processo(cpf, process_number="1048585-23.2024.8.26.0100"),
            ]
        )
        session.flush()

        assert len(cpf.processos) == 2

    def test_deleting_process_deletes_payouts(self, session):
        processo = _processo(Cpf(cpf="095.076.756-55"))
        processo.payout_requests.append(
            PayoutRequest(
                cpf="095.076.756-55",
                phone="48999990000",
                bank_name="Banco do Brasil",
                agency="1234",
                account="56789-0",
            )
        )
        session.add(processo)
        session.flush()

        session.delete(processo)
        session.flush()

        assert session.query(PayoutRequest).count() == 0
