"""CaseStore — SQLAlchemy-backed storage boundary for the case registry.

Plain CRUD over the ``cpfs``, ``processes``, ``payout_requests``,
``search_groups`` and ``system_settings`` tables, plus the few business rules
that live next to them (won-case detection, payout eligibility).
"""

from __future__ import annotations

import logging
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable

from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.orm import Session

from models import (
    Base,
    CaseRecord,
    Cpf,
    PayoutRequest,
    PayoutRequestCreateSchema,
    Processo,
    SearchGroup,
    SearchGroupCreateSchema,
    SystemSetting,
)
from models.processo import CASE_NUMBER_PATTERN, DEFAULT_STATUS, WON_STATUS
from pii import is_formatted_cpf, mask_cpf

from intake.notifications import DEFAULT_MESSAGE_TEMPLATE

logger = logging.getLogger(__name__)

MESSAGE_TEMPLATE_KEY = "whatsapp_message_template"
_MESSAGE_TEMPLATE_DESCRIPTION = "Template personalizado para mensagens do WhatsApp"

_CASE_NUMBER_RE = re.compile(CASE_NUMBER_PATTERN)

_WON_SUFFIX = " - julgada procedente em favor do requerente"
_LOST_SUFFIX = " - julgada improcedente"
# Whole-word match, unlike a plain substring test: "improcedente" contains
# "procedente" but is a loss, so it must never read as a win.
_WON_MARKER_RE = re.compile(r"\b(procedente|ganho)\b", re.IGNORECASE)
_WON_CLAUSE_RES = (
    re.compile(r"\s*-?\s*julgada procedente.*$", re.IGNORECASE),
    re.compile(r"\s*-?\s*\bprocedente.*$", re.IGNORECASE),
    re.compile(r"\s*-?\s*\bganho.*$", re.IGNORECASE),
)
_LOST_CLAUSE_RE = re.compile(r"\s*-?\s*(julgada\s+)?improcedente.*$", re.IGNORECASE)

# Columns staff may edit through update_case().
_EDITABLE_CASE_FIELDS = frozenset(
    {
        "process_number",
        "value",
        "start_year",
        "nature",
        "subject",
        "judge",
        "court",
        "active_pole_main",
        "active_pole_role",
        "active_pole_lawyers",
        "passive_pole_main",
        "passive_pole_role",
        "passive_pole_lawyers",
        "other_parties",
        "filing_date",
        "last_event",
        "status",
        "search_group_id",
    }
)

ProgressCallback = Callable[[int, int], None]


# -------------------------------------------------------------------- #
# Errors                                                                #
# -------------------------------------------------------------------- #


class CaseNotFoundError(LookupError):
    """No case with the given id."""


class SearchGroupNotFoundError(LookupError):
    """No search group with the given id."""


class InvalidLookupError(ValueError):
    """A lookup key is not in its canonical form."""


class PayoutNotEligibleError(ValueError):
    """The case has not been decided in the claimant's favour."""


class DuplicatePayoutRequestError(ValueError):
    """A payout request already exists for the case."""


class DuplicateSearchIdError(ValueError):
    """Another search group already uses this search id."""


def is_won_case(processo: Processo) -> bool:
    """A case is won when its subject says so or its status is ``Ganho``."""
    return bool(_WON_MARKER_RE.search(processo.subject or "")) or processo.status == WON_STATUS


def rewrite_subject_for_outcome(subject: str, won: bool) -> str:
    """Append or strip the procedente/improcedente clause on a case subject."""
    if won:
        if _WON_MARKER_RE.search(subject):
            return subject
        return _LOST_CLAUSE_RE.sub("", subject).strip() + _WON_SUFFIX

    stripped = subject
    for clause_re in _WON_CLAUSE_RES:
        stripped = clause_re.sub("", stripped)
    stripped = stripped.strip()
    if "improcedente" not in stripped.lower():
        stripped += _LOST_SUFFIX
    return stripped


class CaseStore:
    """Storage boundary used by the intake flow and the public lookups.

    Methods flush but never commit; the owner of the session decides when a
    unit of work ends. Used as a context manager, the store commits on a clean
    exit and rolls back otherwise.
    """

    def __init__(self, session: Session, engine: Engine | None = None) -> None:
        self._session = session
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str, *, create_schema: bool = True) -> CaseStore:
        """Open a store on its own engine (``sqlite:///...``, ``postgresql+psycopg://...``)."""
        engine = create_engine(database_url)
        if create_schema:
            Base.metadata.create_all(engine)
        logger.info("CaseStore connected to %s", engine.url.render_as_string(hide_password=True))
        return cls(Session(engine), engine=engine)

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()

    def close(self) -> None:
        self._session.close()
        if self._engine is not None:
            self._engine.dispose()

    def __enter__(self) -> CaseStore:
        return self

    def __exit__(self, exc_type: object, *exc: object) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        self.close()

    # ------------------------------------------------------------------
    # CPFs
    # ------------------------------------------------------------------

    def get_cpf_by_number(self, cpf: str) -> Cpf | None:
        return self._session.scalars(select(Cpf).where(Cpf.cpf == cpf)).one_or_none()

    def get_or_create_cpf(self, cpf: str, name: str | None = None) -> Cpf:
        existing = self.get_cpf_by_number(cpf)
        if existing is not None:
            return existing
        row = Cpf(cpf=cpf, name=name or "")
        self._session.add(row)
        self._session.flush()
        logger.info("Registered CPF %s", mask_cpf(cpf))
        return row

    # ------------------------------------------------------------------
    # Cases
    # ------------------------------------------------------------------

    def create_case(self, record: CaseRecord) -> uuid.UUID:
        """Persist one assembled record and return its generated id."""
        cpf_row = self.get_or_create_cpf(record.taxpayer_id)
        processo = Processo(
            cpf_id=cpf_row.id,
            process_number=record.case_number,
            value=_to_decimal(record.claim_value),
            start_year=record.filing_year,
            nature=record.nature_of_action,
            subject=record.subject_matter,
            judge=record.judge,
            court=record.court,
            active_pole_main=record.active_party.main_name,
            active_pole_role=record.active_party.role,
            active_pole_lawyers=list(record.active_party.lawyers),
            passive_pole_main=record.passive_party.main_name,
            passive_pole_role=record.passive_party.role,
            passive_pole_lawyers=list(record.passive_party.lawyers),
            other_parties=list(record.other_parties),
            filing_date=record.filing_date or None,
            last_event=record.last_event_description or None,
            status=DEFAULT_STATUS,
        )
        self._session.add(processo)
        self._session.flush()
        logger.info("Created case %s (id=%s)", record.case_number, processo.id)
        return processo.id

    def create_cases(
        self,
        records: Iterable[CaseRecord],
        progress: ProgressCallback | None = None,
    ) -> list[uuid.UUID]:
        """Create records one after another, reporting ``(done, total)`` in order."""
        records = list(records)
        ids: list[uuid.UUID] = []
        for done, record in enumerate(records, start=1):
            ids.append(self.create_case(record))
            if progress is not None:
                progress(done, len(records))
        logger.info("Batch create complete — %d cases", len(ids))
        return ids

    def get_case(self, case_id: uuid.UUID) -> Processo | None:
        return self._session.get(Processo, case_id)

    def find_cases_by_cpf(self, cpf: str) -> list[Processo]:
        """Cases registered for a CPF given as ``XXX.XXX.XXX-XX``."""
        if not is_formatted_cpf(cpf):
            raise InvalidLookupError("CPF deve estar no formato 000.000.000-00")
        cpf_row = self.get_cpf_by_number(cpf)
        if cpf_row is None:
            return []
        return list(
            self._session.scalars(select(Processo).where(Processo.cpf_id == cpf_row.id))
        )

    def find_case_by_number(self, process_number: str) -> Processo | None:
        if not _CASE_NUMBER_RE.match(process_number):
            raise InvalidLookupError(
                "Número do processo deve estar no formato 0000000-00.0000.0.00.0000"
            )
        return self._session.scalars(
            select(Processo).where(Processo.process_number == process_number)
        ).first()

    def list_cases(self) -> list[Processo]:
        """All cases, newest first."""
        return list(self._session.scalars(select(Processo).order_by(Processo.created_at.desc())))

    def recent_cases(self, limit: int = 5) -> list[Processo]:
        return list(
            self._session.scalars(
                select(Processo).order_by(Processo.created_at.desc()).limit(limit)
            )
        )

    def update_case(self, case_id: uuid.UUID, **fields: Any) -> Processo:
        """Update editable columns; a ``cpf`` value re-links the case to that CPF."""
        processo = self._require_case(case_id)

        cpf = fields.pop("cpf", None)
        unknown = set(fields) - _EDITABLE_CASE_FIELDS
        if unknown:
            raise ValueError(f"Unknown case fields: {sorted(unknown)}")

        if cpf:
            processo.cpf_id = self.get_or_create_cpf(cpf).id

        if "value" in fields:
            fields["value"] = _to_decimal(fields["value"])
        for name, value in fields.items():
            setattr(processo, name, value)

        self._session.flush()
        logger.info("Updated case %s (%s)", processo.process_number, ", ".join(sorted(fields)))
        return processo

    def delete_case(self, case_id: uuid.UUID) -> None:
        processo = self.get_case(case_id)
        if processo is None:
            return
        self._session.delete(processo)
        self._session.flush()
        logger.info("Deleted case %s", processo.process_number)

    def set_case_outcome(self, case_id: uuid.UUID, won: bool) -> Processo:
        """Mark a case as won or lost by rewriting its subject."""
        processo = self._require_case(case_id)
        processo.subject = rewrite_subject_for_outcome(processo.subject or "", won)
        self._session.flush()
        logger.info("Case %s marked as %s", processo.process_number, "won" if won else "lost")
        return processo

    def statistics(self) -> dict[str, int]:
        count = func.count()
        return {
            "total_cpfs": self._session.scalar(select(count).select_from(Cpf)) or 0,
            "total_processes": self._session.scalar(select(count).select_from(Processo)) or 0,
            "active_processes": self._session.scalar(
                select(count).select_from(Processo).where(Processo.status == DEFAULT_STATUS)
            )
            or 0,
        }

    # ------------------------------------------------------------------
    # Payout requests
    # ------------------------------------------------------------------

    def create_payout_request(self, request: PayoutRequestCreateSchema) -> PayoutRequest:
        """Register a payout request for a won case; the CPF comes from the case."""
        processo = self._require_case(request.process_id)
        if not is_won_case(processo):
            raise PayoutNotEligibleError(
                "Processo não procedente - não é possível solicitar recebimento"
            )
        if self.has_payout_request(processo.id):
            raise DuplicatePayoutRequestError(
                "Já existe uma solicitação de recebimento para este processo"
            )

        payout = PayoutRequest(
            process_id=processo.id,
            cpf=processo.cpf.cpf,
            phone=request.phone,
            bank_name=request.bank_details.bank_name,
            agency=request.bank_details.agency,
            account=request.bank_details.account,
        )
        self._session.add(payout)
        self._session.flush()
        logger.info(
            "Payout request %s created for case %s (cpf %s)",
            payout.id,
            processo.process_number,
            mask_cpf(payout.cpf),
        )
        return payout

    def has_payout_request(self, case_id: uuid.UUID) -> bool:
        return (
            self._session.scalars(
                select(PayoutRequest.id).where(PayoutRequest.process_id == case_id)
            ).first()
            is not None
        )

    def list_payout_requests(self) -> list[PayoutRequest]:
        return list(
            self._session.scalars(select(PayoutRequest).order_by(PayoutRequest.created_at))
        )

    def payout_requests_by_cpf(self, cpf: str) -> list[PayoutRequest]:
        return list(self._session.scalars(select(PayoutRequest).where(PayoutRequest.cpf == cpf)))

    def delete_payout_request(self, payout_id: uuid.UUID) -> None:
        payout = self._session.get(PayoutRequest, payout_id)
        if payout is None:
            return
        self._session.delete(payout)
        self._session.flush()
        logger.info("Deleted payout request %s", payout_id)

    # ------------------------------------------------------------------
    # Search groups
    # ------------------------------------------------------------------

    def create_search_group(self, group: SearchGroupCreateSchema) -> SearchGroup:
        if self.get_search_group_by_search_id(group.search_id) is not None:
            raise DuplicateSearchIdError("ID de pesquisa já existe")
        row = SearchGroup(search_id=group.search_id, name=group.name, description=group.description)
        self._session.add(row)
        self._session.flush()
        logger.info("Created search group %s", group.search_id)
        return row

    def get_search_group(self, group_id: uuid.UUID) -> SearchGroup | None:
        return self._session.get(SearchGroup, group_id)

    def get_search_group_by_search_id(self, search_id: str) -> SearchGroup | None:
        return self._session.scalars(
            select(SearchGroup).where(SearchGroup.search_id == search_id)
        ).one_or_none()

    def list_search_groups(self) -> list[SearchGroup]:
        return list(self._session.scalars(select(SearchGroup).order_by(SearchGroup.name)))

    def update_search_group(self, group_id: uuid.UUID, **fields: Any) -> SearchGroup:
        group = self.get_search_group(group_id)
        if group is None:
            raise SearchGroupNotFoundError(str(group_id))

        search_id = fields.get("search_id")
        if search_id:
            existing = self.get_search_group_by_search_id(search_id)
            if existing is not None and existing.id != group.id:
                raise DuplicateSearchIdError("ID de pesquisa já existe")

        for name in ("search_id", "name", "description"):
            if name in fields:
                setattr(group, name, fields[name])
        self._session.flush()
        return group

    def delete_search_group(self, group_id: uuid.UUID) -> None:
        group = self.get_search_group(group_id)
        if group is None:
            return
        self._session.delete(group)
        self._session.flush()
        logger.info("Deleted search group %s", group.search_id)

    def link_case_to_search_group(
        self, case_id: uuid.UUID, group_id: uuid.UUID | None
    ) -> Processo:
        """Attach a case to a search group, or detach it with ``None``."""
        processo = self._require_case(case_id)
        if group_id is not None and self.get_search_group(group_id) is None:
            raise SearchGroupNotFoundError(str(group_id))
        processo.search_group_id = group_id
        self._session.flush()
        return processo

    def find_cases_by_search_id(self, search_id: str) -> list[Processo]:
        group = self.get_search_group_by_search_id(search_id)
        if group is None:
            return []
        return list(
            self._session.scalars(select(Processo).where(Processo.search_group_id == group.id))
        )

    # ------------------------------------------------------------------
    # Message template
    # ------------------------------------------------------------------

    def get_message_template(self) -> tuple[str, bool]:
        """Return ``(template, is_default)``."""
        setting = self._get_setting(MESSAGE_TEMPLATE_KEY)
        if setting is None:
            return DEFAULT_MESSAGE_TEMPLATE, True
        return setting.value, False

    def set_message_template(self, template: str) -> str:
        if not template.strip():
            raise ValueError("Template não pode estar vazio")
        setting = self._get_setting(MESSAGE_TEMPLATE_KEY)
        if setting is None:
            setting = SystemSetting(key=MESSAGE_TEMPLATE_KEY, value=template)
            self._session.add(setting)
        setting.value = template
        setting.description = _MESSAGE_TEMPLATE_DESCRIPTION
        self._session.flush()
        logger.info("Message template updated (%d chars)", len(template))
        return setting.value

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_case(self, case_id: uuid.UUID) -> Processo:
        processo = self.get_case(case_id)
        if processo is None:
            raise CaseNotFoundError(str(case_id))
        return processo

    def _get_setting(self, key: str) -> SystemSetting | None:
        return self._session.scalars(
            select(SystemSetting).where(SystemSetting.key == key)
        ).one_or_none()


def _to_decimal(value: Any) -> Decimal:
    """Claim values arrive as dot-decimal strings; unparseable ones become zero."""
    try:
        return Decimal(str(value))
    except InvalidOperation:
        logger.warning("Unparseable claim value %r, storing 0", value)
        return Decimal("0")
