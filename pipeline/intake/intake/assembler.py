"""Record assembler — merge form overrides into drafts and resolve defaults.

This is the only place where fallback values are applied; parsers leave
anything they did not find as ``None``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date

from pydantic import ValidationError

from models.processo import (
    DEFAULT_ACTIVE_ROLE,
    DEFAULT_CLAIM_VALUE,
    DEFAULT_COURT,
    DEFAULT_PASSIVE_ROLE,
    NOT_INFORMED,
    CaseRecord,
    PartySchema,
)
from pii import format_cpf, mask_cpf

from intake.parsers.base import CaseDraft, PartyDraft
from intake.validators import EssentialFieldsValidator, RejectedDraft

logger = logging.getLogger(__name__)


class MissingEssentialFieldsError(ValueError):
    """Case number or taxpayer id is still empty after applying overrides."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"missing essential fields: {', '.join(missing)}")
        self.missing = missing


@dataclass
class BatchAssembly:
    """Assembled batch plus what was left out of it."""

    records: list[CaseRecord] = field(default_factory=list)
    rejected: list[RejectedDraft] = field(default_factory=list)
    total: int = 0

    @property
    def dropped(self) -> int:
        return len(self.rejected)


def apply_overrides(
    draft: CaseDraft,
    *,
    taxpayer_id: str | None = None,
    case_number: str | None = None,
) -> CaseDraft:
    """Return a copy of *draft* where non-empty form values win."""
    changes: dict[str, str] = {}
    if taxpayer_id and taxpayer_id.strip():
        changes["taxpayer_id"] = format_cpf(taxpayer_id)
    if case_number and case_number.strip():
        changes["case_number"] = case_number.strip()
    return dataclasses.replace(draft, **changes) if changes else draft


def assemble(
    draft: CaseDraft,
    *,
    taxpayer_id: str | None = None,
    case_number: str | None = None,
    subject_fallback_to_nature: bool = False,
) -> CaseRecord:
    """Build the storage payload for a single draft.

    Raises:
        MissingEssentialFieldsError: no case number or taxpayer id, neither
            parsed nor typed into the form.
        pydantic.ValidationError: an override is not in canonical form.
    """
    draft = apply_overrides(draft, taxpayer_id=taxpayer_id, case_number=case_number)

    missing = EssentialFieldsValidator.missing_fields(draft)
    if missing:
        raise MissingEssentialFieldsError(missing)

    subject = draft.subject_matter
    if not subject and subject_fallback_to_nature:
        subject = draft.nature_of_action

    record = CaseRecord(
        case_number=draft.case_number,
        taxpayer_id=draft.taxpayer_id,
        filing_year=draft.filing_year or date.today().year,
        nature_of_action=draft.nature_of_action or NOT_INFORMED,
        subject_matter=subject or NOT_INFORMED,
        court=draft.court or DEFAULT_COURT,
        judge=draft.judge or NOT_INFORMED,
        claim_value=draft.claim_value or DEFAULT_CLAIM_VALUE,
        filing_date=draft.filing_date or "",
        last_event_description=draft.last_event_description or "",
        active_party=_party(draft.active_party, DEFAULT_ACTIVE_ROLE),
        passive_party=_party(draft.passive_party, DEFAULT_PASSIVE_ROLE),
        other_parties=list(draft.other_parties),
    )
    logger.debug(
        "assembled %s for cpf %s", record.case_number, mask_cpf(record.taxpayer_id)
    )
    return record


def assemble_batch(drafts: list[CaseDraft]) -> BatchAssembly:
    """Filter out incomplete drafts, then assemble the rest.

    In batch mode there is no per-record subject, so the nature of action
    stands in for it. A draft whose values fail record validation is
    rejected on its own; the rest of the batch is still assembled.
    """
    validation = EssentialFieldsValidator().validate_batch(drafts)
    assembly = BatchAssembly(rejected=list(validation.rejected), total=len(drafts))
    for draft in validation.valid:
        try:
            assembly.records.append(assemble(draft, subject_fallback_to_nature=True))
        except ValidationError as exc:
            fields = sorted({".".join(map(str, err["loc"])) for err in exc.errors()})
            reason = "invalid " + ", ".join(fields)
            assembly.rejected.append(RejectedDraft(draft=draft, reason=reason))
            logger.warning("Draft %s rejected: %s", draft.case_number, reason)

    if assembly.dropped:
        logger.warning(
            "Batch assembled: %d of %d records kept, %d dropped",
            len(assembly.records),
            assembly.total,
            assembly.dropped,
        )
    return assembly


def _party(party: PartyDraft, default_role: str) -> PartySchema:
    return PartySchema(
        main_name=party.main_name or NOT_INFORMED,
        role=party.role or default_role,
        lawyers=list(party.lawyers),
    )
