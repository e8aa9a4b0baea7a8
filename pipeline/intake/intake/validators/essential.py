"""Essential-field validation of parsed drafts before batch assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from intake.parsers.base import CaseDraft

logger = logging.getLogger(__name__)


@dataclass
class RejectedDraft:
    """A draft that cannot be submitted, with the reason for rejection."""

    draft: CaseDraft
    reason: str


@dataclass
class ValidationStats:
    """Summary statistics from a validation pass."""

    total_input: int = 0
    valid_count: int = 0
    invalid_count: int = 0


@dataclass
class ValidationResult:
    """Result of validating a batch of drafts."""

    valid: list[CaseDraft] = field(default_factory=list)
    rejected: list[RejectedDraft] = field(default_factory=list)
    stats: ValidationStats = field(default_factory=ValidationStats)


class EssentialFieldsValidator:
    """Keeps only drafts carrying both a case number and a taxpayer id.

    The storage boundary never validates; anything that reaches it must
    already be complete.
    """

    def validate_batch(self, drafts: list[CaseDraft]) -> ValidationResult:
        stats = ValidationStats(total_input=len(drafts))
        valid: list[CaseDraft] = []
        rejected: list[RejectedDraft] = []

        for draft in drafts:
            missing = self.missing_fields(draft)
            if missing:
                stats.invalid_count += 1
                reason = "missing " + ", ".join(missing)
                rejected.append(RejectedDraft(draft=draft, reason=reason))
                logger.warning("Draft %s rejected: %s", draft.case_number or "<no number>", reason)
                continue
            valid.append(draft)

        stats.valid_count = len(valid)

        logger.info(
            "Validation complete: %d input, %d valid, %d invalid",
            stats.total_input,
            stats.valid_count,
            stats.invalid_count,
        )
        return ValidationResult(valid=valid, rejected=rejected, stats=stats)

    @staticmethod
    def missing_fields(draft: CaseDraft) -> list[str]:
        """Names of essential fields that are empty on *draft*."""
        missing: list[str] = []
        if not draft.case_number:
            missing.append("case_number")
        if not draft.taxpayer_id:
            missing.append("taxpayer_id")
        return missing
