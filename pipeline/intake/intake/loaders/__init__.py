"""Loaders — persist assembled case records and serve registry lookups."""

from intake.loaders.case_store import (
    CaseNotFoundError,
    CaseStore,
    DuplicatePayoutRequestError,
    DuplicateSearchIdError,
    InvalidLookupError,
    PayoutNotEligibleError,
    SearchGroupNotFoundError,
    is_won_case,
    rewrite_subject_for_outcome,
)

__all__ = [
    "CaseStore",
    "CaseNotFoundError",
    "DuplicatePayoutRequestError",
    "DuplicateSearchIdError",
    "InvalidLookupError",
    "PayoutNotEligibleError",
    "SearchGroupNotFoundError",
    "is_won_case",
    "rewrite_subject_for_outcome",
]
