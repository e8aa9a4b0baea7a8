"""Validators — essential-field checks before drafts are assembled."""

from intake.validators.essential import (
    EssentialFieldsValidator,
    RejectedDraft,
    ValidationResult,
    ValidationStats,
)

__all__ = [
    "EssentialFieldsValidator",
    "RejectedDraft",
    "ValidationResult",
    "ValidationStats",
]
