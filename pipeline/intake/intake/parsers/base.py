"""Base parser — abstract class and shared draft/result data structures."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional


class TextFormat(StrEnum):
    """Layout of a pasted case dossier ("ficha")."""

    MODERN = "modern"  # emoji-labelled, key-prefixed lines; supports batches
    LEGACY = "legacy"  # unlabelled, position-dependent court-system layout


class IntakeMode(StrEnum):
    """What the intake form should do with a parse outcome."""

    NONE = "none"
    SINGLE = "single"
    BATCH = "batch"


# -------------------------------------------------------------------- #
# Drafts: every scalar is optional until the assembler resolves it.     #
# -------------------------------------------------------------------- #


@dataclass
class PartyDraft:
    """One pole of a case as recovered from text."""

    main_name: Optional[str] = None
    role: Optional[str] = None
    lawyers: list[str] = field(default_factory=list)


@dataclass
class CaseDraft:
    """Case record under construction.

    Parsers only ever set the fields they actually found; defaults are
    applied once, by :mod:`intake.assembler`.
    """

    case_number: Optional[str] = None
    taxpayer_id: Optional[str] = None
    filing_year: Optional[int] = None
    nature_of_action: Optional[str] = None
    subject_matter: Optional[str] = None
    court: Optional[str] = None
    judge: Optional[str] = None
    claim_value: Optional[str] = None
    filing_date: Optional[str] = None
    last_event_description: Optional[str] = None
    active_party: PartyDraft = field(default_factory=PartyDraft)
    passive_party: PartyDraft = field(default_factory=PartyDraft)
    other_parties: list[str] = field(default_factory=list)

    @property
    def is_essential_valid(self) -> bool:
        """Both the case number and the taxpayer id were recovered."""
        return bool(self.case_number) and bool(self.taxpayer_id)


@dataclass
class IntakeResult:
    """Outcome of dispatching one pasted blob.

    - format:  detected layout, ``None`` for blank input
    - drafts:  recovered records (modern chunks without a case number are
               already dropped)
    - chunks:  number of chunks the blob was split into
    """

    format: Optional[TextFormat] = None
    drafts: list[CaseDraft] = field(default_factory=list)
    chunks: int = 0

    @property
    def mode(self) -> IntakeMode:
        if not self.drafts:
            return IntakeMode.NONE
        if len(self.drafts) == 1:
            return IntakeMode.SINGLE
        return IntakeMode.BATCH

    @property
    def skipped(self) -> int:
        """Chunks that yielded no record."""
        return max(self.chunks - len(self.drafts), 0)

    @property
    def warning(self) -> str | None:
        """User-facing warning when non-empty input yielded nothing."""
        if self.format is not None and not self.drafts:
            return "Nenhum dado estruturado foi extraído do texto informado"
        return None


class BaseParser(ABC):
    """Abstract base for the per-format text parsers."""

    text_format: TextFormat

    @abstractmethod
    def parse(self, text: str) -> CaseDraft:
        """Parse one record's worth of text into a draft.

        Implementations must never raise on malformed input: unrecognised
        lines are skipped and missing fields stay ``None``.
        """

    @staticmethod
    def significant_lines(text: str) -> list[str]:
        """Split *text* into trimmed lines, dropping blank ones."""
        return [line.strip() for line in text.splitlines() if line.strip()]
