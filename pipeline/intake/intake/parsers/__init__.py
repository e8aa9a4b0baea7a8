"""Parsers — turn pasted ficha text into case drafts."""

from intake.parsers.base import (
    BaseParser,
    CaseDraft,
    IntakeMode,
    IntakeResult,
    PartyDraft,
    TextFormat,
)
from intake.parsers.dispatcher import PARSER_REGISTRY, detect_format, parse_text, split_records
from intake.parsers.extractors import (
    extract_case_number,
    extract_currency,
    extract_taxpayer_id,
    extract_year,
)
from intake.parsers.legacy import LegacyParser
from intake.parsers.modern import ModernParser

__all__ = [
    # Base
    "BaseParser",
    "CaseDraft",
    "PartyDraft",
    "IntakeMode",
    "IntakeResult",
    "TextFormat",
    # Extractors
    "extract_case_number",
    "extract_taxpayer_id",
    "extract_currency",
    "extract_year",
    # Parsers
    "LegacyParser",
    "ModernParser",
    # Dispatch
    "PARSER_REGISTRY",
    "detect_format",
    "split_records",
    "parse_text",
]
