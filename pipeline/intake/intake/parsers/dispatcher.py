"""Format dispatcher — detect the ficha layout, split batches, route chunks."""

from __future__ import annotations

import logging
import re

from intake.parsers.base import BaseParser, IntakeResult, TextFormat
from intake.parsers.legacy import LegacyParser
from intake.parsers.modern import ACTIVE_NAME_LABEL, PASSIVE_NAME_LABEL, ModernParser

logger = logging.getLogger(__name__)

RECORD_MARKER = "📁 Ficha do Processo"

_MODERN_MARKERS = (RECORD_MARKER, ACTIVE_NAME_LABEL, PASSIVE_NAME_LABEL)

# Zero-width split: each chunk keeps its own marker line.
_RECORD_BOUNDARY_RE = re.compile(r"(?=📁\s*Ficha do Processo)")

PARSER_REGISTRY: dict[TextFormat, type[BaseParser]] = {
    TextFormat.MODERN: ModernParser,
    TextFormat.LEGACY: LegacyParser,
}


def detect_format(text: str) -> TextFormat:
    """Classify *text* as modern if any modern marker appears, else legacy."""
    if any(marker in text for marker in _MODERN_MARKERS):
        return TextFormat.MODERN
    return TextFormat.LEGACY


def split_records(text: str) -> list[str]:
    """Split a modern-format batch into trimmed, non-empty record chunks."""
    return [chunk.strip() for chunk in _RECORD_BOUNDARY_RE.split(text) if chunk.strip()]


def parse_text(text: str) -> IntakeResult:
    """Parse one pasted blob into zero, one or many drafts.

    Blank input short-circuits: no format is detected and nothing is
    extracted. Modern input is split into chunks parsed independently, and
    chunks without a recoverable case number are dropped. Legacy input is
    always a single record.
    """
    if not text.strip():
        return IntakeResult()

    text_format = detect_format(text)
    parser = PARSER_REGISTRY[text_format]()

    if text_format is TextFormat.LEGACY:
        result = IntakeResult(format=text_format, drafts=[parser.parse(text)], chunks=1)
        logger.info("legacy ficha parsed as a single record")
        return result

    chunks = split_records(text)
    result = IntakeResult(format=text_format, chunks=len(chunks))
    for position, chunk in enumerate(chunks, start=1):
        draft = parser.parse(chunk)
        if not draft.case_number:
            logger.debug("chunk %d/%d has no case number, skipping", position, len(chunks))
            continue
        result.drafts.append(draft)

    logger.info(
        "modern ficha: %d chunks, %d records (%s mode)",
        result.chunks,
        len(result.drafts),
        result.mode,
    )
    return result
