"""Field extractors — pull one typed value out of raw dossier text.

Every extractor returns ``None`` when nothing matches and never raises.
"""

from __future__ import annotations

import re

from pii import format_cpf

CASE_NUMBER_RE = re.compile(r"(\d{7}-\d{2}\.\d{4}\.\d{1}\.\d{2}\.\d{4})")
TAXPAYER_ID_RE = re.compile(r"CPF:\s*(\d{11}|\d{3}\.\d{3}\.\d{3}-\d{2})")
CURRENCY_RE = re.compile(r"R\$\s*([\d.,]+)")
# Years 1000-9999 only; a run like "0099" is not a year.
YEAR_RE = re.compile(r"(?<!\d)[1-9]\d{3}(?!\d)")


def extract_case_number(text: str) -> str | None:
    """First CNJ case number anywhere in *text* (not line-scoped)."""
    match = CASE_NUMBER_RE.search(text)
    return match.group(1) if match else None


def extract_taxpayer_id(text: str) -> str | None:
    """CPF following a ``CPF:`` label, in ``XXX.XXX.XXX-XX`` form.

    Raw 11-digit values are reformatted; already formatted ones pass through.
    """
    match = TAXPAYER_ID_RE.search(text)
    if not match:
        return None
    value = match.group(1)
    if len(value) == 11:
        return format_cpf(value)
    return value


def extract_currency(line: str) -> str | None:
    """Brazilian ``R$ 1.234,56`` amount as a dot-decimal string (``"1234.56"``)."""
    match = CURRENCY_RE.search(line)
    if not match:
        return None
    return match.group(1).replace(".", "").replace(",", ".", 1)


def extract_year(date_str: str) -> int | None:
    """First standalone four-digit year (1000-9999) in *date_str*."""
    match = YEAR_RE.search(date_str)
    return int(match.group(0)) if match else None
