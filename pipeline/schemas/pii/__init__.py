"""PII utilities for LGPD compliance — CPF normalisation, formatting and masking."""

from __future__ import annotations

import re

_NON_DIGIT_RE = re.compile(r"[^\d]")

# Canonical display form: XXX.XXX.XXX-XX
_FORMATTED_CPF_RE = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")

_CPF_LENGTH = 11


def normalize_cpf(cpf: str) -> str:
    """Strip formatting characters, keep only digits."""
    return _NON_DIGIT_RE.sub("", cpf)


def format_cpf(raw: str) -> str:
    """Format a (possibly partial) CPF as the user types it.

    Non-digits are dropped and the input is truncated to 11 digits; separators
    are inserted only once enough digits are present, so partial input stays
    partial::

        >>> format_cpf("1234")
        '123.4'
        >>> format_cpf("12345678901")
        '123.456.789-01'
    """
    digits = normalize_cpf(raw)[:_CPF_LENGTH]
    formatted = re.sub(r"(\d{3})(\d)", r"\1.\2", digits, count=1)
    formatted = re.sub(r"(\d{3})(\d)", r"\1.\2", formatted, count=1)
    return re.sub(r"(\d{3})(\d{1,2})$", r"\1-\2", formatted, count=1)


def is_formatted_cpf(value: str) -> bool:
    """True if *value* is exactly in the canonical ``XXX.XXX.XXX-XX`` form."""
    return bool(_FORMATTED_CPF_RE.match(value))


def mask_cpf(cpf: str | None) -> str:
    """Mask a CPF for log output, keeping only the middle six digits.

    Anything that does not hold 11 digits is fully masked.
    """
    if not cpf:
        return "<none>"
    digits = normalize_cpf(cpf)
    if len(digits) != _CPF_LENGTH:
        return "***"
    return f"***.{digits[3:6]}.{digits[6:9]}-**"
