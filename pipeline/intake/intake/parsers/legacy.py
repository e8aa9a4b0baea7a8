"""Legacy ficha parser — unlabelled, position-dependent court-system layout.

The legacy dossier carries no field labels on the value lines. Headers such
as ``Natureza`` or ``Juiz`` stand alone and their value is the *next* line;
parties are listed under ``Envolvidos`` / ``Polo Ativo`` / ``Polo Passivo`` /
``Outras Partes`` and are recognised by what surrounds them::

    Envolvidos
    Polo Ativo
    JOÃO SILVA
    Requerente
    DR. PEDRO
    Advogado(a)
    Polo Passivo
    BANCO XYZ S.A.
    Requerido

The scanner is an explicit state machine over the non-blank trimmed lines,
with bounds-checked look-behind/look-ahead through :class:`LineCursor`.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from intake.parsers.base import BaseParser, CaseDraft, PartyDraft, TextFormat
from intake.parsers.extractors import extract_currency, extract_year

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------- #
# Literal tokens of the legacy layout                                   #
# -------------------------------------------------------------------- #

ACTIVE_ROLE_TOKENS: frozenset[str] = frozenset({"Requerente", "Exequente", "Autor", "Polo Ativo"})
PASSIVE_ROLE_TOKENS: frozenset[str] = frozenset(
    {"Requerido", "Executado", "Réu", "Polo Passivo", "Parte Passiva"}
)
ROLE_TOKENS: frozenset[str] = ACTIVE_ROLE_TOKENS | PASSIVE_ROLE_TOKENS

# Pole headers used as role labels map onto the default role of the pole.
_ROLE_ALIASES: dict[str, str] = {
    "Polo Ativo": "Requerente",
    "Polo Passivo": "Requerido",
    "Parte Passiva": "Requerido",
}

INVOLVED_HEADER = "Envolvidos"
LAWYER_MARKER = "Advogado(a)"
OTHER_PARTY_MARKER = "Envolvido(a)"
OTHER_PARTIES_HEADER = "Outras Partes"
CLAIM_VALUE_PREFIX = "Valor da causa:"


class Pole(StrEnum):
    ACTIVE = "active"
    PASSIVE = "passive"
    OTHER = "other"


class ExpectedField(StrEnum):
    """Field whose value sits on the line after its header."""

    FILING_YEAR = "filing_year"
    NATURE = "nature_of_action"
    SUBJECT = "subject_matter"
    COURT = "court"
    JUDGE = "judge"


_POLE_HEADERS: dict[str, Pole] = {
    "Polo Ativo": Pole.ACTIVE,
    "Polo Passivo": Pole.PASSIVE,
    OTHER_PARTIES_HEADER: Pole.OTHER,
}

_FIELD_HEADERS: dict[str, ExpectedField] = {
    "Início do processo": ExpectedField.FILING_YEAR,
    "Natureza": ExpectedField.NATURE,
    "Assunto": ExpectedField.SUBJECT,
    "Poder Judiciário": ExpectedField.COURT,
    "Juiz": ExpectedField.JUDGE,
}


class LineCursor:
    """Index-addressable line sequence with safe relative access."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self.index = -1

    def __iter__(self) -> LineCursor:
        return self

    def __next__(self) -> str:
        self.index += 1
        if self.index >= len(self._lines):
            raise StopIteration
        return self._lines[self.index]

    def peek(self, offset: int) -> str | None:
        """Line at ``index + offset``, or ``None`` outside the sequence."""
        position = self.index + offset
        if 0 <= position < len(self._lines):
            return self._lines[position]
        return None


class LegacyParser(BaseParser):
    """Parse a whole legacy-format dossier into a single draft."""

    text_format = TextFormat.LEGACY

    def parse(self, text: str) -> CaseDraft:
        draft = CaseDraft()
        in_involved = False
        pole: Pole | None = None
        expecting: ExpectedField | None = None

        cursor = LineCursor(self.significant_lines(text))
        for line in cursor:
            if expecting is not None:
                self._assign_expected(draft, expecting, line)
                expecting = None
                continue

            if line == INVOLVED_HEADER:
                in_involved = True
                continue
            if line in _POLE_HEADERS:
                pole = _POLE_HEADERS[line]
                continue
            if line in _FIELD_HEADERS:
                expecting = _FIELD_HEADERS[line]
                continue
            if line.startswith(CLAIM_VALUE_PREFIX):
                value = extract_currency(line)
                if value is not None:
                    draft.claim_value = value

            if not in_involved or pole is None:
                continue

            if pole is Pole.OTHER:
                self._scan_other_party(draft, cursor, line)
            elif pole is Pole.ACTIVE:
                self._scan_pole(draft.active_party, ACTIVE_ROLE_TOKENS, cursor, line)
            else:
                self._scan_pole(draft.passive_party, PASSIVE_ROLE_TOKENS, cursor, line)

        logger.debug(
            "legacy: active=%r (%d lawyers) passive=%r (%d lawyers) others=%d",
            draft.active_party.main_name,
            len(draft.active_party.lawyers),
            draft.passive_party.main_name,
            len(draft.passive_party.lawyers),
            len(draft.other_parties),
        )
        return draft

    # ------------------------------------------------------------------ #
    # Line handlers                                                        #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _assign_expected(draft: CaseDraft, expecting: ExpectedField, line: str) -> None:
        if expecting is ExpectedField.FILING_YEAR:
            year = extract_year(line)
            if year is not None:
                draft.filing_year = year
            else:
                logger.debug("legacy: no year in filing line %r", line)
            return
        setattr(draft, expecting.value, line)

    @staticmethod
    def _scan_pole(
        party: PartyDraft,
        role_tokens: frozenset[str],
        cursor: LineCursor,
        line: str,
    ) -> None:
        if line == LAWYER_MARKER:
            previous = cursor.peek(-1)
            if (
                previous
                and previous not in ROLE_TOKENS
                and previous != party.main_name
                and previous != INVOLVED_HEADER
            ):
                party.lawyers.append(previous)
            return

        if line in role_tokens:
            party.role = _ROLE_ALIASES.get(line, line)
            return

        if party.main_name or "Polo" in line:
            return

        # A bare name is only trusted when a role label follows it; a lawyer
        # marker right after means the line is a lawyer, not the party.
        following = cursor.peek(1)
        if following in role_tokens:
            party.main_name = line

    @staticmethod
    def _scan_other_party(draft: CaseDraft, cursor: LineCursor, line: str) -> None:
        if line != OTHER_PARTY_MARKER:
            return
        previous = cursor.peek(-1)
        if previous and OTHER_PARTIES_HEADER not in previous:
            draft.other_parties.append(f"{previous} - {line}")
