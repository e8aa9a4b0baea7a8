"""Modern ficha parser — emoji-labelled, key-prefixed layout.

Example chunk::

    📁 Ficha do Processo 99 de 514 📁
    4010991-84.2025.8.26.0100
    Requerente (Polo Ativo):
    👤 Nome: ROGER DIAS FERNANDES
    💳 Doc.: CPF: 09507675655
    Requerido (Polo Passivo):
    🏢 Nome: FACEBOOK SERVICOS ONLINE DO BRASIL LTDA.
    Dados da Ação:
    ⚖ Natureza: Indenização por Dano Moral
    💰 Valor da Causa: R$ 10.000,00
    🗓 Data de Início: N/A
    ⏳ Último Evento Registrado: 02/09/2025, 08:19:11
"""

from __future__ import annotations

import logging

from intake.parsers.base import BaseParser, CaseDraft, TextFormat
from intake.parsers.extractors import (
    extract_case_number,
    extract_currency,
    extract_taxpayer_id,
    extract_year,
)

logger = logging.getLogger(__name__)

ACTIVE_NAME_LABEL = "👤 Nome:"
PASSIVE_NAME_LABEL = "🏢 Nome:"
NATURE_LABEL = "⚖ Natureza:"
CLAIM_VALUE_LABEL = "💰 Valor da Causa:"
FILING_DATE_LABEL = "🗓 Data de Início:"
LAST_EVENT_LABEL = "⏳ Último Evento Registrado:"

_MISSING_DATE = "N/A"


class ModernParser(BaseParser):
    """Parse a single modern-format chunk."""

    text_format = TextFormat.MODERN

    def parse(self, text: str) -> CaseDraft:
        draft = CaseDraft()

        # Identifiers are searched over the whole chunk, so line order is irrelevant.
        draft.case_number = extract_case_number(text)
        draft.taxpayer_id = extract_taxpayer_id(text)

        for line in self.significant_lines(text):
            if ACTIVE_NAME_LABEL in line:
                draft.active_party.main_name = _label_value(line, ACTIVE_NAME_LABEL)
            elif PASSIVE_NAME_LABEL in line:
                draft.passive_party.main_name = _label_value(line, PASSIVE_NAME_LABEL)
            elif NATURE_LABEL in line:
                draft.nature_of_action = _label_value(line, NATURE_LABEL)
            elif CLAIM_VALUE_LABEL in line:
                value = extract_currency(line)
                if value is not None:
                    draft.claim_value = value
            elif FILING_DATE_LABEL in line:
                self._apply_filing_date(draft, _label_value(line, FILING_DATE_LABEL))
            elif LAST_EVENT_LABEL in line:
                draft.last_event_description = _label_value(line, LAST_EVENT_LABEL)

        logger.debug(
            "modern: parsed chunk case_number=%s has_cpf=%s",
            draft.case_number,
            draft.taxpayer_id is not None,
        )
        return draft

    @staticmethod
    def _apply_filing_date(draft: CaseDraft, date_str: str) -> None:
        if date_str == _MISSING_DATE:
            return
        draft.filing_date = date_str
        year = extract_year(date_str)
        if year is not None:
            draft.filing_year = year


def _label_value(line: str, label: str) -> str:
    """Text of *line* with the first occurrence of *label* removed, trimmed."""
    return line.replace(label, "", 1).strip()
