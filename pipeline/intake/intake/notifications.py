"""Notification helpers — WhatsApp message rendering and payout-request export.

Message delivery is out of scope: this module only builds text and a
``wa.me`` deep link that staff open themselves.
"""

from __future__ import annotations

import os
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable
from urllib.parse import quote

from models.payout_request import PayoutRequest
from models.processo import Processo

PUBLIC_BASE_URL: str = os.environ.get("INTAKE_PUBLIC_URL", "http://localhost:5000")

DEFAULT_MESSAGE_TEMPLATE = """🏛️ *Ministério Público de Santa Catarina*

✅ *PROCESSO EM RECEBIMENTO*

📋 *Dados do Processo:*
• Número: {processNumber}
• Assunto: {subject}
• Valor da Causa: {value}
• Status: Procedente (Ganho)

💰 *Seu processo está em processo de recebimento!*
O valor da causa está sendo processado para pagamento.

🔗 *Link do Processo:*
{processUrl}

📞 *Em caso de dúvidas, entre em contato conosco.*

_Mensagem automática do Sistema MPSC_"""

_NON_DIGIT_RE = re.compile(r"\D")

# Characters encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_PT_BR_DATETIME = "%d/%m/%Y, %H:%M:%S"


def format_brl(value: Decimal | str | float) -> str:
    """Format an amount as Brazilian reais: ``R$ 18.691,77``."""
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except InvalidOperation:
        amount = Decimal("0.00")
    grouped = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {grouped}"


def payout_url(process_id: object, base_url: str = PUBLIC_BASE_URL) -> str:
    """Public link where the citizen fills in the payout request."""
    return f"{base_url.rstrip('/')}/payout?processId={process_id}"


def render_message(
    processo: Processo,
    template: str = DEFAULT_MESSAGE_TEMPLATE,
    base_url: str = PUBLIC_BASE_URL,
) -> str:
    """Fill the ``{processNumber}``/``{subject}``/``{value}``/``{processUrl}`` slots.

    Plain substitution, so any other braces in a staff-edited template are
    left as they are.
    """
    replacements = {
        "{processNumber}": processo.process_number,
        "{subject}": processo.subject,
        "{value}": format_brl(processo.value),
        "{processUrl}": payout_url(processo.id, base_url),
    }
    message = template
    for placeholder, value in replacements.items():
        message = message.replace(placeholder, str(value))
    return message


def whatsapp_link(phone: str, message: str) -> str:
    """``wa.me`` deep link for a Brazilian phone number (country code 55)."""
    digits = _NON_DIGIT_RE.sub("", phone)
    return f"https://wa.me/55{digits}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def format_bank_data(request: PayoutRequest) -> str:
    if request.bank_name and request.agency and request.account:
        return f"{request.bank_name} - Ag: {request.agency} - Conta: {request.account}"
    return "Dados não disponíveis"


def describe_payout_request(request: PayoutRequest) -> str:
    """Clipboard summary of a single payout request."""
    created = request.created_at.strftime(_PT_BR_DATETIME) if request.created_at else "N/A"
    return "\n".join(
        [
            "Solicitação de Recebimento",
            f"ID: {request.id}",
            f"CPF: {request.cpf}",
            f"Telefone: {request.phone}",
            f"Banco: {request.bank_name or 'N/A'}",
            f"Agência: {request.agency or 'N/A'}",
            f"Conta: {request.account or 'N/A'}",
            f"Status: {request.status}",
            f"Data de Criação: {created}",
        ]
    )


def export_filename(now: datetime) -> str:
    return f"solicitacoes_recebimento_{now:%Y-%m-%d}_{now:%H%M}.txt"


def export_payout_requests(requests: Iterable[PayoutRequest], now: datetime) -> str:
    """Plain-text export of every payout request.

    Raises:
        ValueError: there is nothing to export.
    """
    requests = list(requests)
    if not requests:
        raise ValueError("Nenhuma solicitação de recebimento encontrada para exportar.")

    lines = [
        "SOLICITAÇÕES DE RECEBIMENTO - MINISTÉRIO PÚBLICO DE SANTA CATARINA",
        f"Exportado em: {now.strftime(_PT_BR_DATETIME)}",
        f"Total de solicitações: {len(requests)}",
        "=" * 80,
        "",
    ]
    for index, request in enumerate(requests, start=1):
        created = request.created_at.strftime(_PT_BR_DATETIME) if request.created_at else "N/A"
        lines += [
            f"SOLICITAÇÃO #{index}",
            "-" * 40,
            f"ID do Processo: {request.process_id}",
            f"CPF: {request.cpf}",
            f"Telefone: {request.phone}",
            f"Dados Bancários: {format_bank_data(request)}",
            f"Status: {request.status}",
            f"Data da Solicitação: {created}",
            "",
        ]
    lines += [
        "=" * 80,
        f"Fim do arquivo - {len(requests)} solicitações exportadas",
    ]
    return "\n".join(lines) + "\n"
