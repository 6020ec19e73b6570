"""
pollito.invoicing
=================

Invoice numbering, totals and WhatsApp share links.

Invoice numbers are a literal prefix followed by a zero‑padded counter
(``Fact-0001``, ``Fact-0002``, ...).  The next number is derived from
durable state, the highest number already issued, so a restarted process
keeps counting where the previous one stopped.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional
from urllib.parse import quote

from .models import Invoice
from .settings import settings

CENTS = Decimal("0.01")
SHARE_SAFE = "!*'()"


def money(value) -> Decimal:
    """Coerce *value* to a Decimal rounded to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def invoice_total(pounds, price_per_pound) -> Decimal:
    """``pounds × price_per_pound`` rounded to cents."""
    return money(Decimal(str(pounds)) * Decimal(str(price_per_pound)))


def format_invoice_number(seq: int, prefix: str = "Fact-", width: int = 4) -> str:
    """
    >>> format_invoice_number(1)
    'Fact-0001'
    """
    return f"{prefix}{seq:0{width}d}"


def parse_invoice_number(number: str, prefix: str = "Fact-") -> Optional[int]:
    """Return the counter embedded in *number*, or None if it does not match."""
    if not number.startswith(prefix):
        return None
    digits = number[len(prefix):]
    return int(digits) if digits.isdigit() else None


def next_invoice_seq(existing: Iterable[str], high_water: int = 0, prefix: str = "Fact-") -> int:
    """
    Next counter value: one past the largest of *high_water* and every
    parsable number in *existing*.
    """
    seqs = [s for s in (parse_invoice_number(n, prefix) for n in existing) if s is not None]
    return max([high_water, *seqs]) + 1


# ---------------------------------------------------------------------------
# WhatsApp sharing
# ---------------------------------------------------------------------------
WHATSAPP_BASE = "https://wa.me/"


def whatsapp_message(invoice: Invoice) -> str:
    """
    Plain‑text receipt for *invoice*, formatted for a WhatsApp chat.

    The business header and footer come from :data:`pollito.settings.settings`.
    """
    cur = settings.currency_symbol
    return "\n".join([
        f"🐣 *{settings.business_name}*",
        f'"{settings.business_slogan}"',
        "",
        f"📋 *Factura:* {invoice.invoice_number}",
        f"👤 *Cliente:* {invoice.client_name}",
        f"📅 *Fecha:* {invoice.date:%d/%m/%Y}",
        "",
        "📦 *Detalle:*",
        f"- Concepto: {invoice.concept}",
        f"- Cantidad: {invoice.quantity} pollitos",
        f"- Libras: {money(invoice.pounds)} lbs",
        f"- Precio por libra: {cur} {money(invoice.price_per_pound)}",
        "",
        f"💰 *Total: {cur} {money(invoice.total)}*",
        "",
        f"📍 {settings.business_location}",
        f"📞 {settings.business_phones}",
        "",
        "¡Gracias por tu compra! 🙏",
    ])


def whatsapp_url(phone: Optional[str], message: str) -> str:
    """
    ``wa.me`` link that opens a chat with *phone* prefilled with *message*.

    Every non‑digit is stripped from the phone number.  Without a number the
    link lets the sender pick the contact.

    >>> whatsapp_url("+504 9716-4446", "Hola mundo")
    'https://wa.me/50497164446?text=Hola%20mundo'
    """
    digits = re.sub(r"\D", "", phone or "")
    # same escaping as JavaScript's encodeURIComponent
    return f"{WHATSAPP_BASE}{digits}?text={quote(message, safe=SHARE_SAFE)}"
