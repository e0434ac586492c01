"""
services/currency.py
─────────────────────────────────────────────────────────────────────
es-ES money formatting shared by reports and spreadsheet export.

    format_currency(10000)                → "10.000,00 €"
    format_currency(1500, "USD", 0)       → "1.500 US$"
    parse_currency("10.000,00 €")         → Decimal("10000.00")
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from django.conf import settings

from ..exceptions import LedgerValidationError

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "US$",
    "GBP": "GB£",
}

_NUMERIC_CHARS = re.compile(r"[^\d,.\-]")


def _group_thousands(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ".".join(groups)


def format_currency(amount, currency: Optional[str] = None, decimals: int = 2) -> str:
    """
    '.' thousands separator, ',' decimal separator, symbol after a space.
    ``currency`` defaults to AGENCY_DEFAULT_CURRENCY.
    """
    currency = currency or getattr(settings, "AGENCY_DEFAULT_CURRENCY", "EUR")
    symbol   = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        raise LedgerValidationError(f"Moneda no soportada: {currency}")

    value = Decimal(str(amount or 0))
    quant = Decimal(1).scaleb(-decimals) if decimals > 0 else Decimal(1)
    value = value.quantize(quant, rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{max(decimals, 0)}f}"
    whole, _, frac = text.partition(".")
    body = _group_thousands(whole)
    if frac:
        body = f"{body},{frac}"
    return f"{sign}{body} {symbol}"


def parse_currency(text: Optional[str]) -> Decimal:
    """
    Inverse of format_currency for es-ES strings. Symbols and spaces are
    ignored; '.' is a thousands separator, ',' the decimal one.
    """
    if text is None:
        return Decimal("0")
    cleaned = _NUMERIC_CHARS.sub("", str(text))
    if not cleaned or cleaned in ("-", ",", "."):
        return Decimal("0")
    cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        return Decimal(cleaned)
    except InvalidOperation as exc:
        raise LedgerValidationError(f"Importe no válido: {text!r}") from exc
