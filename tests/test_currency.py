"""
tests/test_currency.py
─────────────────────────────────────────────────────────────────────
es-ES money formatting used by reports and exports.
"""
from __future__ import annotations

from decimal import Decimal

import pytest

from agency.exceptions import LedgerValidationError
from agency.services.currency import format_currency, parse_currency


class TestFormatCurrency:

    @pytest.mark.parametrize("amount,currency,decimals,expected", [
        (10000, "EUR", 2, "10.000,00 €"),
        (500, "EUR", 2, "500,00 €"),
        (Decimal("1234567.891"), "EUR", 2, "1.234.567,89 €"),
        (1500, "USD", 0, "1.500 US$"),
        (250.5, "GBP", 2, "250,50 GB£"),
        (0, "EUR", 2, "0,00 €"),
        (None, "EUR", 2, "0,00 €"),
        (-1234.5, "EUR", 2, "-1.234,50 €"),
    ])
    def test_formats(self, amount, currency, decimals, expected):
        assert format_currency(amount, currency, decimals) == expected

    def test_rounds_half_up(self):
        assert format_currency(Decimal("0.005")) == "0,01 €"
        assert format_currency(Decimal("2.5"), decimals=0) == "3 €"

    def test_lowercase_code_accepted(self):
        assert format_currency(1, "usd") == "1,00 US$"

    def test_default_currency_setting(self, settings):
        settings.AGENCY_DEFAULT_CURRENCY = "GBP"
        assert format_currency(3) == "3,00 GB£"

    def test_unsupported_currency(self):
        with pytest.raises(LedgerValidationError):
            format_currency(1, "JPY")


class TestParseCurrency:

    @pytest.mark.parametrize("text,expected", [
        ("10.000,00 €", Decimal("10000.00")),
        ("1.500 US$", Decimal("1500")),
        ("-250,50 €", Decimal("-250.50")),
        ("", Decimal("0")),
        (None, Decimal("0")),
        ("€", Decimal("0")),
    ])
    def test_parses(self, text, expected):
        assert parse_currency(text) == expected

    @pytest.mark.parametrize("amount", [
        "0", "0.01", "999.99", "1000", "98765.43", "9999999.99", "10000000",
    ])
    def test_formatted_value_parses_back(self, amount):
        assert parse_currency(format_currency(Decimal(amount))) == Decimal(amount)

    def test_garbage_rejected(self):
        with pytest.raises(LedgerValidationError):
            parse_currency("1,2,3")
