"""Unit tests for money parsing and formatting."""

from decimal import Decimal

import pytest

from src.services.locale_service import CURRENCY, format_amount, parse_amount, to_money

pytestmark = pytest.mark.unit


class TestToMoney:
    """Tests for to_money."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("10", Decimal("10.00")),
            ("10.005", Decimal("10.01")),
            ("10.004", Decimal("10.00")),
            (7, Decimal("7.00")),
            (0.1, Decimal("0.10")),
            (Decimal("3.14159"), Decimal("3.14")),
            (" 42.5 ", Decimal("42.50")),
        ],
    )
    def test_rounds_half_up_to_cents(self, value, expected):
        """Inputs are quantized to two decimals, half up."""
        assert to_money(value) == expected
        assert to_money(value).as_tuple().exponent == -2

    def test_float_noise_does_not_leak(self):
        """0.1 + 0.2 as a float still becomes 0.30."""
        assert to_money(0.1 + 0.2) == Decimal("0.30")

    @pytest.mark.parametrize("value", ["abc", "", "1,2.3", "NaN", "Infinity", float("inf")])
    def test_rejects_non_numeric(self, value):
        """Malformed and non-finite values raise ValueError."""
        with pytest.raises(ValueError):
            to_money(value)

    def test_rejects_booleans(self):
        """True is not one real."""
        with pytest.raises(ValueError, match="Boolean"):
            to_money(True)

    def test_keeps_sign(self):
        """Negative values are converted, callers decide if they are allowed."""
        assert to_money("-5") == Decimal("-5.00")

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1.234,56", Decimal("1234.56")), ("10,5", Decimal("10.50")), ("0,005", Decimal("0.01"))],
    )
    def test_accepts_locale_format(self, value, expected):
        """Strings typed the pt_BR way are read in the locale format."""
        assert to_money(value) == expected


class TestParseAmount:
    """Tests for locale-aware parsing."""

    def test_parses_locale_grouping(self):
        """pt_BR uses '.' for grouping and ',' for decimals."""
        assert parse_amount("1.234,56") == Decimal("1234.56")

    def test_invalid_amount(self):
        with pytest.raises(ValueError, match="Invalid monetary amount"):
            parse_amount("doze reais")

    def test_rejects_misplaced_grouping(self):
        with pytest.raises(ValueError):
            parse_amount("1.23,4")


class TestFormatAmount:
    """Tests for format_amount."""

    def test_currency_follows_locale(self):
        assert CURRENCY == "BRL"

    def test_with_symbol(self):
        """Formatted amount carries the currency symbol and locale separators."""
        formatted = format_amount(Decimal("1234.56"))
        assert "R$" in formatted
        assert "1.234,56" in formatted

    def test_without_symbol(self):
        assert format_amount(Decimal("1234.5"), include_symbol=False) == "1.234,50"
