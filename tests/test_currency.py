# tests/test_currency.py

"""Tests for currency codes, symbols and display formatting."""

import unittest

from price_checker.pricing.currency import (
    SUPPORTED_CURRENCIES,
    coerce_currency,
    format_price,
    format_price_with_currency,
    get_currency_symbol,
    is_supported,
)


class TestCurrencyCodes(unittest.TestCase):
    """Supported set and code coercion."""

    def test_supported_set(self) -> None:
        self.assertEqual(
            SUPPORTED_CURRENCIES,
            ("USD", "EUR", "GBP", "NGN", "INR", "CAD", "AUD", "JPY"),
        )

    def test_is_supported_is_case_insensitive(self) -> None:
        self.assertTrue(is_supported("ngn"))
        self.assertFalse(is_supported("XYZ"))
        self.assertFalse(is_supported(None))

    def test_coerce_upper_cases(self) -> None:
        self.assertEqual(coerce_currency("eur"), "EUR")

    def test_coerce_unknown_falls_back_to_usd(self) -> None:
        self.assertEqual(coerce_currency("BTC"), "USD")
        self.assertEqual(coerce_currency(None), "USD")
        self.assertEqual(coerce_currency(""), "USD")

    def test_symbols(self) -> None:
        self.assertEqual(get_currency_symbol("NGN"), "₦")
        self.assertEqual(get_currency_symbol("cad"), "C$")
        self.assertEqual(get_currency_symbol("CHF"), "CHF")


class TestFormatting(unittest.TestCase):
    """Compact and full price formatting."""

    def test_small_amount(self) -> None:
        self.assertEqual(format_price(12.5), "12.50")

    def test_thousands_suffix(self) -> None:
        self.assertEqual(format_price(1500), "1.50K")

    def test_millions_suffix(self) -> None:
        self.assertEqual(format_price(2_000_000), "2.00M")

    def test_nan_formats_as_zero(self) -> None:
        self.assertEqual(format_price(float("nan")), "0.00")

    def test_full_format_with_grouping(self) -> None:
        self.assertEqual(
            format_price_with_currency(1234.5, "USD"), "$1,234.50"
        )

    def test_compact_format(self) -> None:
        self.assertEqual(
            format_price_with_currency(450000, "NGN", compact=True),
            "₦450.00K",
        )
