# price_checker/pricing/currency.py

"""Supported currency set, symbols and display formatting."""

import logging
import math

from price_checker.config.settings import Settings

logger = logging.getLogger("price_checker.currency")

BASE_CURRENCY: str = Settings.BASE_CURRENCY

# ISO 4217 code -> display symbol.  Key order is the canonical order.
CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "NGN": "₦",
    "INR": "₹",
    "CAD": "C$",
    "AUD": "A$",
    "JPY": "¥",
}

SUPPORTED_CURRENCIES: tuple[str, ...] = tuple(CURRENCY_SYMBOLS)


def is_supported(code: str | None) -> bool:
    """Return True if *code* names one of the supported currencies."""
    return bool(code) and code.strip().upper() in CURRENCY_SYMBOLS


def coerce_currency(code: str | None) -> str:
    """Upper-case a currency code, falling back to the base currency."""
    if code and is_supported(code):
        return code.strip().upper()
    if code:
        logger.debug(
            "Unsupported currency '%s', falling back to %s",
            code,
            BASE_CURRENCY,
        )
    return BASE_CURRENCY


def get_currency_symbol(code: str) -> str:
    """Return the display symbol for *code*, or the code itself."""
    return CURRENCY_SYMBOLS.get(code.upper(), code)


def format_price(amount: float, decimals: int = 2) -> str:
    """Compact formatting: ``1.50K`` for thousands, ``2.00M`` for millions."""
    if not isinstance(amount, (int, float)) or math.isnan(amount):
        logger.error("format_price received invalid amount: %r", amount)
        return f"{0:.{decimals}f}"

    magnitude = abs(amount)
    if magnitude >= 1_000_000:
        return f"{amount / 1_000_000:.{decimals}f}M"
    if magnitude >= 1_000:
        return f"{amount / 1_000:.{decimals}f}K"
    return f"{amount:.{decimals}f}"


def format_price_with_currency(
    amount: float,
    code: str,
    compact: bool = False,
) -> str:
    """Prefix a formatted amount with the currency symbol."""
    symbol = get_currency_symbol(code)
    if compact:
        return f"{symbol}{format_price(amount)}"
    return f"{symbol}{amount:,.2f}"
