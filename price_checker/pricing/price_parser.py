# price_checker/pricing/price_parser.py

"""Locale-tolerant price parsing and currency detection.

Marketplaces render prices as loosely formatted text: ``$999.99``,
``₦450,000.00``, ``EUR 1.299,99``, ``US $1,299.99``.  :func:`parse_price`
turns such text into a float without ever raising, and
:func:`detect_currency` resolves the ISO code from the symbol first and the
page's hostname second.
"""

import logging
import math
import re

from price_checker.pricing.currency import BASE_CURRENCY, SUPPORTED_CURRENCIES

logger = logging.getLogger("price_checker.pricing")

_SYMBOLS_RE = re.compile(r"[$£€₦₹¥]")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d[\d.,]*")
_CODES_RE = re.compile(
    r"\b(" + "|".join(SUPPORTED_CURRENCIES) + r")\b"
)

# Prefixed dollar tokens must be tested before the bare "$"
_PREFIXED_DOLLARS: tuple[tuple[str, str], ...] = (
    ("CA$", "CAD"),
    ("C$", "CAD"),
    ("AU$", "AUD"),
    ("A$", "AUD"),
)

_SYMBOLS: tuple[tuple[str, str], ...] = (
    ("€", "EUR"),
    ("£", "GBP"),
    ("₦", "NGN"),
    ("₹", "INR"),
    ("¥", "JPY"),
)

_HOST_HINTS: tuple[tuple[str, str], ...] = (
    ("konga.com", "NGN"),
    ("jumia.com.ng", "NGN"),
)

# Longer suffixes first: ".com.au" must win over ".com"
_DOMAIN_SUFFIXES: tuple[tuple[str, str], ...] = (
    (".co.uk", "GBP"),
    (".com.ng", "NGN"),
    (".ng", "NGN"),
    (".com.au", "AUD"),
    (".au", "AUD"),
    (".co.jp", "JPY"),
    (".jp", "JPY"),
    (".ca", "CAD"),
    (".in", "INR"),
    (".de", "EUR"),
    (".fr", "EUR"),
    (".es", "EUR"),
    (".it", "EUR"),
    (".nl", "EUR"),
    (".com", "USD"),
)


def _normalise_separators(number: str) -> str:
    """Rewrite a digit run so that ``.`` is the only (decimal) separator."""
    has_dot = "." in number
    has_comma = "," in number

    if has_dot and has_comma:
        # The right-most separator is the decimal mark
        if number.rfind(",") > number.rfind("."):
            return number.replace(".", "").replace(",", ".")
        return number.replace(",", "")

    if has_comma:
        parts = number.split(",")
        if len(parts) == 2 and len(parts[1]) == 2:
            return number.replace(",", ".")
        return number.replace(",", "")

    if number.count(".") > 1:
        head, *groups = number.split(".")
        if all(len(g) == 3 for g in groups):
            return head + "".join(groups)
        return head + "".join(groups[:-1]) + "." + groups[-1]

    return number


def parse_price(text: str | None) -> float | None:
    """Parse a price string into a float.

    Returns ``None`` instead of raising when the text holds no
    non-negative number.

    >>> parse_price("₦450,000.00")
    450000.0
    """
    if not text:
        return None

    cleaned = _WHITESPACE_RE.sub("", _SYMBOLS_RE.sub("", text))
    match = _NUMBER_RE.search(cleaned)
    if not match:
        logger.debug("No numeric value in price text '%s'", text)
        return None
    if match.start() > 0 and cleaned[match.start() - 1] == "-":
        logger.debug("Negative price text '%s'", text)
        return None

    number = _normalise_separators(match.group(0).rstrip(".,"))
    try:
        value = float(number)
    except ValueError:
        logger.debug("Unparseable price text '%s'", text)
        return None

    if not math.isfinite(value) or value < 0:
        return None
    return value


def _currency_from_host(hostname: str) -> str | None:
    host = hostname.lower().split(":", 1)[0]
    for hint, code in _HOST_HINTS:
        if hint in host:
            return code
    for suffix, code in _DOMAIN_SUFFIXES:
        if host.endswith(suffix):
            return code
    return None


def detect_currency(
    text: str | None = None,
    hostname: str | None = None,
) -> str:
    """Detect the ISO currency code from price text, then from the host.

    Symbols take priority over the domain, so ``£299.00`` on a ``.com``
    site is GBP.  Falls back to the base currency when nothing matches.
    """
    price_text = text or ""

    for token, code in _PREFIXED_DOLLARS:
        if token in price_text:
            return code

    codes = set(_CODES_RE.findall(price_text.upper()))
    if "$" in price_text:
        if "CAD" in codes:
            return "CAD"
        if "AUD" in codes:
            return "AUD"
        return "USD"

    for symbol, code in _SYMBOLS:
        if symbol in price_text:
            return code

    for code in SUPPORTED_CURRENCIES:
        if code in codes:
            return code

    if hostname:
        from_host = _currency_from_host(hostname)
        if from_host:
            return from_host

    return BASE_CURRENCY
