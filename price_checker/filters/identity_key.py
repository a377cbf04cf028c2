# price_checker/filters/identity_key.py

"""Deterministic cache keys for comparison results."""

from price_checker.models.product import ProductListing
from price_checker.pricing.currency import coerce_currency

KEY_DELIMITER = "|"


def normalize_title(title: str) -> str:
    """Trim, collapse internal whitespace and lower-case a title."""
    return " ".join(title.split()).lower()


def build_identity_key(
    listing: ProductListing, target_currency: str | None
) -> str:
    """Build the cache key for *listing* viewed in *target_currency*.

    Layout: ``title|<strong identifiers...>|currency``.  Missing
    identifiers are omitted, so two extractions of the same product that
    differ only in title spacing or case map to the same key.
    """
    parts = [normalize_title(listing.title)]
    parts.extend(listing.identifiers.strong_identifiers())
    parts.append(coerce_currency(target_currency))
    return KEY_DELIMITER.join(p for p in parts if p).lower()
