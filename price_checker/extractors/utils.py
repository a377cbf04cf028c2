# price_checker/extractors/utils.py

"""Null-safe DOM helpers shared by the site extractors.

Every helper tolerates missing elements and returns ``None`` rather than
raising, so an extractor can chain ordered fallbacks without guarding each
lookup.
"""

import json
import logging
import re
from collections.abc import Iterable, Sequence
from typing import Any

from bs4 import Tag

from price_checker.config.settings import Settings
from price_checker.extractors.page_context import PageContext

logger = logging.getLogger("price_checker.extractors")

_INVISIBLE_RE = re.compile(r"[\u200b-\u200f\ufeff]")
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_PUNCT_RE = re.compile(r"^[:\-\s]+")
_ITEM_SPLIT_RE = re.compile(r"[:\-]")
_RESOLUTION_RE = re.compile(r"\d+")

_BRAND_PREFIXES = (
    re.compile(r"^Visit the\s+", re.IGNORECASE),
    re.compile(r"^Brand:\s*", re.IGNORECASE),
    re.compile(r"^By\s+", re.IGNORECASE),
)
_BRAND_SUFFIXES = (
    re.compile(r"\s+Store$", re.IGNORECASE),
    re.compile(r"\s+Official$", re.IGNORECASE),
)

DEFAULT_LABEL_SELECTOR = "th, td:first-child, .a-span3, .label"
DEFAULT_VALUE_SELECTOR = "td:last-child, .a-span9, .value"

# Label patterns for identifier fields, checked case-insensitively
IDENTIFIER_PATTERNS: dict[str, re.Pattern[str]] = {
    "brand": re.compile(r"^brand\b", re.IGNORECASE),
    "model_number": re.compile(r"\bmodel\b(?!\s*name)", re.IGNORECASE),
    "upc": re.compile(r"\bupc\b|universal product code", re.IGNORECASE),
    "ean": re.compile(r"\bean\b|european article number", re.IGNORECASE),
    "gtin": re.compile(r"gtin|global trade item", re.IGNORECASE),
    "mpn": re.compile(r"\bmpn\b|manufacturer part", re.IGNORECASE),
    "sku": re.compile(r"\bsku\b", re.IGNORECASE),
}

# Specification whitelist: canonical key -> label pattern
SPEC_PATTERNS: dict[str, re.Pattern[str]] = {
    "color": re.compile(r"colou?r", re.IGNORECASE),
    "size": re.compile(r"\bsize\b", re.IGNORECASE),
    "storage": re.compile(r"storage|capacity", re.IGNORECASE),
    "style": re.compile(r"\bstyle\b", re.IGNORECASE),
}


def load_selectors(site: str) -> dict[str, Any]:
    """Load the ordered selector lists for *site* from selectors.json."""
    with open(Settings.SELECTORS_PATH, encoding="utf-8") as f:
        all_selectors: dict[str, Any] = json.load(f)
    result: dict[str, Any] = all_selectors.get(site, {})
    return result


def clean_text(text: str | None) -> str | None:
    """Drop zero-width/direction marks and collapse whitespace."""
    if not text:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", _INVISIBLE_RE.sub("", text)).strip()
    return cleaned or None


def get_text_content(element: Tag | None) -> str | None:
    """Return the normalised text of *element*, or ``None`` if empty."""
    if element is None:
        return None
    return clean_text(element.get_text())


def get_attribute(element: Tag | None, attr: str) -> str | None:
    """Return an attribute value as a string, or ``None``."""
    if element is None:
        return None
    value = element.get(attr)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def query_selector(
    page: PageContext, selectors: Sequence[str]
) -> Tag | None:
    """Return the first element matched by the ordered selector list."""
    for selector in selectors:
        element = page.select_one(selector)
        if element is not None:
            return element
    return None


def select_text(
    page: PageContext, selectors: Sequence[str]
) -> str | None:
    """Return the first non-empty text across the ordered selector list."""
    for selector in selectors:
        text = get_text_content(page.select_one(selector))
        if text:
            return text
    return None


def get_meta_content(page: PageContext, name: str) -> str | None:
    """Read ``<meta property=... content=...>`` or ``<meta name=...>``."""
    meta = page.select_one(
        f'meta[property="{name}"], meta[name="{name}"]'
    )
    return get_attribute(meta, "content")


def clean_brand_name(brand: str | None) -> str | None:
    """Strip marketplace boilerplate such as ``Visit the X Store``."""
    if not brand:
        return None
    cleaned = brand.strip()
    for prefix in _BRAND_PREFIXES:
        cleaned = prefix.sub("", cleaned)
    for suffix in _BRAND_SUFFIXES:
        cleaned = suffix.sub("", cleaned)
    return cleaned.strip() or None


def shorten_title(
    title: str | None,
    max_words: int = Settings.TITLE_MAX_WORDS,
) -> str | None:
    """Truncate *title* to its first *max_words* words."""
    if not title:
        return None
    words = title.split()
    if len(words) <= max_words:
        return title.strip()
    return " ".join(words[:max_words])


def _split_item_text(text: str) -> tuple[str, str] | None:
    """Split ``Label: Value`` / ``Label - Value`` on the first delimiter."""
    parts = _ITEM_SPLIT_RE.split(text, maxsplit=1)
    if len(parts) < 2:
        return None
    label, value = parts[0].strip(), parts[1].strip()
    if not label or not value:
        return None
    return label, value


def scan_label_values(
    page: PageContext,
    row_selector: str,
    label_selector: str = DEFAULT_LABEL_SELECTOR,
    value_selector: str = DEFAULT_VALUE_SELECTOR,
) -> list[tuple[str, str]]:
    """Collect ``(label, value)`` pairs from a specification table.

    Rows with distinct label and value cells are read directly.  List
    items without a value cell are treated as ``Label: Value`` text.
    Labels are returned lower-cased without trailing colons.
    """
    pairs: list[tuple[str, str]] = []
    for row in page.select(row_selector):
        label_cell = row.select_one(label_selector)
        value_cell = row.select_one(value_selector)
        if value_cell is label_cell:
            value_cell = None

        if value_cell is None:
            if row.name != "li":
                continue
            text = get_text_content(row)
            split = _split_item_text(text) if text else None
            if split:
                label, value = split
                pairs.append((label.lower(), value))
            continue

        label = get_text_content(label_cell)
        value = get_text_content(value_cell)
        if not label or not value:
            continue
        label = label.rstrip(": ").lower()
        value = _LEADING_PUNCT_RE.sub("", value).strip()
        if value:
            pairs.append((label, value))
    return pairs


def first_match(
    pairs: Iterable[tuple[str, str]],
    pattern: re.Pattern[str],
) -> str | None:
    """Return the value of the first pair whose label matches."""
    for label, value in pairs:
        if pattern.search(label):
            return value
    return None


def extract_from_table(
    page: PageContext,
    row_selector: str,
    pattern: re.Pattern[str],
) -> str | None:
    """Scan a table for the first label matching *pattern*."""
    return first_match(scan_label_values(page, row_selector), pattern)


def match_identifiers(
    pairs: Sequence[tuple[str, str]],
) -> dict[str, str]:
    """Map scanned labels onto identifier fields (first hit per field)."""
    found: dict[str, str] = {}
    for field_name, pattern in IDENTIFIER_PATTERNS.items():
        value = first_match(pairs, pattern)
        if value:
            found[field_name] = value
    return found


def extract_specifications(
    pairs: Sequence[tuple[str, str]],
) -> dict[str, str]:
    """Keep whitelisted attributes only; other labels are dropped."""
    specs: dict[str, str] = {}
    for label, value in pairs:
        for key, pattern in SPEC_PATTERNS.items():
            if key not in specs and pattern.search(label):
                specs[key] = value
                break
    return specs


def collect_label_tables(
    page: PageContext,
    tables: Sequence[dict[str, str]],
) -> list[tuple[str, str]]:
    """Scan every configured table in order and concatenate the pairs."""
    pairs: list[tuple[str, str]] = []
    for table in tables:
        pairs.extend(
            scan_label_values(
                page,
                table["rows"],
                table.get("label", DEFAULT_LABEL_SELECTOR),
                table.get("value", DEFAULT_VALUE_SELECTOR),
            )
        )
    return pairs


def _resolution_rank(key: str) -> int:
    """Rank ``"1500x1500"`` / ``"1500w"`` style keys by pixel count."""
    numbers = [int(n) for n in _RESOLUTION_RE.findall(key)]
    if not numbers:
        return 0
    rank = 1
    for n in numbers[:2]:
        rank *= n
    return rank


def _best_from_resolution_map(data: dict[str, Any]) -> str | None:
    """Pick the highest-resolution URL from an embedded image map.

    Handles both ``{url: [width, height]}`` (Amazon) and
    ``{resolution: url}`` shapes.
    """
    best: tuple[int, str] | None = None
    for key, value in data.items():
        if isinstance(value, (list, tuple)) and len(value) >= 2:
            candidate = (int(value[0]) * int(value[1]), key)
        elif isinstance(value, str):
            candidate = (_resolution_rank(key), value)
        else:
            continue
        if best is None or candidate[0] >= best[0]:
            best = candidate
    return best[1] if best else None


def _last_srcset_url(srcset: str) -> str | None:
    entries = [e.strip() for e in srcset.split(",") if e.strip()]
    if not entries:
        return None
    return entries[-1].split()[0]


def best_image_url(
    element: Tag | None,
    lazy_attrs: Sequence[str] = ("data-src",),
) -> str | None:
    """Return the best available image URL for an ``<img>`` element.

    Preference: last ``srcset`` entry, highest key of
    ``data-a-dynamic-image``, lazy-load attributes, then ``src``.
    """
    if element is None:
        return None

    srcset = get_attribute(element, "srcset")
    if srcset:
        url = _last_srcset_url(srcset)
        if url:
            return url

    dynamic = get_attribute(element, "data-a-dynamic-image")
    if dynamic:
        try:
            data = json.loads(dynamic)
        except json.JSONDecodeError:
            logger.warning("Failed to parse dynamic image data")
        else:
            if isinstance(data, dict) and data:
                url = _best_from_resolution_map(data)
                if url:
                    return url

    for attr in lazy_attrs:
        url = get_attribute(element, attr)
        if url:
            return url

    return get_attribute(element, "src") or None
