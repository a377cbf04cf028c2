# price_checker/extractors/ebay_extractor.py

"""Extractor for eBay item pages."""

import logging
import re
from typing import Any

from price_checker.extractors import utils
from price_checker.extractors.page_context import PageContext
from price_checker.models.product import Identifiers, ProductListing
from price_checker.pricing.price_parser import detect_currency, parse_price


class EbayExtractor:
    """Extract a listing from an eBay ``/itm/`` or ``/p/`` page.

    Item specifics live in the ``ux-labels-values`` grid on current
    layouts and in an ``itemAttr`` table on legacy ones; both are scanned
    and the first value per label wins.
    """

    site = "ebay"
    _HOST_RE = re.compile(r"(^|\.)ebay\.")
    _ITEM_ID_RE = re.compile(r"/itm/(?:[^/]+/)?(\d+)")

    def __init__(self) -> None:
        self.logger = logging.getLogger("price_checker.ebay")
        self.selectors: dict[str, Any] = utils.load_selectors(self.site)

    def is_product_page(self, page: PageContext) -> bool:
        return bool(self._HOST_RE.search(page.hostname)) and (
            "/itm/" in page.path or "/p/" in page.path
        )

    def _extract_item_id(self, page: PageContext) -> str | None:
        match = self._ITEM_ID_RE.search(page.path)
        if match:
            return match.group(1)
        return page.query_param("item")

    def _extract(self, page: PageContext) -> ProductListing | None:
        raw_title = utils.select_text(page, self.selectors["title"])
        if not raw_title:
            self.logger.warning(
                "[ebay] Could not find product title on %s", page.url
            )
            return None

        price_text = utils.select_text(page, self.selectors["price"])
        price = parse_price(price_text)
        currency = detect_currency(price_text, page.hostname)

        pairs = utils.collect_label_tables(
            page, self.selectors["label_tables"]
        )
        found = utils.match_identifiers(pairs)

        specs = utils.extract_specifications(pairs)
        condition = utils.select_text(page, self.selectors["condition"])
        if condition:
            specs["condition"] = condition

        image_el = page.select_one(self.selectors["image"])
        image = utils.best_image_url(
            image_el, self.selectors.get("image_lazy_attrs", ())
        )

        listing = ProductListing(
            title=raw_title,
            display_title=utils.shorten_title(raw_title) or raw_title,
            price=price,
            currency=currency,
            site="ebay",
            url=page.url,
            image=image,
            identifiers=Identifiers(
                item_id=self._extract_item_id(page),
                brand=utils.clean_brand_name(found.get("brand")),
                model_number=found.get("model_number"),
                upc=found.get("upc"),
                ean=found.get("ean"),
                gtin=found.get("gtin"),
                mpn=found.get("mpn"),
                specifications=specs,
            ),
        )
        self.logger.info(
            "[ebay] Extracted '%s' (item=%s, price=%s %s)",
            listing.display_title,
            listing.identifiers.item_id,
            price,
            currency,
        )
        return listing

    def extract(self, page: PageContext) -> ProductListing | None:
        """Extract the listing; any fault yields ``None``."""
        try:
            return self._extract(page)
        except Exception as e:
            self.logger.error(
                "[ebay] Extraction failed: %s", e, exc_info=True
            )
            return None
