# price_checker/extractors/jumia_extractor.py

"""Extractor for Jumia product pages (jumia.com.ng and sister stores)."""

import logging
from typing import Any

from price_checker.extractors import utils
from price_checker.extractors.page_context import PageContext
from price_checker.models.product import Identifiers, ProductListing
from price_checker.pricing.price_parser import detect_currency, parse_price


class JumiaExtractor:
    """Extract a listing from a Jumia ``*.html`` product page.

    Jumia uses utility-class markup (``-fs20 -pts``) that changes between
    deployments, so every field has several selector fallbacks.  The SKU
    is the marketplace item id.
    """

    site = "jumia"

    def __init__(self) -> None:
        self.logger = logging.getLogger("price_checker.jumia")
        self.selectors: dict[str, Any] = utils.load_selectors(self.site)

    def is_product_page(self, page: PageContext) -> bool:
        return "jumia." in page.hostname and ".html" in page.path

    def _extract(self, page: PageContext) -> ProductListing | None:
        raw_title = utils.select_text(page, self.selectors["title"])
        if not raw_title:
            self.logger.warning(
                "[jumia] Could not find product title on %s", page.url
            )
            return None

        price_text = utils.select_text(page, self.selectors["price"])
        price = parse_price(price_text)
        currency = detect_currency(price_text, page.hostname)

        brand = utils.clean_brand_name(
            utils.select_text(page, self.selectors["brand"])
        )

        pairs = utils.collect_label_tables(
            page, self.selectors["label_tables"]
        )
        found = utils.match_identifiers(pairs)

        image_el = page.select_one(self.selectors["image"])
        image = utils.best_image_url(
            image_el, self.selectors.get("image_lazy_attrs", ())
        )

        listing = ProductListing(
            title=raw_title,
            display_title=utils.shorten_title(raw_title) or raw_title,
            price=price,
            currency=currency,
            site="jumia",
            url=page.url,
            image=image,
            identifiers=Identifiers(
                item_id=found.get("sku"),
                brand=brand or utils.clean_brand_name(found.get("brand")),
                model_number=found.get("model_number"),
                specifications=utils.extract_specifications(pairs),
            ),
        )
        self.logger.info(
            "[jumia] Extracted '%s' (sku=%s, price=%s %s)",
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
                "[jumia] Extraction failed: %s", e, exc_info=True
            )
            return None
