# price_checker/extractors/amazon_extractor.py

"""Extractor for Amazon product pages (amazon.com, amazon.co.uk, ...)."""

import logging
import re
from typing import Any

from price_checker.extractors import utils
from price_checker.extractors.page_context import PageContext
from price_checker.models.product import Identifiers, ProductListing
from price_checker.pricing.price_parser import detect_currency, parse_price


class AmazonExtractor:
    """Extract a listing from an Amazon ``/dp/`` or ``/gp/product/`` page.

    The ASIN comes from the URL first and the hidden ``ASIN`` form field
    second.  Model number and barcodes are read from whichever product
    details layout the page uses (technical table or detail bullets).
    """

    site = "amazon"
    _HOST_RE = re.compile(r"(^|\.)amazon\.")
    _ASIN_RE = re.compile(r"/(?:dp|gp/product)/([A-Z0-9]{10})")

    def __init__(self) -> None:
        self.logger = logging.getLogger("price_checker.amazon")
        self.selectors: dict[str, Any] = utils.load_selectors(self.site)

    def is_product_page(self, page: PageContext) -> bool:
        """True for Amazon hosts on a product detail path."""
        return bool(self._HOST_RE.search(page.hostname)) and (
            "/dp/" in page.path or "/gp/product/" in page.path
        )

    def _extract_asin(self, page: PageContext) -> str | None:
        match = self._ASIN_RE.search(page.path)
        if match:
            return match.group(1)
        asin_input = page.select_one(self.selectors["asin_input"])
        return utils.get_attribute(asin_input, "value") or None

    def _extract_specifications(
        self,
        page: PageContext,
        pairs: list[tuple[str, str]],
    ) -> dict[str, str]:
        """Selected variation values first, detail tables second."""
        specs: dict[str, str] = {}
        variations: dict[str, str] = self.selectors.get("variations", {})
        for key, selector in variations.items():
            value = utils.get_text_content(page.select_one(selector))
            if value:
                specs[key] = value
        for key, value in utils.extract_specifications(pairs).items():
            specs.setdefault(key, value)
        return specs

    def _extract(self, page: PageContext) -> ProductListing | None:
        raw_title = utils.select_text(page, self.selectors["title"])
        if not raw_title:
            self.logger.warning(
                "[amazon] Could not find product title on %s", page.url
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
            site="amazon",
            url=page.url,
            image=image,
            identifiers=Identifiers(
                asin=self._extract_asin(page),
                brand=brand or found.get("brand"),
                model_number=found.get("model_number"),
                upc=found.get("upc"),
                ean=found.get("ean"),
                gtin=found.get("gtin"),
                mpn=found.get("mpn"),
                specifications=self._extract_specifications(page, pairs),
            ),
        )
        self.logger.info(
            "[amazon] Extracted '%s' (asin=%s, price=%s %s)",
            listing.display_title,
            listing.identifiers.asin,
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
                "[amazon] Extraction failed: %s", e, exc_info=True
            )
            return None
