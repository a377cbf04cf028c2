# tests/test_site_detector.py

"""Tests for site detection and extractor dispatch."""

import unittest
from unittest.mock import MagicMock

from price_checker.extractors.page_context import PageContext
from price_checker.extractors.site_detector import (
    SiteDetector,
    detect_current_site,
    extract_product_from_page,
    is_supported_product_page,
)
from price_checker.models.product import ProductListing


def _page(url: str, html: str = "<html><body></body></html>") -> PageContext:
    return PageContext.from_html(url, html)


class TestSiteDetection(unittest.TestCase):
    """URL-based detection across the four registered marketplaces."""

    def setUp(self) -> None:
        self.detector = SiteDetector()

    def test_registry_order(self) -> None:
        sites = [e.site for e in self.detector.extractors]
        self.assertEqual(sites, ["amazon", "ebay", "jumia", "konga"])

    def test_detects_each_site(self) -> None:
        cases = {
            "https://www.amazon.com/dp/B0CHX1W1XY": "amazon",
            "https://www.ebay.com/itm/256012345678": "ebay",
            "https://www.jumia.com.ng/phone-abc123.html": "jumia",
            "https://www.konga.com/product/rice-5441318": "konga",
        }
        for url, expected in cases.items():
            with self.subTest(url=url):
                self.assertEqual(self.detector.detect(_page(url)), expected)

    def test_non_product_pages_are_unknown(self) -> None:
        for url in (
            "https://www.amazon.com/s?k=iphone",
            "https://www.ebay.com/",
            "https://www.jumia.com.ng/phones/",
            "https://example.com/dp/B0CHX1W1XY",
        ):
            with self.subTest(url=url):
                self.assertEqual(self.detector.detect(_page(url)), "unknown")
                self.assertFalse(self.detector.is_supported(_page(url)))

    def test_unknown_page_is_never_extracted(self) -> None:
        fake = MagicMock()
        fake.site = "amazon"
        fake.is_product_page.return_value = False
        detector = SiteDetector(extractors=[fake])

        with self.assertLogs("price_checker.detector", level="WARNING"):
            self.assertIsNone(detector.extract(_page("https://x.test/")))
        fake.extract.assert_not_called()

    def test_first_matching_extractor_wins(self) -> None:
        listing = ProductListing(
            title="Thing", site="ebay", url="https://x.test/"
        )
        first = MagicMock(site="ebay")
        first.is_product_page.return_value = True
        first.extract.return_value = listing
        second = MagicMock(site="konga")
        second.is_product_page.return_value = True

        detector = SiteDetector(extractors=[first, second])
        page = _page("https://x.test/")
        self.assertEqual(detector.detect(page), "ebay")
        self.assertIs(detector.extract(page), listing)
        second.extract.assert_not_called()


class TestModuleHelpers(unittest.TestCase):
    """Module-level helpers share one default detector."""

    def test_helpers(self) -> None:
        page = _page(
            "https://www.konga.com/product/rice-5441318",
            "<html><body><h1>Rice 50kg</h1></body></html>",
        )
        self.assertEqual(detect_current_site(page), "konga")
        self.assertTrue(is_supported_product_page(page))
        listing = extract_product_from_page(page)
        assert listing is not None
        self.assertEqual(listing.title, "Rice 50kg")
        self.assertIsNone(listing.price)


if __name__ == "__main__":
    unittest.main()
