# tests/test_page_fetcher.py

"""Tests for PageFetcher retry, block detection and fallback logic."""

import unittest
from unittest.mock import MagicMock, patch

from price_checker.services.page_fetcher import PageFetcher

_PRODUCT_HTML = (
    "<html><body>"
    + "<p>filler</p>" * 600
    + '<span id="productTitle">Kindle</span></body></html>'
)


def _resp(status: int, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


class TestPageFetcher(unittest.TestCase):
    """Tests for PageFetcher using a mocked curl_cffi session."""

    @patch("price_checker.services.page_fetcher.curl_requests.Session")
    def setUp(self, mock_session_cls: MagicMock) -> None:
        self.session = MagicMock()
        mock_session_cls.return_value = self.session
        self.fetcher = PageFetcher()

    def test_successful_fetch_returns_page(self) -> None:
        self.session.get.return_value = _resp(200, _PRODUCT_HTML)
        page = self.fetcher.fetch("https://www.amazon.com/dp/B0CHX1W1XY")
        assert page is not None
        self.assertEqual(page.hostname, "www.amazon.com")
        self.assertIsNotNone(page.select_one("#productTitle"))

    def test_retries_after_server_error(self) -> None:
        self.session.get.side_effect = [
            _resp(500),
            _resp(200, _PRODUCT_HTML),
        ]
        page = self.fetcher.fetch("https://www.ebay.com/itm/1")
        self.assertIsNotNone(page)
        self.assertEqual(self.session.get.call_count, 2)

    def test_rate_limit_escalates_delay(self) -> None:
        self.session.get.side_effect = [
            _resp(429),
            _resp(200, _PRODUCT_HTML),
        ]
        self.fetcher.fetch("https://www.ebay.com/itm/1")
        # Delay resets after the successful attempt
        self.assertEqual(
            self.fetcher._current_delay, self.fetcher.settings.REQUEST_DELAY
        )

    def test_delay_is_capped(self) -> None:
        for _ in range(10):
            self.fetcher._escalate_delay()
        settings = self.fetcher.settings
        self.assertEqual(
            self.fetcher._current_delay,
            settings.REQUEST_DELAY * settings.MAX_DELAY_MULTIPLIER,
        )

    def test_cloudflare_challenge_is_blocked(self) -> None:
        self.assertTrue(
            self.fetcher._is_blocked(
                "<html><title>Just a moment...</title></html>"
            )
        )

    def test_captcha_on_thin_page_is_blocked(self) -> None:
        self.assertTrue(
            self.fetcher._is_blocked(
                "<html><body>Enter the characters (captcha)</body></html>"
            )
        )

    def test_captcha_word_in_large_page_is_ignored(self) -> None:
        self.assertFalse(self.fetcher._is_blocked(_PRODUCT_HTML + "captcha"))

    @patch("price_checker.services.page_fetcher.cloudscraper.create_scraper")
    def test_falls_back_to_cloudscraper(
        self, mock_create: MagicMock
    ) -> None:
        self.session.get.return_value = _resp(403)
        scraper = MagicMock()
        scraper.get.return_value = _resp(200, _PRODUCT_HTML)
        mock_create.return_value = scraper

        page = self.fetcher.fetch("https://www.jumia.com.ng/x.html")
        self.assertIsNotNone(page)
        self.assertEqual(
            self.session.get.call_count, self.fetcher.settings.MAX_RETRIES
        )
        scraper.get.assert_called_once()

    @patch("price_checker.services.page_fetcher.cloudscraper.create_scraper")
    def test_returns_none_when_everything_fails(
        self, mock_create: MagicMock
    ) -> None:
        self.session.get.side_effect = ConnectionError("reset")
        mock_create.side_effect = RuntimeError("no scraper")
        with self.assertLogs("price_checker.fetcher", level="ERROR"):
            self.assertIsNone(self.fetcher.fetch("https://www.konga.com/"))


if __name__ == "__main__":
    unittest.main()
