# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from price_checker.config.settings import Settings
from price_checker.pricing.currency import SUPPORTED_CURRENCIES


class TestSettings(unittest.TestCase):
    """Verify Settings constants and the site registry."""

    def test_request_delay_is_positive_float(self) -> None:
        self.assertIsInstance(Settings.REQUEST_DELAY, float)
        self.assertGreater(Settings.REQUEST_DELAY, 0)

    def test_request_timeout_is_positive_int(self) -> None:
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_cache_windows(self) -> None:
        """Results stay fresh for five minutes; sweeps run half-hourly."""
        self.assertEqual(Settings.COMPARISON_CACHE_TTL, 300.0)
        self.assertEqual(Settings.CACHE_SWEEP_INTERVAL, 1800.0)
        self.assertEqual(Settings.EXCHANGE_RATE_TTL, 3600.0)

    def test_api_base_url_is_https(self) -> None:
        self.assertTrue(Settings.API_BASE_URL.startswith("https://"))

    def test_fallback_rates_cover_supported_currencies(self) -> None:
        self.assertEqual(
            set(Settings.FALLBACK_RATES), set(SUPPORTED_CURRENCIES)
        )
        self.assertEqual(Settings.FALLBACK_RATES["USD"], 1.0)
        self.assertTrue(all(r > 0 for r in Settings.FALLBACK_RATES.values()))

    def test_site_registry_order(self) -> None:
        ids = [s["id"] for s in Settings.SUPPORTED_SITES]
        self.assertEqual(ids, ["amazon", "ebay", "jumia", "konga"])

    def test_registry_entries_have_required_keys(self) -> None:
        for entry in Settings.SUPPORTED_SITES:
            with self.subTest(site=entry.get("id")):
                self.assertIn("label", entry)
                self.assertTrue(
                    entry["extractor"].startswith("price_checker.extractors.")
                )

    def test_selectors_file_exists(self) -> None:
        self.assertIsInstance(Settings.SELECTORS_PATH, Path)
        self.assertTrue(Settings.SELECTORS_PATH.exists())


if __name__ == "__main__":
    unittest.main()
