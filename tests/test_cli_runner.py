# tests/test_cli_runner.py

"""Tests for the headless CLI runners."""

import io
import json
import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from price_checker.cli import runner
from price_checker.config.settings import Settings
from price_checker.models.comparison import ComparisonResult

FIXTURES_DIR = Path(__file__).parent / "fixtures"

KONGA_URL = "https://www.konga.com/product/nivea-men-deep-impact-5441318"


class _StubClient:
    """Comparison client returning one canned candidate."""

    def compare(self, payload: dict[str, Any]) -> ComparisonResult:
        return ComparisonResult.from_dict(
            {
                "all_prices": [
                    {
                        "site": "jumia",
                        "title": payload["title"],
                        "price": 4000,
                        "currency": "NGN",
                        "price_usd": 2.5,
                        "link": "https://www.jumia.com.ng/nivea.html",
                    }
                ]
            }
        )


class TestCliRunner(unittest.IsolatedAsyncioTestCase):
    """Runner output and exit codes."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        prefs = Path(self._tmp.name) / "preferences.json"
        self._prefs_patch = patch.object(Settings, "PREFERENCES_PATH", prefs)
        self._prefs_patch.start()

    def tearDown(self) -> None:
        self._prefs_patch.stop()
        self._tmp.cleanup()

    def test_extract_from_file(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = runner.run_extract(
                KONGA_URL, str(FIXTURES_DIR / "konga_product.html")
            )
        self.assertEqual(code, 0)
        body = json.loads(out.getvalue())
        self.assertTrue(body["success"])
        self.assertEqual(body["site"], "konga")
        self.assertEqual(body["data"]["price"], 4250.0)

    def test_extract_missing_file(self) -> None:
        self.assertEqual(runner.run_extract(KONGA_URL, "/nope/missing.html"), 1)

    def test_extract_unsupported_site(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = runner.run_extract(
                "https://example.com/item",
                str(FIXTURES_DIR / "konga_product.html"),
            )
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(out.getvalue())["error"], "Unsupported site")

    @patch("price_checker.services.comparison_orchestrator.ComparisonClient")
    async def test_compare_json(self, mock_client_cls: MagicMock) -> None:
        mock_client_cls.return_value = _StubClient()
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await runner.run_compare(
                KONGA_URL,
                str(FIXTURES_DIR / "konga_product.html"),
                "USD",
                "json",
            )
        self.assertEqual(code, 0)
        body = json.loads(out.getvalue())
        self.assertFalse(body["cached"])
        self.assertEqual(body["data"]["best_deal"]["site"], "jumia")
        self.assertEqual(body["data"]["best_deal"]["price_converted"], 2.5)

    def test_set_currency(self) -> None:
        self.assertEqual(runner.run_set_currency("gbp"), 0)
        with open(Settings.PREFERENCES_PATH, encoding="utf-8") as f:
            self.assertEqual(json.load(f)["currency_preference"], "GBP")

    def test_set_unknown_currency(self) -> None:
        self.assertEqual(runner.run_set_currency("BTC"), 1)
        self.assertFalse(Settings.PREFERENCES_PATH.exists())

    @patch("price_checker.cli.runner.CurrencyConverter")
    async def test_rates_with_fallback_exit_code(
        self, mock_converter_cls: MagicMock
    ) -> None:
        from price_checker.services.currency_converter import (
            CurrencyConverter,
        )

        failing = MagicMock(side_effect=RuntimeError("offline"))
        mock_converter_cls.return_value = CurrencyConverter(fetcher=failing)
        with patch("sys.stdout", new_callable=io.StringIO):
            code = await runner.run_rates("EUR")
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
