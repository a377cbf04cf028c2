# tests/test_preferences.py

"""Tests for the persisted currency preference."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from price_checker.storage.preferences import CurrencyPreferenceStore


class TestCurrencyPreferenceStore(unittest.TestCase):
    """Default, persistence and change notification."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "prefs" / "preferences.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults_to_usd(self) -> None:
        self.assertEqual(CurrencyPreferenceStore(self.path).get(), "USD")
        self.assertEqual(CurrencyPreferenceStore().get(), "USD")

    def test_set_persists_across_instances(self) -> None:
        CurrencyPreferenceStore(self.path).set("ngn")
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f), {"currency_preference": "NGN"})
        self.assertEqual(CurrencyPreferenceStore(self.path).get(), "NGN")

    def test_unsupported_code_coerced(self) -> None:
        store = CurrencyPreferenceStore(self.path)
        self.assertEqual(store.set("BTC"), "USD")

    def test_corrupt_file_falls_back(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("price_checker.storage", level="ERROR"):
            self.assertEqual(CurrencyPreferenceStore(self.path).get(), "USD")

    def test_listeners_notified_even_when_unchanged(self) -> None:
        store = CurrencyPreferenceStore(self.path)
        listener = MagicMock()
        store.subscribe(listener)
        store.set("EUR")
        store.set("EUR")
        self.assertEqual(listener.call_count, 2)
        listener.assert_called_with("EUR")

    def test_failed_write_keeps_previous_value(self) -> None:
        store = CurrencyPreferenceStore(self.path)
        listener = MagicMock()
        store.subscribe(listener)
        with patch.object(store, "_write", side_effect=OSError("read-only")):
            with self.assertRaises(OSError):
                store.set("EUR")
        self.assertEqual(store.get(), "USD")
        listener.assert_not_called()


if __name__ == "__main__":
    unittest.main()
