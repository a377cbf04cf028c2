# price_checker/storage/preferences.py

"""Viewer's target-currency preference with change notifications."""

import json
import logging
from collections.abc import Callable
from pathlib import Path

from price_checker.pricing.currency import BASE_CURRENCY, coerce_currency

logger = logging.getLogger("price_checker.storage")

PreferenceListener = Callable[[str], None]


class CurrencyPreferenceStore:
    """Holds the target currency, optionally persisted to a JSON file.

    Every :meth:`set` notifies subscribers, even when the value is
    unchanged, so dependent caches can be invalidated unconditionally.
    """

    _KEY = "currency_preference"

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._listeners: list[PreferenceListener] = []
        self._currency: str | None = None

    def _read(self) -> str:
        if self.path is None or not self.path.exists():
            return BASE_CURRENCY
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(
                "Could not read currency preference from %s: %s",
                self.path,
                exc,
            )
            return BASE_CURRENCY
        stored = data.get(self._KEY) if isinstance(data, dict) else None
        return coerce_currency(stored)

    def _write(self, currency: str) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({self._KEY: currency}, f, indent=2)

    def get(self) -> str:
        """Return the current preference (base currency by default)."""
        if self._currency is None:
            self._currency = self._read()
        return self._currency

    def set(self, currency: str) -> str:
        """Store a new preference and notify listeners."""
        code = coerce_currency(currency)
        self._write(code)
        self._currency = code
        logger.info("Currency preference set to %s", code)
        for listener in list(self._listeners):
            listener(code)
        return code

    def subscribe(self, listener: PreferenceListener) -> None:
        self._listeners.append(listener)
