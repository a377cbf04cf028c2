# price_checker/services/currency_converter.py

"""Exchange-rate snapshot management and currency conversion.

All conversions pivot through the base currency (USD): an amount is
divided by its source rate and multiplied by the target rate.  The live
rate table is cached for ``Settings.EXCHANGE_RATE_TTL`` seconds; when the
rate API is unreachable the static ``Settings.FALLBACK_RATES`` table is
used instead.
"""

import asyncio
import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from price_checker.config.settings import Settings
from price_checker.pricing.currency import BASE_CURRENCY, SUPPORTED_CURRENCIES

logger = logging.getLogger("price_checker.converter")

RateFetcher = Callable[[str], dict[str, float]]


class ExchangeRateError(Exception):
    """Raised when the exchange-rate API returns no usable table."""


@dataclass(frozen=True)
class ExchangeRateSet:
    """Units of each currency per one unit of the base currency."""

    rates: dict[str, float]
    fetched_at: float
    base: str = BASE_CURRENCY
    is_fallback: bool = False

    @classmethod
    def fallback(cls, now: float | None = None) -> "ExchangeRateSet":
        """Snapshot built from the static fallback table."""
        return cls(
            rates=dict(Settings.FALLBACK_RATES),
            fetched_at=time.time() if now is None else now,
            is_fallback=True,
        )

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.fetched_at < ttl


def _rate_for(code: str, rates: Mapping[str, float]) -> float:
    return rates.get(code) or Settings.FALLBACK_RATES.get(code) or 1.0


def convert_amount(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, float],
) -> float:
    """Convert *amount* between currencies using a fixed rate table.

    Identical currencies return *amount* untouched, with no round trip
    through the base currency.
    """
    if from_currency == to_currency:
        return amount
    base_amount = amount / _rate_for(from_currency, rates)
    return base_amount * _rate_for(to_currency, rates)


def fetch_exchange_rates(
    base: str = BASE_CURRENCY,
    session: curl_requests.Session | None = None,
) -> dict[str, float]:
    """Fetch the live rate table keyed to *base*.

    Raises:
        ExchangeRateError: on a non-200 status or a malformed body.
    """
    http = session or curl_requests.Session(
        impersonate=Settings.IMPERSONATE_BROWSER
    )
    url = Settings.EXCHANGE_RATE_API.format(base=base)
    resp = http.get(
        url,
        headers={"Accept": "application/json"},
        timeout=Settings.REQUEST_TIMEOUT,
    )
    if resp.status_code != 200:
        raise ExchangeRateError(
            f"Rate API returned HTTP {resp.status_code}"
        )
    try:
        data = json.loads(resp.text)
    except json.JSONDecodeError as exc:
        raise ExchangeRateError("Rate API returned invalid JSON") from exc

    raw = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(raw, dict) or not raw:
        raise ExchangeRateError("Rate API response has no rates")

    return {
        str(code).upper(): float(rate)
        for code, rate in raw.items()
        if isinstance(rate, (int, float)) and rate > 0
    }


class CurrencyConverter:
    """Owns the exchange-rate snapshot and converts amounts with it."""

    def __init__(
        self,
        fetcher: RateFetcher | None = None,
        ttl: float | None = None,
    ) -> None:
        self.fetcher: RateFetcher = fetcher or fetch_exchange_rates
        self.ttl: float = (
            Settings.EXCHANGE_RATE_TTL if ttl is None else ttl
        )
        self._snapshot: ExchangeRateSet | None = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> ExchangeRateSet | None:
        return self._snapshot

    def _fresh_snapshot(self) -> ExchangeRateSet | None:
        snapshot = self._snapshot
        if snapshot is not None and snapshot.is_fresh(time.time(), self.ttl):
            return snapshot
        return None

    async def get_rates(self) -> ExchangeRateSet:
        """Return a fresh snapshot, refreshing it when stale or absent.

        A failed refresh returns the fallback table without caching it, so
        the next call tries the live API again.
        """
        snapshot = self._fresh_snapshot()
        if snapshot is not None:
            return snapshot

        async with self._lock:
            snapshot = self._fresh_snapshot()
            if snapshot is not None:
                return snapshot

            try:
                fetched = await asyncio.to_thread(
                    self.fetcher, BASE_CURRENCY
                )
            except Exception as exc:
                logger.error(
                    "Failed to fetch exchange rates, using fallback: %s",
                    exc,
                    exc_info=True,
                )
                return ExchangeRateSet.fallback()

            rates = dict(fetched)
            for code in SUPPORTED_CURRENCIES:
                if not rates.get(code):
                    rates[code] = Settings.FALLBACK_RATES[code]

            self._snapshot = ExchangeRateSet(
                rates=rates, fetched_at=time.time()
            )
            logger.info(
                "Fetched live exchange rates (%d currencies)", len(rates)
            )
            return self._snapshot

    def invalidate(self) -> None:
        """Drop the snapshot so the next lookup refetches."""
        self._snapshot = None

    async def convert(
        self, amount: float, from_currency: str, to_currency: str
    ) -> float:
        if from_currency == to_currency:
            return amount
        snapshot = await self.get_rates()
        return convert_amount(
            amount, from_currency, to_currency, snapshot.rates
        )

    async def convert_from_base(
        self, base_amount: float, to_currency: str
    ) -> float:
        """Convert a USD-normalised amount into *to_currency*."""
        return await self.convert(base_amount, BASE_CURRENCY, to_currency)

    async def normalize_to_base(
        self, amount: float, from_currency: str
    ) -> float:
        return await self.convert(amount, from_currency, BASE_CURRENCY)
