# price_checker/services/comparison_orchestrator.py

"""Coordinates extraction, caching, the comparison call and conversion."""

import asyncio
import logging
from collections.abc import Mapping

from price_checker.extractors.page_context import PageContext
from price_checker.extractors.site_detector import SiteDetector
from price_checker.filters.identity_key import build_identity_key
from price_checker.models.comparison import (
    CompareResponse,
    ComparisonResult,
    ExtractResponse,
    SitePrice,
)
from price_checker.models.product import ProductListing
from price_checker.pricing.currency import BASE_CURRENCY, coerce_currency
from price_checker.services.comparison_client import ComparisonClient
from price_checker.services.currency_converter import (
    CurrencyConverter,
    convert_amount,
)
from price_checker.storage.comparison_cache import ComparisonCache
from price_checker.storage.preferences import CurrencyPreferenceStore

logger = logging.getLogger("price_checker.orchestrator")


class ComparisonOrchestrator:
    """Serves extraction and comparison requests.

    The cache, rate snapshot and preference store are owned by the
    instance and live for as long as it does.  Identical concurrent
    requests are not coalesced: each cache miss calls the service.
    """

    def __init__(
        self,
        client: ComparisonClient | None = None,
        converter: CurrencyConverter | None = None,
        cache: ComparisonCache | None = None,
        preferences: CurrencyPreferenceStore | None = None,
        detector: SiteDetector | None = None,
    ) -> None:
        self.client = client or ComparisonClient()
        self.converter = converter or CurrencyConverter()
        self.cache = cache or ComparisonCache()
        self.preferences = preferences or CurrencyPreferenceStore()
        self.detector = detector or SiteDetector()
        self.preferences.subscribe(self._on_currency_changed)

    # ── Lifecycle ────────────────────────────────────────

    def start(self) -> None:
        """Start the background cache sweep on the running loop."""
        self.cache.start_sweeper()

    async def stop(self) -> None:
        await self.cache.stop_sweeper()

    # ── Currency preference ──────────────────────────────

    def _on_currency_changed(self, currency: str) -> None:
        removed = self.cache.clear()
        logger.info(
            "Cache cleared after currency change to %s (%d entries)",
            currency,
            removed,
        )

    def set_target_currency(self, currency: str) -> str:
        """Persist a new target currency; clears every cached result."""
        return self.preferences.set(currency)

    # ── Extraction ───────────────────────────────────────

    def extract(self, page: PageContext) -> ExtractResponse:
        """Extract the product on *page* into a caller-facing response."""
        site = self.detector.detect(page)
        if site == "unknown":
            return ExtractResponse(
                success=False, site=site, error="Unsupported site"
            )
        listing = self.detector.extract(page)
        if listing is None:
            return ExtractResponse(
                success=False,
                site=site,
                error="Failed to extract product data",
            )
        return ExtractResponse(success=True, site=site, data=listing)

    # ── Comparison ───────────────────────────────────────

    async def _convert_result(
        self, result: ComparisonResult, target_currency: str
    ) -> ComparisonResult:
        """Fill ``price_converted`` on every candidate and the best deal.

        All prices are converted against a single rate snapshot.
        """
        rates: Mapping[str, float] = {}
        if target_currency != BASE_CURRENCY:
            rates = (await self.converter.get_rates()).rates

        def _convert(price: SitePrice) -> SitePrice:
            amount = convert_amount(
                price.price_usd, BASE_CURRENCY, target_currency, rates
            )
            return price.with_conversion(amount, target_currency)

        prices = [_convert(p) for p in result.all_prices]
        best_deal = (
            _convert(result.best_deal)
            if result.best_deal is not None
            else None
        )
        return ComparisonResult(best_deal=best_deal, all_prices=prices)

    async def compare(
        self,
        listing: ProductListing,
        target_currency: str | None = None,
    ) -> CompareResponse:
        """Compare *listing* across marketplaces.

        Falls back to the stored preference when no target currency is
        given.  Service and network failures come back as an unsuccessful
        response rather than an exception.
        """
        target = coerce_currency(target_currency or self.preferences.get())
        payload = listing.to_request(target)
        key = build_identity_key(listing, target)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Returning cached comparison for '%s'", key)
            return CompareResponse(success=True, data=cached, cached=True)

        try:
            result = await asyncio.to_thread(self.client.compare, payload)
            converted = await self._convert_result(result, target)
        except Exception as e:
            logger.error(
                "Comparison failed for '%s': %s",
                listing.display_title,
                e,
                exc_info=True,
            )
            return CompareResponse(success=False, error=str(e))

        self.cache.set(key, converted)
        return CompareResponse(success=True, data=converted, cached=False)

    async def compare_page(
        self,
        page: PageContext,
        target_currency: str | None = None,
    ) -> CompareResponse:
        """Extract the product on *page*, then compare it."""
        extracted = self.extract(page)
        if not extracted.success or extracted.data is None:
            return CompareResponse(success=False, error=extracted.error)
        return await self.compare(extracted.data, target_currency)
