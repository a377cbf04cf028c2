# price_checker/models/comparison.py

"""Comparison result models exchanged with the comparison service."""

from dataclasses import dataclass, field, replace
from typing import Any

from price_checker.models.product import ProductListing


def _to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a number that may arrive serialised as a string."""
    if value is None or value == "":
        return default
    return float(value)


@dataclass
class SitePrice:
    """A single candidate listing returned by the comparison service."""

    site: str
    title: str
    price: float
    currency: str
    price_usd: float
    link: str
    image: str | None = None
    match_confidence: int | None = None
    price_converted: float | None = None
    target_currency: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SitePrice":
        """Build from service JSON (decimals may be strings)."""
        site = str(data.get("site", ""))
        price_usd = data.get("price_usd")
        if price_usd is None or price_usd == "":
            raise ValueError(f"Candidate from '{site}' has no price_usd")
        confidence = data.get("match_confidence")
        converted = data.get("price_converted")
        return cls(
            site=site,
            title=str(data.get("title", "")),
            price=_to_float(data.get("price")),
            currency=str(data.get("currency") or "USD"),
            price_usd=float(price_usd),
            link=str(data.get("link", "")),
            image=data.get("image") or None,
            match_confidence=(
                int(confidence) if confidence is not None else None
            ),
            price_converted=(
                _to_float(converted) if converted is not None else None
            ),
            target_currency=data.get("target_currency"),
        )

    def with_conversion(
        self, amount: float, target_currency: str
    ) -> "SitePrice":
        """Return a copy carrying the amount in the viewer's currency."""
        return replace(
            self,
            price_converted=amount,
            target_currency=target_currency,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "site": self.site,
            "title": self.title,
            "price": self.price,
            "currency": self.currency,
            "price_usd": self.price_usd,
            "price_converted": self.price_converted,
            "target_currency": self.target_currency,
            "link": self.link,
            "image": self.image,
            "match_confidence": self.match_confidence,
        }


def _cheapest(prices: list[SitePrice]) -> SitePrice | None:
    """Return the first candidate with the lowest USD price."""
    if not prices:
        return None
    return min(prices, key=lambda p: p.price_usd)


@dataclass
class ComparisonResult:
    """All candidate prices plus the globally cheapest one."""

    best_deal: SitePrice | None = None
    all_prices: list[SitePrice] = field(
        default_factory=lambda: list[SitePrice]()
    )

    @classmethod
    def from_prices(cls, prices: list[SitePrice]) -> "ComparisonResult":
        """Sort candidates by USD price and pick the best deal."""
        ordered = sorted(prices, key=lambda p: p.price_usd)
        return cls(best_deal=_cheapest(ordered), all_prices=ordered)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComparisonResult":
        """Parse service JSON, re-deriving ``best_deal`` from the list.

        Candidate order is preserved as returned by the service.
        """
        raw_prices = data.get("all_prices") or []
        prices = [SitePrice.from_dict(p) for p in raw_prices]
        return cls(best_deal=_cheapest(prices), all_prices=prices)

    def to_dict(self) -> dict[str, Any]:
        return {
            "best_deal": (
                self.best_deal.to_dict() if self.best_deal else None
            ),
            "all_prices": [p.to_dict() for p in self.all_prices],
        }


@dataclass
class CompareResponse:
    """Caller-facing outcome of a comparison request."""

    success: bool
    data: ComparisonResult | None = None
    cached: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "data": self.data.to_dict() if self.data else None,
            "cached": self.cached,
        }


@dataclass
class ExtractResponse:
    """Caller-facing outcome of a page extraction request."""

    success: bool
    site: str
    data: ProductListing | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": self.success,
            "site": self.site,
        }
        if self.success and self.data is not None:
            result["data"] = self.data.to_dict()
        else:
            result["error"] = self.error
        return result
