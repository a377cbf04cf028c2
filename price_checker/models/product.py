# price_checker/models/product.py

"""Product listing model produced by the site extractors."""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

SiteType = Literal["amazon", "ebay", "jumia", "konga", "unknown"]


@dataclass
class Identifiers:
    """Marketplace and manufacturer codes usable for cross-site matching."""

    brand: str | None = None
    model_number: str | None = None
    upc: str | None = None
    ean: str | None = None
    gtin: str | None = None
    asin: str | None = None
    item_id: str | None = None  # eBay item number, Jumia/Konga SKU
    mpn: str | None = None
    specifications: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    def strong_identifiers(self) -> list[str]:
        """Return present unique codes in identity-key order."""
        ordered = (
            self.item_id,
            self.asin,
            self.upc,
            self.ean,
            self.gtin,
            self.mpn,
        )
        return [code.strip() for code in ordered if code and code.strip()]

    def to_dict(self) -> dict[str, Any]:
        """Serialise, omitting empty fields."""
        return {k: v for k, v in asdict(self).items() if v}


@dataclass
class ProductListing:
    """A product as extracted from a single marketplace page.

    ``title`` is the untruncated page title and feeds matching and the
    identity key; ``display_title`` is the shortened form for display.
    """

    title: str
    site: SiteType
    url: str
    display_title: str = ""
    price: float | None = None
    currency: str = "USD"
    image: str | None = None
    identifiers: Identifiers = field(default_factory=Identifiers)

    def __post_init__(self) -> None:
        if not self.display_title:
            self.display_title = self.title
        if self.price is not None and self.price < 0:
            raise ValueError(f"Negative price: {self.price}")

    def to_dict(self) -> dict[str, Any]:
        """Serialise the listing for JSON output."""
        return {
            "title": self.title,
            "display_title": self.display_title,
            "price": self.price,
            "currency": self.currency,
            "site": self.site,
            "url": self.url,
            "image": self.image,
            "identifiers": self.identifiers.to_dict(),
        }

    def to_request(self, target_currency: str) -> dict[str, Any]:
        """Build the payload sent to the comparison service."""
        payload: dict[str, Any] = {
            "title": self.title,
            "current_price": self.price,
            "currency": self.currency,
            "current_site": self.site,
            "url": self.url,
            "image": self.image,
            "identifiers": self.identifiers.to_dict(),
            "target_currency": target_currency,
        }
        return {k: v for k, v in payload.items() if v is not None}
