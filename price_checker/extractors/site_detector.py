# price_checker/extractors/site_detector.py

"""Maps a page to the extractor of the marketplace it belongs to."""

import importlib
import logging
from collections.abc import Sequence
from typing import Any, Protocol

from price_checker.config.settings import Settings
from price_checker.extractors.page_context import PageContext
from price_checker.models.product import ProductListing, SiteType

logger = logging.getLogger("price_checker.detector")


class SiteExtractor(Protocol):
    """Interface every marketplace extractor implements."""

    site: str

    def is_product_page(self, page: PageContext) -> bool: ...

    def extract(self, page: PageContext) -> ProductListing | None: ...


def _load_extractor_class(dotted_path: str) -> type[Any]:
    """Dynamically import an extractor class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class SiteDetector:
    """First-match detection over the registered extractors.

    The registry order in ``Settings.SUPPORTED_SITES`` is the detection
    order.  A page no extractor claims is ``"unknown"`` and is never
    handed to an extractor.
    """

    def __init__(
        self, extractors: Sequence[SiteExtractor] | None = None
    ) -> None:
        if extractors is None:
            extractors = [
                _load_extractor_class(src["extractor"])()
                for src in Settings.SUPPORTED_SITES
            ]
        self.extractors: tuple[SiteExtractor, ...] = tuple(extractors)

    def extractor_for(self, page: PageContext) -> SiteExtractor | None:
        for extractor in self.extractors:
            if extractor.is_product_page(page):
                return extractor
        return None

    def detect(self, page: PageContext) -> SiteType:
        """Return the site id of *page*, or ``"unknown"``."""
        extractor = self.extractor_for(page)
        if extractor is None:
            return "unknown"
        site: SiteType = extractor.site  # type: ignore[assignment]
        return site

    def is_supported(self, page: PageContext) -> bool:
        return self.extractor_for(page) is not None

    def extract(self, page: PageContext) -> ProductListing | None:
        """Detect the site and run its extractor."""
        extractor = self.extractor_for(page)
        if extractor is None:
            logger.warning(
                "Unknown site, cannot extract product from %s", page.url
            )
            return None
        logger.debug("Detected site '%s' for %s", extractor.site, page.url)
        return extractor.extract(page)


_default_detector: SiteDetector | None = None


def _detector() -> SiteDetector:
    global _default_detector
    if _default_detector is None:
        _default_detector = SiteDetector()
    return _default_detector


def detect_current_site(page: PageContext) -> SiteType:
    return _detector().detect(page)


def extract_product_from_page(page: PageContext) -> ProductListing | None:
    return _detector().extract(page)


def is_supported_product_page(page: PageContext) -> bool:
    return _detector().is_supported(page)
