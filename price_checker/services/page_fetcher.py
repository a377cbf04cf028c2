# price_checker/services/page_fetcher.py

"""Fetches live product pages for extraction from the command line."""

import logging
import time
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from price_checker.config.settings import Settings
from price_checker.extractors.page_context import PageContext

logger = logging.getLogger("price_checker.fetcher")


class PageFetcher:
    """GET a product page with browser impersonation and retries.

    curl_cffi is tried first; if every attempt fails or lands on a
    challenge page, cloudscraper gets one more try.
    """

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def __init__(self) -> None:
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._current_delay: float = self.settings.REQUEST_DELAY

    def _is_blocked(self, text: str) -> bool:
        """Detect Cloudflare challenges and CAPTCHA interstitials."""
        lower = text.lower()
        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                logger.warning(
                    "Cloudflare challenge detected (marker: '%s')", marker
                )
                return True

        # Large pages mention "captcha" in scripts; only scan thin ones
        if "<body" in lower and len(text) > 5000:
            return False
        for keyword in self.settings.CAPTCHA_KEYWORDS:
            if keyword in lower:
                logger.warning("CAPTCHA keyword '%s' detected", keyword)
                return True
        return False

    def _escalate_delay(self) -> None:
        max_delay = (
            self.settings.REQUEST_DELAY * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        logger.warning(
            "Blocked or rate-limited, delay escalated to %.1fs",
            self._current_delay,
        )

    def _fetch_primary(self, url: str) -> str | None:
        headers = dict(self.settings.DEFAULT_HEADERS)
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=headers,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
                if resp.status_code == 200:
                    if not self._is_blocked(resp.text):
                        self._current_delay = self.settings.REQUEST_DELAY
                        return resp.text
                    self._escalate_delay()
                    time.sleep(self._current_delay)
                    continue
                logger.warning(
                    "HTTP %d on attempt %d for %s",
                    resp.status_code,
                    attempt + 1,
                    url,
                )
                if resp.status_code in (429, 403):
                    self._escalate_delay()
                    time.sleep(self._current_delay)
            except Exception as exc:
                logger.warning(
                    "Request error on attempt %d: %s",
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * (attempt + 1))
        return None

    def _fetch_fallback(self, url: str) -> str | None:
        logger.info("curl_cffi exhausted, falling back to cloudscraper")
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=dict(self.settings.DEFAULT_HEADERS),
                timeout=self.settings.REQUEST_TIMEOUT,
            )
            if resp.status_code == 200:
                text = str(resp.text)
                if not self._is_blocked(text):
                    return text
        except Exception as exc:
            logger.error(
                "cloudscraper fallback also failed: %s", exc, exc_info=True
            )
        return None

    def fetch(self, url: str) -> PageContext | None:
        """Return the parsed page, or ``None`` if it could not be loaded."""
        html = self._fetch_primary(url)
        if html is None:
            html = self._fetch_fallback(url)
        if html is None:
            logger.error("Could not load %s", url)
            return None
        return PageContext.from_html(url, html)
