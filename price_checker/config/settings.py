# price_checker/config/settings.py

"""Central configuration for the price_checker engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the price_checker engine."""

    # --- HTTP ---
    REQUEST_DELAY: float = 1.0          # Base delay between page retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count for page fetches
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Comparison service ---
    API_BASE_URL: str = os.getenv(
        "PRICE_CHECKER_API_BASE_URL",
        "https://price-checker-extension.onrender.com/api/",
    )
    COMPARISON_CACHE_TTL: float = 5 * 60.0     # Fresh window per result
    CACHE_SWEEP_INTERVAL: float = 30 * 60.0    # Background purge period

    # --- Currency ---
    BASE_CURRENCY: str = "USD"
    EXCHANGE_RATE_API: str = (
        "https://api.exchangerate-api.com/v4/latest/{base}"
    )
    EXCHANGE_RATE_TTL: float = 60 * 60.0
    # Units of each currency per 1 USD, used when the live API is down
    FALLBACK_RATES: dict[str, float] = {
        "USD": 1.0,
        "EUR": 0.92,
        "GBP": 0.79,
        "NGN": 1500.0,
        "INR": 83.0,
        "CAD": 1.36,
        "AUD": 1.52,
        "JPY": 149.0,
    }

    # --- Extraction ---
    TITLE_MAX_WORDS: int = 7

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "PRICE_CHECKER_LOG_LEVEL", "WARNING"
    )

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = (
        BASE_DIR / "price_checker" / "config" / "selectors.json"
    )
    LOGS_DIR: Path = BASE_DIR / "logs"
    PREFERENCES_PATH: Path = BASE_DIR / "preferences.json"

    # --- Sites (detection order matters: first match wins) ---
    SUPPORTED_SITES: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "extractor": (
                "price_checker.extractors.amazon_extractor.AmazonExtractor"
            ),
        },
        {
            "id": "ebay",
            "label": "eBay",
            "extractor": (
                "price_checker.extractors.ebay_extractor.EbayExtractor"
            ),
        },
        {
            "id": "jumia",
            "label": "Jumia",
            "extractor": (
                "price_checker.extractors.jumia_extractor.JumiaExtractor"
            ),
        },
        {
            "id": "konga",
            "label": "Konga",
            "extractor": (
                "price_checker.extractors.konga_extractor.KongaExtractor"
            ),
        },
    ]
