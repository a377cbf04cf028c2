# price_checker/services/comparison_client.py

"""HTTP client for the remote price-comparison service."""

import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from price_checker.config.settings import Settings
from price_checker.models.comparison import ComparisonResult

logger = logging.getLogger("price_checker.client")


class ComparisonServiceError(Exception):
    """The comparison service failed or returned an unusable body."""


class ComparisonClient:
    """Posts product match requests to ``{API_BASE_URL}/compare``.

    Each call is a single attempt; retrying is left to the caller.  The
    service returns every candidate with ``price_usd`` already normalised
    to the base currency.
    """

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or Settings.API_BASE_URL).rstrip("/")
        self.session = curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )

    @property
    def compare_url(self) -> str:
        return f"{self.base_url}/compare"

    def compare(self, payload: dict[str, Any]) -> ComparisonResult:
        """Request comparison prices for one product.

        Raises:
            ComparisonServiceError: on transport failure, a non-200 status
                or a malformed response body.
        """
        try:
            resp = self.session.post(
                self.compare_url,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                json=payload,
                timeout=Settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise ComparisonServiceError(
                f"Comparison request failed: {exc}"
            ) from exc

        if resp.status_code != 200:
            logger.warning(
                "Comparison service returned HTTP %d for '%s'",
                resp.status_code,
                payload.get("title"),
            )
            raise ComparisonServiceError(
                f"API returned {resp.status_code}: {resp.reason}"
            )

        try:
            data: Any = json.loads(resp.text)
        except json.JSONDecodeError as exc:
            raise ComparisonServiceError(
                "Comparison service returned invalid JSON"
            ) from exc
        if not isinstance(data, dict):
            raise ComparisonServiceError(
                "Comparison service returned an unexpected body"
            )

        try:
            result = ComparisonResult.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise ComparisonServiceError(
                f"Malformed comparison result: {exc}"
            ) from exc

        logger.info(
            "Comparison service returned %d prices for '%s'",
            len(result.all_prices),
            payload.get("title"),
        )
        return result
