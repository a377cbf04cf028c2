# price_checker/cli/runner.py

"""Headless command runners built on the comparison orchestrator."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from price_checker.config.settings import Settings
from price_checker.extractors.page_context import (
    PageContext,
    load_page_from_file,
)
from price_checker.models.comparison import ComparisonResult
from price_checker.pricing.currency import (
    SUPPORTED_CURRENCIES,
    coerce_currency,
    format_price_with_currency,
)
from price_checker.services.comparison_orchestrator import (
    ComparisonOrchestrator,
)
from price_checker.services.currency_converter import (
    CurrencyConverter,
    convert_amount,
)
from price_checker.services.page_fetcher import PageFetcher
from price_checker.storage.preferences import CurrencyPreferenceStore

logger = logging.getLogger("price_checker.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _load_page(url: str, html_file: str | None) -> PageContext | None:
    """Read the page from a saved file, or fetch it live."""
    if html_file is not None:
        path = Path(html_file)
        if not path.exists():
            _err.print(f"[red]HTML file not found: {path}[/red]")
            return None
        return load_page_from_file(url, path)

    _err.print(f"[dim]Fetching {url}[/dim]")
    return PageFetcher().fetch(url)


def _dump_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_comparison(result: ComparisonResult, cached: bool) -> None:
    """Render a Rich table of candidate prices to stdout."""
    table = Table(
        title="Price Comparison" + (" (cached)" if cached else ""),
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Site", style="magenta")
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right")
    table.add_column("Converted", justify="right", style="green")
    table.add_column("Match", justify="center")
    table.add_column("Link", overflow="fold", style="dim")

    best = result.best_deal
    for idx, p in enumerate(result.all_prices, 1):
        converted = (
            format_price_with_currency(
                p.price_converted, p.target_currency, compact=True
            )
            if p.price_converted is not None and p.target_currency
            else "—"
        )
        marker = " ★" if best is not None and p.link == best.link else ""
        table.add_row(
            str(idx),
            p.site + marker,
            p.title[:50],
            format_price_with_currency(p.price, p.currency),
            converted,
            (
                f"{p.match_confidence}%"
                if p.match_confidence is not None
                else "—"
            ),
            p.link,
        )

    Console().print(table)


def run_extract(url: str, html_file: str | None) -> int:
    """Extract the product on *url* and print it as JSON."""
    page = _load_page(url, html_file)
    if page is None:
        return 1

    orchestrator = ComparisonOrchestrator()
    response = orchestrator.extract(page)
    if not response.success:
        _err.print(
            f"[red]{response.error} (site={response.site})[/red]"
        )
    _dump_json(response.to_dict())
    return 0 if response.success else 1


async def run_compare(
    url: str,
    html_file: str | None,
    currency: str | None,
    output_format: str,
) -> int:
    """Extract the product on *url* and compare its price."""
    page = _load_page(url, html_file)
    if page is None:
        return 1

    orchestrator = ComparisonOrchestrator(
        preferences=CurrencyPreferenceStore(Settings.PREFERENCES_PATH)
    )
    orchestrator.start()
    try:
        response = await orchestrator.compare_page(page, currency)
    finally:
        await orchestrator.stop()

    if not response.success or response.data is None:
        logger.warning("Comparison failed for %s: %s", url, response.error)
        _err.print(f"[red]Comparison failed: {response.error}[/red]")
        _dump_json(response.to_dict())
        return 1

    _err.print(
        f"[green]✓ {len(response.data.all_prices)} prices[/green]"
    )
    if output_format == "table":
        _print_comparison(response.data, response.cached)
    else:
        _dump_json(response.to_dict())
    return 0


async def run_rates(currency: str | None) -> int:
    """Print the current exchange-rate table against *currency*."""
    converter = CurrencyConverter()
    snapshot = await converter.get_rates()
    target = coerce_currency(currency)

    table = Table(
        title=(
            "Exchange Rates"
            + (" (fallback)" if snapshot.is_fallback else "")
        ),
        title_style="bold cyan",
    )
    table.add_column("Currency", style="bold")
    table.add_column(f"Per 1 {snapshot.base}", justify="right")
    table.add_column(f"1 unit in {target}", justify="right")

    for code in SUPPORTED_CURRENCIES:
        rate = snapshot.rates.get(code)
        if rate is None:
            continue
        in_target = convert_amount(1.0, code, target, snapshot.rates)
        table.add_row(code, f"{rate:,.4f}", f"{in_target:,.4f}")

    Console().print(table)
    return 1 if snapshot.is_fallback else 0


def run_set_currency(currency: str) -> int:
    """Persist the viewer's target currency."""
    if currency.upper() not in SUPPORTED_CURRENCIES:
        valid = ", ".join(SUPPORTED_CURRENCIES)
        _err.print(f"[red]Unknown currency: {currency}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1

    store = CurrencyPreferenceStore(Settings.PREFERENCES_PATH)
    code = store.set(currency)
    _err.print(f"[green]✓ Target currency set to {code}[/green]")
    return 0
