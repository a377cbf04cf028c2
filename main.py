# main.py

"""Entry point for the price_checker command-line interface."""

import argparse
import asyncio
import logging
import sys

from price_checker.config.logging_config import setup_logging
from price_checker.config.settings import Settings
from price_checker.pricing.currency import SUPPORTED_CURRENCIES

logger = logging.getLogger("price_checker.main")


def _add_page_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url", help="Product page URL.")
    parser.add_argument(
        "--html",
        default=None,
        dest="html_file",
        help="Read the page from a saved HTML file instead of fetching.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    site_labels = ", ".join(s["label"] for s in Settings.SUPPORTED_SITES)
    currencies = ", ".join(SUPPORTED_CURRENCIES)

    parser = argparse.ArgumentParser(
        prog="price_checker",
        description="Cross-marketplace product price comparison.",
        epilog=f"Supported sites: {site_labels}. Currencies: {currencies}.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    extract = commands.add_parser(
        "extract", help="Extract the product listing from a page."
    )
    _add_page_arguments(extract)

    compare = commands.add_parser(
        "compare", help="Compare a product's price across marketplaces."
    )
    _add_page_arguments(compare)
    compare.add_argument(
        "-c",
        "--currency",
        default=None,
        help="Target currency (default: stored preference).",
    )
    compare.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    rates = commands.add_parser(
        "rates", help="Show the current exchange-rate table."
    )
    rates.add_argument(
        "-c", "--currency", default=None, help="Quote currency."
    )

    currency = commands.add_parser(
        "currency", help="Set the preferred target currency."
    )
    currency.add_argument("code", help="ISO 4217 currency code.")
    return parser


def main() -> None:
    """Dispatch to the requested command and exit with its status."""
    log_file = setup_logging()
    logger.info("price_checker starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    from price_checker.cli import runner

    try:
        if args.command == "extract":
            exit_code = runner.run_extract(args.url, args.html_file)
        elif args.command == "compare":
            exit_code = asyncio.run(
                runner.run_compare(
                    args.url,
                    args.html_file,
                    args.currency,
                    args.output_format,
                )
            )
        elif args.command == "rates":
            exit_code = asyncio.run(runner.run_rates(args.currency))
        else:
            exit_code = runner.run_set_currency(args.code)
    except Exception:
        logger.critical("Fatal error in '%s'", args.command, exc_info=True)
        raise
    finally:
        logger.info("price_checker shutting down")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
