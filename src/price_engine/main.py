"""CLI entry point for the price engine.

Usage:
    # Auto-detect culture, name and price of a product page:
    python -m src.price_engine.main --url https://shop.example.com/p/123

    # Offline, from a saved page:
    python -m src.price_engine.main --html-file data/raw_html/page.html -v

    # Manual mode: pinned selector, name and locale:
    python -m src.price_engine.main --url https://shop.example.com/p/123 \
        --name "Wireless Mouse" --locale en-US --selector "span.price" \
        --output data/result.json

Exit codes: 0 success, 2 ambiguous price, 1 failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..common.logging import setup_logging
from .currency import find_locale, format_price
from .extractor import ManualParams, PriceExtractor
from .models import ExtractionResult, ResultStatus
from .page_loader import PageLoader

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_AMBIGUOUS = 2


def _manual_params(args: argparse.Namespace) -> ManualParams | None:
    if not (args.name or args.locale or args.selector):
        return None
    locale = find_locale(args.locale)
    if args.locale and locale is None:
        logger.error("Unknown locale: %s", args.locale)
    return ManualParams(name=args.name, locale=locale, selector=args.selector)


def _print_summary(result: ExtractionResult) -> None:
    if result.status is ResultStatus.FAILED:
        print(f"Failed: {result.reason.value if result.reason else 'unknown'}")
        return

    print(f"Product: {result.name}")
    print(f"Title:   {result.title}")
    if result.locale:
        print(f"Locale:  {result.locale.display_name} ({result.locale.identifier})")

    if result.status is ResultStatus.SUCCESS and result.price_info and result.locale:
        print(f"Price:   {format_price(result.price_info.price.decimal, result.locale)}")
        return

    print("Several prices detected, pick one:")
    for i, group in enumerate(result.groups, start=1):
        shown = format_price(group.price, result.locale) if result.locale else str(group.price)
        print(f"  {i}. {shown}  (score {group.score}, {group.total} occurrences)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Detect the price of a product page")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Product page URL")
    source.add_argument("--html-file", help="Saved product page")
    parser.add_argument("--name", help="Product name (manual mode)")
    parser.add_argument("--locale", help="Locale identifier, e.g. en-US (manual mode)")
    parser.add_argument("--selector", help="CSS selector of the price (manual mode)")
    parser.add_argument("--output", help="Write the result JSON to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    with PageLoader() as loader:
        if args.url:
            page = loader.load(args.url)
        else:
            html_path = Path(args.html_file)
            page = loader.load_html(html_path.read_bytes(), url=html_path.as_uri())

    result = PriceExtractor().extract(page, _manual_params(args))
    _print_summary(result)

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(
            json.dumps(result.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Result written to %s", output)

    if result.status is ResultStatus.SUCCESS:
        return EXIT_SUCCESS
    if result.status is ResultStatus.AMBIGUOUS:
        return EXIT_AMBIGUOUS
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
