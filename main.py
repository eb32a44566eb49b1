"""
CLI orchestrator: scrape → analyse → report → export.

Usage:
    python main.py Paris Lisbon Helsinki
    python main.py "New York" London Tokyo --month 6
    python main.py --interactive "New York" Paris Tokyo
    python main.py Barcelona --output barcelona.json
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date
from typing import Optional, Sequence

import config
from dates import DateConfig, DateConfigs, next_month_number
from exporter import write_results
from orchestrator import run_analysis
from prompts import interactive_date_configs
from report import print_report
from utils import get_logger

log = get_logger("main")


# ── CLI argument parsing ───────────────────────────────────────────────────────

def _month(value: str) -> int:
    try:
        month = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("Month must be a number between 1 and 12")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError("Month must be a number between 1 and 12")
    return month


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value!r}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Airbnb nightly/monthly price analysis across cities",
        epilog=(
            "With --interactive you choose between the same dates for all "
            "cities, different dates per city, or month mode."
        ),
    )
    parser.add_argument("cities", nargs="+", metavar="CITY", help="Cities to analyse")
    parser.add_argument(
        "--month",
        type=_month,
        default=None,
        help="Month to analyse (1-12); the next occurrence is used. Defaults to next month",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for specific check-in/check-out dates",
    )
    parser.add_argument(
        "--output",
        default=config.OUTPUT_FILE,
        help="JSON output file; a .csv with the same name is written next to it",
    )
    parser.add_argument(
        "--max-concurrent",
        type=_positive_int,
        default=config.MAX_CONCURRENT_CITIES,
        help="Cities scraped at the same time (default: 1)",
    )
    return parser.parse_args(argv)


def build_date_configs(args: argparse.Namespace, today: Optional[date] = None) -> DateConfigs:
    if args.interactive:
        return interactive_date_configs(args.cities, month=args.month, today=today)
    return DateConfig.for_month(args.month or next_month_number(today))


def describe_dates(date_configs: DateConfigs) -> str:
    if isinstance(date_configs, DateConfig):
        return date_configs.describe()
    return "custom date ranges per city"


# ── Main pipeline ─────────────────────────────────────────────────────────────

def _print_progress(message: str) -> None:
    print(message, flush=True)


async def run(args: argparse.Namespace) -> None:
    date_configs = build_date_configs(args)

    print(f"Starting Airbnb price analysis for {describe_dates(date_configs)}...")
    print("Cities to analyze:", ", ".join(args.cities))
    log.info("Pipeline start: cities=%s", args.cities)

    result = await run_analysis(
        args.cities,
        date_configs,
        progress=_print_progress,
        max_concurrent=args.max_concurrent,
    )

    write_results(result, args.output)
    print_report(result)
    log.info("Pipeline complete.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
