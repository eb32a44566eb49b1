"""
Flat-file export of an AnalysisResult.

JSON mirrors the result structures (camelCase keys) plus overall
averages; CSV has one row per city in a fixed column order.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from models import AnalysisResult, CityStats
from utils import get_logger, round_half_up

log = get_logger("exporter")

CSV_HEADERS = [
    "City",
    "Average Nightly Price",
    "Median",
    "Min Nightly",
    "Max Nightly",
    "Q1",
    "Q3",
    "IQR",
    "Lower Boundary",
    "Upper Boundary",
    "Average Monthly Price",
    "Min Monthly",
    "Max Monthly",
    "Nightly Listings Found",
    "Monthly Listings Found",
    "Total Cost Average",
    "Total Cost Range",
    "Nights",
    "Status",
]

_MISSING = "N/A"


def _mean_of(values: list) -> Optional[int]:
    return round_half_up(sum(values) / len(values)) if values else None


def build_report_data(result: AnalysisResult, timestamp: Optional[str] = None) -> dict:
    """JSON payload: timestamp, summary, cities and overall averages."""
    prices = [c.average_price for c in result.cities if c.average_price is not None]
    monthly = [c.average_monthly_price for c in result.cities if c.average_monthly_price is not None]
    return {
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        "summary": result.summary.to_dict(),
        "cities": [c.to_dict() for c in result.cities],
        "averages": {
            "overallAveragePrice": _mean_of(prices),
            "overallAverageMonthlyPrice": _mean_of(monthly),
        },
    }


def _cell(value) -> object:
    if value is None:
        return _MISSING
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _city_to_row(c: CityStats) -> list:
    cost = c.total_cost
    return [
        c.city,
        _cell(c.average_price),
        _cell(c.median),
        _cell(c.min_price),
        _cell(c.max_price),
        _cell(c.q1),
        _cell(c.q3),
        _cell(c.iqr),
        _cell(c.lower_boundary),
        _cell(c.upper_boundary),
        _cell(c.average_monthly_price),
        _cell(c.min_monthly_price),
        _cell(c.max_monthly_price),
        c.listings_found,
        c.monthly_listings_found,
        cost.average if cost else _MISSING,
        f"{cost.min}-{cost.max}" if cost else _MISSING,
        cost.nights if cost else _MISSING,
        "Success" if c.error is None else "Failed",
    ]


def write_json(result: AnalysisResult, path: str | Path, timestamp: Optional[str] = None) -> dict:
    data = build_report_data(result, timestamp)
    Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    log.info("Results written to %s", path)
    return data


def write_csv(result: AnalysisResult, path: str | Path) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        writer.writerows(_city_to_row(c) for c in result.cities)
    log.info("CSV version written to %s", path)


def write_results(result: AnalysisResult, filename: str | Path) -> dict:
    """Write ``filename`` (JSON) and its .csv sibling; return the JSON payload.

    A ``.csv`` filename keeps the CSV there and moves the JSON to ``.json``.
    """
    json_path = Path(filename)
    if json_path.suffix.lower() == ".csv":
        json_path = json_path.with_suffix(".json")
    data = write_json(result, json_path)
    write_csv(result, json_path.with_suffix(".csv"))
    return data
