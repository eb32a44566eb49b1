"""Terminal report for an AnalysisResult."""

from __future__ import annotations

from typing import Optional

import config
from aggregator import summarize_cities
from models import AnalysisResult, CityStats, OverallSummary

_DISCOUNT = f"{config.MONTHLY_DISCOUNT:.0%}"


def _fmt(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def format_city_report(c: CityStats) -> list[str]:
    if c.average_price is None:
        return [f"{c.city}: {c.error or 'Failed to get data'}"]

    lines = [
        f"{c.city}:",
        "  Nightly Rates:",
        f"    Average: ${c.average_price}/night",
        f"    Median: ${c.median}/night",
        f"    Range: ${c.min_price} - ${c.max_price}",
        "    Boxplot Analysis:",
        f"      Q1 (25th percentile): ${c.q1}/night",
        f"      Q3 (75th percentile): ${c.q3}/night",
        f"      IQR (Interquartile Range): ${c.iqr}/night",
        f"      Typical price range: ${_fmt(c.lower_boundary)} - ${_fmt(c.upper_boundary)}/night",
        f"    Listings analyzed: {c.listings_found}",
    ]

    if c.total_cost:
        tc = c.total_cost
        lines += [
            f"  Total Stay Cost ({tc.nights} nights):",
            f"    Average total: ${tc.average}",
            f"    Range: ${tc.min} - ${tc.max}",
            f"    Breakdown: {tc.nights} nights × ${c.average_price} average = ${tc.average}",
        ]

    if c.average_monthly_price is None:
        lines.append("  Monthly Rates: Not available")
        return lines

    lines += [
        "  Monthly Rates:",
        f"    Average: ${c.average_monthly_price}/month",
        f"    Range: ${c.min_monthly_price} - ${c.max_monthly_price}/month",
    ]
    if c.has_explicit_monthly and c.has_calculated_monthly:
        lines.append(
            f"    Listings: {c.monthly_listings_found} explicit + "
            f"{c.calculated_monthly_listings} calculated ({_DISCOUNT} discount)"
        )
    elif c.has_explicit_monthly:
        lines.append(f"    Listings with explicit monthly prices: {c.monthly_listings_found}")
    else:
        lines.append(
            f"    Source: Calculated from nightly rates "
            f"({config.MONTHLY_DAYS}-day estimate with {_DISCOUNT} discount)"
        )
    lines.append(f"    Total monthly listings analyzed: {c.total_monthly_listings}")
    return lines


def format_overall_summary(summary: Optional[OverallSummary]) -> list[str]:
    if summary is None:
        return []

    lines = [
        "",
        "==== NIGHTLY RATES SUMMARY ====",
        f"Average across all cities: ${summary.average_price}/night",
        f"Median across all cities: ${summary.median}/night",
        "Overall price distribution:",
        f"  Q1: ${summary.q1}/night",
        f"  Q3: ${summary.q3}/night",
        f"  IQR: ${summary.iqr}/night",
    ]

    if summary.average_monthly_price is None:
        return lines

    lines += [
        "",
        "==== MONTHLY RATES SUMMARY ====",
        f"Average across all cities with monthly data: ${summary.average_monthly_price}/month",
    ]
    if summary.explicit_monthly_cities:
        lines.append(
            "Cities with explicit monthly pricing only: "
            + ", ".join(summary.explicit_monthly_cities)
        )
    if summary.calculated_monthly_cities:
        lines.append(
            f"Cities with calculated monthly pricing only ({_DISCOUNT} discount): "
            + ", ".join(summary.calculated_monthly_cities)
        )
    if summary.mixed_monthly_cities:
        lines.append(
            "Cities with mixed pricing (explicit + calculated): "
            + ", ".join(summary.mixed_monthly_cities)
        )
    total = summary.explicit_monthly_listings + summary.calculated_monthly_listings
    lines.append(
        f"Total monthly listings analyzed: {total} "
        f"({summary.explicit_monthly_listings} explicit + "
        f"{summary.calculated_monthly_listings} calculated)"
    )
    return lines


def format_report(result: AnalysisResult) -> str:
    s = result.summary
    lines = [
        "",
        "==== SUMMARY ====",
        f"Total cities analyzed: {s.total_cities}",
        f"Successful extractions: {s.successful_cities}",
        f"Failed extractions: {s.failed_cities}",
        "",
        "==== RESULTS ====",
    ]
    for city in result.cities:
        lines += format_city_report(city)
    lines += format_overall_summary(summarize_cities(result.cities))
    return "\n".join(lines)


def print_report(result: AnalysisResult) -> None:
    print(format_report(result))
