"""Per-city and cross-city price statistics."""

from __future__ import annotations

from typing import Optional, Sequence

import config
from dates import DateConfig
from models import CityStats, OverallSummary, ParsedListing, TotalCost
from utils import get_logger, round_half_up

log = get_logger("aggregator")

NO_LISTINGS = "No listings found"
NO_VALID_PRICES = "No valid prices found"

_FENCE_FACTOR = 1.5


# ── Building blocks ────────────────────────────────────────────────────────────

def nearest_rank(sorted_values: Sequence[float], fraction: float):
    """Element at floor(fraction * n) of an ascending sequence, no interpolation."""
    return sorted_values[int(len(sorted_values) * fraction)]


def quartiles(values: Sequence[float]) -> tuple:
    """Return (q1, median, q3) by nearest rank."""
    ordered = sorted(values)
    return (
        nearest_rank(ordered, 0.25),
        nearest_rank(ordered, 0.5),
        nearest_rank(ordered, 0.75),
    )


def monthly_from_nightly(nightly: float) -> int:
    """Derived monthly rate: MONTHLY_DAYS nights at a long-stay discount."""
    return round_half_up(nightly * config.MONTHLY_DAYS * (1 - config.MONTHLY_DISCOUNT))


def failed_city(city: str, error: str, total_listings: int = 0) -> CityStats:
    return CityStats(city=city, total_listings=total_listings, error=error)


# ── City ───────────────────────────────────────────────────────────────────────

def aggregate_city(
    city: str,
    listings: Sequence[ParsedListing],
    date_config: DateConfig,
) -> CityStats:
    """Compute CityStats for one city.

    Missing data is reported through ``error`` and None fields, never raised.
    """
    if not listings:
        return failed_city(city, NO_LISTINGS)

    valid_prices = [l.price_per_night for l in listings if l.price_per_night is not None and l.price_per_night > 0]
    if not valid_prices:
        return failed_city(city, NO_VALID_PRICES, total_listings=len(listings))

    average = round_half_up(sum(valid_prices) / len(valid_prices))
    min_price = min(valid_prices)
    max_price = max(valid_prices)

    q1, median, q3 = quartiles(valid_prices)
    iqr = q3 - q1
    lower_boundary = max(min_price, q1 - _FENCE_FACTOR * iqr)
    upper_boundary = min(max_price, q3 + _FENCE_FACTOR * iqr)

    stats = CityStats(
        city=city,
        average_price=average,
        min_price=min_price,
        max_price=max_price,
        median=median,
        q1=q1,
        q3=q3,
        iqr=iqr,
        lower_boundary=lower_boundary,
        upper_boundary=upper_boundary,
        listings_found=len(valid_prices),
        total_listings=len(listings),
    )
    _apply_monthly_blend(stats, listings)

    if date_config.is_specific:
        nights = date_config.nights()
        stats.total_cost = TotalCost(
            average=round_half_up(average * nights),
            min=round_half_up(min_price * nights),
            max=round_half_up(max_price * nights),
            nights=nights,
        )

    log.info(
        "%s: %d/%d nightly prices, avg=%s median=%s range=%s-%s",
        city, stats.listings_found, stats.total_listings,
        average, median, min_price, max_price,
    )
    return stats


def _apply_monthly_blend(stats: CityStats, listings: Sequence[ParsedListing]) -> None:
    """Explicit monthly rates where listed, otherwise derived from nightly."""
    monthly_prices: list[int] = []
    explicit = calculated = 0

    for listing in listings:
        if listing.price_per_month:
            monthly_prices.append(listing.price_per_month)
            explicit += 1
        elif listing.price_per_night:
            monthly_prices.append(monthly_from_nightly(listing.price_per_night))
            calculated += 1

    stats.monthly_listings_found = explicit
    stats.calculated_monthly_listings = calculated
    stats.total_monthly_listings = len(monthly_prices)
    if monthly_prices:
        stats.average_monthly_price = round_half_up(sum(monthly_prices) / len(monthly_prices))
        stats.min_monthly_price = min(monthly_prices)
        stats.max_monthly_price = max(monthly_prices)


# ── Across cities ──────────────────────────────────────────────────────────────

def summarize_cities(cities: Sequence[CityStats]) -> Optional[OverallSummary]:
    """Cross-city figures; None when no city produced prices.

    The distribution is approximated by repeating each city's average once
    per listing found.
    """
    successful = [c for c in cities if c.average_price is not None]
    if not successful:
        return None

    overall_average = round_half_up(sum(c.average_price for c in successful) / len(successful))
    overall_median = round_half_up(sum(c.median for c in successful) / len(successful))

    weighted = sorted(
        c.average_price for c in successful for _ in range(max(c.listings_found, 1))
    )
    q1 = nearest_rank(weighted, 0.25)
    q3 = nearest_rank(weighted, 0.75)

    summary = OverallSummary(
        average_price=overall_average,
        median=overall_median,
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
    )

    monthly = [c for c in cities if c.average_monthly_price is not None]
    if monthly:
        summary.average_monthly_price = round_half_up(
            sum(c.average_monthly_price for c in monthly) / len(monthly)
        )
        for c in monthly:
            if c.has_explicit_monthly and c.has_calculated_monthly:
                summary.mixed_monthly_cities.append(c.city)
            elif c.has_explicit_monthly:
                summary.explicit_monthly_cities.append(c.city)
            elif c.has_calculated_monthly:
                summary.calculated_monthly_cities.append(c.city)
        summary.explicit_monthly_listings = sum(c.monthly_listings_found for c in monthly)
        summary.calculated_monthly_listings = sum(c.calculated_monthly_listings for c in monthly)

    return summary
