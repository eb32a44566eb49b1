"""Dataclasses for the stay-price scraping pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CityState(str, Enum):
    """Per-city progress through the orchestrator."""

    PENDING = "pending"
    SCRAPING = "scraping"
    EXTRACTING = "extracting"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RawListing:
    """One listing card as scraped from the results page."""

    raw_text: str
    link: Optional[str] = None
    title: Optional[str] = None   # structured title field, when the card has one


@dataclass
class ParsedListing:
    """A listing after price parsing."""

    title: str
    price_per_night: Optional[int]   # plausible nightly price or None
    price_per_month: Optional[int]   # explicit monthly rate or None
    link: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "pricePerNight": self.price_per_night,
            "pricePerMonth": self.price_per_month,
            "link": self.link,
        }


@dataclass(frozen=True)
class TotalCost:
    """Whole-stay cost projection for a specific date range."""

    average: int
    min: int
    max: int
    nights: int

    def to_dict(self) -> dict:
        return {"average": self.average, "min": self.min, "max": self.max, "nights": self.nights}


@dataclass
class CityStats:
    """Aggregated nightly/monthly statistics for one city."""

    city: str

    # Nightly, in listing currency
    average_price: Optional[int] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    median: Optional[int] = None
    q1: Optional[int] = None
    q3: Optional[int] = None
    iqr: Optional[int] = None
    lower_boundary: Optional[float] = None
    upper_boundary: Optional[float] = None
    listings_found: int = 0          # listings with a valid nightly price
    total_listings: int = 0          # all extracted listings

    # Monthly blend
    average_monthly_price: Optional[int] = None
    min_monthly_price: Optional[int] = None
    max_monthly_price: Optional[int] = None
    monthly_listings_found: int = 0      # explicit monthly rates
    calculated_monthly_listings: int = 0  # derived from nightly
    total_monthly_listings: int = 0

    total_cost: Optional[TotalCost] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def has_explicit_monthly(self) -> bool:
        return self.monthly_listings_found > 0

    @property
    def has_calculated_monthly(self) -> bool:
        return self.calculated_monthly_listings > 0

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "averagePrice": self.average_price,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "median": self.median,
            "q1": self.q1,
            "q3": self.q3,
            "iqr": self.iqr,
            "lowerBoundary": self.lower_boundary,
            "upperBoundary": self.upper_boundary,
            "listingsFound": self.listings_found,
            "totalListings": self.total_listings,
            "averageMonthlyPrice": self.average_monthly_price,
            "minMonthlyPrice": self.min_monthly_price,
            "maxMonthlyPrice": self.max_monthly_price,
            "monthlyListingsFound": self.monthly_listings_found,
            "calculatedMonthlyListings": self.calculated_monthly_listings,
            "totalMonthlyListings": self.total_monthly_listings,
            "hasExplicitPrices": self.has_explicit_monthly,
            "hasCalculatedPrices": self.has_calculated_monthly,
            "totalCost": self.total_cost.to_dict() if self.total_cost else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class AnalysisSummary:
    total_cities: int
    successful_cities: int
    failed_cities: int

    def to_dict(self) -> dict:
        return {
            "totalCities": self.total_cities,
            "successfulCities": self.successful_cities,
            "failedCities": self.failed_cities,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one multi-city run."""

    cities: tuple[CityStats, ...]
    summary: AnalysisSummary

    @classmethod
    def from_cities(cls, cities: list[CityStats]) -> "AnalysisResult":
        ok = sum(1 for c in cities if c.error is None)
        return cls(
            cities=tuple(cities),
            summary=AnalysisSummary(
                total_cities=len(cities),
                successful_cities=ok,
                failed_cities=len(cities) - ok,
            ),
        )

    def to_dict(self) -> dict:
        return {
            "cities": [c.to_dict() for c in self.cities],
            "summary": self.summary.to_dict(),
        }


@dataclass
class OverallSummary:
    """Cross-city figures for the final report."""

    average_price: int
    median: int
    q1: int
    q3: int
    iqr: int
    average_monthly_price: Optional[int] = None
    explicit_monthly_cities: list[str] = field(default_factory=list)
    calculated_monthly_cities: list[str] = field(default_factory=list)
    mixed_monthly_cities: list[str] = field(default_factory=list)
    explicit_monthly_listings: int = 0
    calculated_monthly_listings: int = 0
