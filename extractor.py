"""Raw listing cards → ParsedListing, one price parse per card."""

from __future__ import annotations

from typing import Iterable, Optional

import config
from models import ParsedListing, RawListing
from price_parser import PriceBounds, parse_prices, stay_nights_from_url
from utils import get_logger

log = get_logger("extractor")

_TITLE_SEPARATORS = ("·", "⋅")
_TITLE_MIN_LEN = 5
_TITLE_MAX_LEN = 100
LINK_NOT_FOUND = "Link not found"


def extract_title(raw: RawListing, index: int) -> str:
    """Structured title first, then the first 'Type · Place'-looking line."""
    if raw.title and raw.title.strip():
        return raw.title.strip()

    for line in (raw.raw_text or "").splitlines():
        line = line.strip()
        if not _TITLE_MIN_LEN < len(line) < _TITLE_MAX_LEN:
            continue
        if line[0].isdigit():
            continue
        if any(sep in line for sep in _TITLE_SEPARATORS):
            return line
    return f"Listing {index}"


def parse_listing(
    raw: RawListing,
    index: int,
    stay_nights: Optional[int] = None,
    bounds: Optional[PriceBounds] = None,
) -> ParsedListing:
    """Parse one card. ``index`` is 1-based and only used for fallback titles."""
    nights = stay_nights or stay_nights_from_url(raw.link)
    estimate = parse_prices(raw.raw_text, stay_nights=nights, bounds=bounds)
    return ParsedListing(
        title=extract_title(raw, index),
        price_per_night=estimate.price_per_night,
        price_per_month=estimate.price_per_month,
        link=raw.link or LINK_NOT_FOUND,
    )


def extract_listings(
    raw_listings: Iterable[RawListing],
    stay_nights: Optional[int] = None,
    page_url: Optional[str] = None,
    limit: Optional[int] = None,
    bounds: Optional[PriceBounds] = None,
) -> list[ParsedListing]:
    """Parse at most ``limit`` cards (default MAX_LISTINGS_PER_CITY).

    A card that blows up becomes a placeholder instead of failing the city.
    """
    limit = config.MAX_LISTINGS_PER_CITY if limit is None else limit
    if stay_nights is None:
        stay_nights = stay_nights_from_url(page_url)

    parsed: list[ParsedListing] = []
    for index, raw in enumerate(raw_listings, start=1):
        if index > limit:
            break
        try:
            listing = parse_listing(raw, index, stay_nights=stay_nights, bounds=bounds)
        except Exception as exc:
            log.warning("Error parsing listing %d: %s", index, exc)
            listing = ParsedListing(
                title=f"Error parsing listing {index}",
                price_per_night=None,
                price_per_month=None,
                link="N/A",
            )
        parsed.append(listing)

    log.info(
        "Extracted %d listings (%d with nightly price, %d with monthly price)",
        len(parsed),
        sum(1 for l in parsed if l.price_per_night is not None),
        sum(1 for l in parsed if l.price_per_month is not None),
    )
    return parsed
