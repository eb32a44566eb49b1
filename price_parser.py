"""
Heuristic price parsing for one listing card's text.

Listing cards render prices inconsistently: per-night rates, totals for
the searched stay (sometimes with a struck-through original next to the
discounted one), explicit monthly rates, several currency symbols. Each
price kind is extracted by an ordered tuple of small rules; the first
rule that returns a plausible value wins. Plausibility ranges are the
only safety net, so a miss (None) is always preferred over a wild value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional
from urllib.parse import parse_qs, urlparse

import config
from utils import get_logger, round_half_up

log = get_logger("price_parser")


# ── Configuration ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PriceBounds:
    """Inclusive plausibility ranges used to accept or reject a value."""

    nightly_min: int = config.NIGHTLY_PRICE_MIN
    nightly_max: int = config.NIGHTLY_PRICE_MAX
    monthly_min: int = config.MONTHLY_PRICE_MIN
    monthly_max: int = config.MONTHLY_PRICE_MAX
    total_min: int = config.TOTAL_PRICE_MIN
    total_max: int = config.TOTAL_PRICE_MAX
    fallback_min: int = config.FALLBACK_NIGHTLY_MIN
    fallback_max: int = config.FALLBACK_NIGHTLY_MAX
    max_nights: int = 31

    def is_nightly(self, value: float) -> bool:
        return self.nightly_min <= value <= self.nightly_max

    def is_monthly(self, value: float) -> bool:
        return self.monthly_min <= value <= self.monthly_max

    def is_total(self, value: float) -> bool:
        return self.total_min <= value <= self.total_max


DEFAULT_BOUNDS = PriceBounds()


@dataclass(frozen=True)
class ParseContext:
    stay_nights: Optional[int] = None
    bounds: PriceBounds = field(default_factory=PriceBounds)


@dataclass(frozen=True)
class PriceEstimate:
    price_per_night: Optional[int] = None
    price_per_month: Optional[int] = None


Rule = Callable[[str, ParseContext], Optional[int]]


# ── Patterns ───────────────────────────────────────────────────────────────────

_CURRENCY = r"(?:US\$|R\$|€|£|\$)"
# 1234 / 1,234 / 1.234 / 12,345,678: separators followed by exactly 3 digits
_AMOUNT = r"\d+(?:[.,]\d{3})*(?!\d)"
_MONTHLY_AMOUNT = r"(?:\d{1,2}[.,]?\d{3}|\d{3})(?!\d)"
_MONTHLY_KEYWORD = r"(?:mensal|monthly|per\s+month|a\s+month|/\s*month|por\s+m[êe]s)"

_MONTHLY_PATTERN = re.compile(
    rf"{_CURRENCY}\s*({_MONTHLY_AMOUNT})(?:\s*{_CURRENCY}\s*({_MONTHLY_AMOUNT}))?\s*{_MONTHLY_KEYWORD}",
    re.IGNORECASE,
)

_TOTAL_PATTERNS = (
    re.compile(rf"Total:?\s*{_CURRENCY}\s*({_AMOUNT})", re.IGNORECASE),
    # struck-through original next to the discounted price: € 359 € 330
    re.compile(rf"{_CURRENCY}\s*({_AMOUNT})\s*{_CURRENCY}\s*({_AMOUNT})", re.IGNORECASE),
    re.compile(
        rf"{_CURRENCY}\s*({_AMOUNT})\s+(?:Mostrar\s+detalhamento|Show\s+(?:price\s+)?breakdown)",
        re.IGNORECASE,
    ),
    re.compile(
        rf"{_CURRENCY}\s*({_AMOUNT})\s+(?:por|for)\s+\d{{1,2}}\s+(?:noites?|nights?)",
        re.IGNORECASE,
    ),
    re.compile(rf"{_CURRENCY}\s*({_AMOUNT})\s+total\b", re.IGNORECASE),
)

_NIGHTS_PATTERNS = (
    re.compile(r"por\s+(\d{1,2})\s+noites?", re.IGNORECASE),
    re.compile(r"(?<!\d)(\d{1,2})\s+nights?", re.IGNORECASE),
    re.compile(r"(?<!\d)(\d{1,2})\s+noites?", re.IGNORECASE),
)

_PER_NIGHT_PATTERN = re.compile(
    rf"{_CURRENCY}\s*(\d{{1,3}})(?![\d.,]\d)\s*"
    r"(?:por\s*noite|/\s*noite|per\s*night|/\s*night|a\s+night|night)",
    re.IGNORECASE,
)

# 2-3 digit amount, not followed by another amount, nor by a total/monthly
# keyword later on the same line
_CURRENCY_AMOUNT_PATTERN = re.compile(
    rf"{_CURRENCY}\s*(\d{{2,3}})(?!\d|[.,]\d)(?!\s*{_CURRENCY})(?![^\n]*(?:total|mensal|month))",
    re.IGNORECASE,
)

_BARE_NUMBER_PATTERN = re.compile(r"(?<![\d.,])(\d{2,3})(?!\d|[.,]\d)")
_BARE_NUMBER_NOISE_AFTER = re.compile(
    r"\s*(?:de\s+)?(?:jan|feb|fev|mar|apr|abr|may|mai|jun|jul|aug|ago|sep|set|oct|out|nov|dec|dez)"
    r"|\s*(?:nights?|noites?|guests?|h[óo]spedes|reviews?|avalia|km|mi\b|m²|%|\))",
    re.IGNORECASE,
)
_KEYWORD_NEARBY = re.compile(r"total|mensal|month", re.IGNORECASE)
_KEYWORD_WINDOW_CHARS = 15

# price-tier guess of stay length when a total has no nights attached
_TIER_HIGH_TOTAL = 2000
_TIER_LOW_TOTAL = 800
_NIGHTS_HIGH_TIER = 8
_NIGHTS_LOW_TIER = 12
_NIGHTS_DEFAULT_TIER = 10


# ── Helpers ────────────────────────────────────────────────────────────────────

def parse_amount(raw: str) -> Optional[float]:
    """Convert '1,234' / '1.234' / '330' / '12.50' to a number."""
    cleaned = re.sub(r"[.,](?=\d{3}(?!\d))", "", raw.strip())
    cleaned = cleaned.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def nights_from_text(text: str, max_nights: int = 31) -> Optional[int]:
    """Explicit stay length such as '7 nights' or 'por 14 noites'."""
    for pattern in _NIGHTS_PATTERNS:
        match = pattern.search(text)
        if match:
            nights = int(match.group(1))
            if 1 <= nights <= max_nights:
                return nights
    return None


def stay_nights_from_url(url: Optional[str], max_nights: int = 31) -> Optional[int]:
    """Read check-in/check-out query parameters from a search or room URL."""
    if not url:
        return None
    params = parse_qs(urlparse(url).query)
    checkin = (params.get("checkin") or params.get("check_in") or [None])[0]
    checkout = (params.get("checkout") or params.get("check_out") or [None])[0]
    if not checkin or not checkout:
        return None
    try:
        nights = (date.fromisoformat(checkout) - date.fromisoformat(checkin)).days
    except ValueError:
        return None
    return nights if 0 < nights <= max_nights else None


def estimate_nights(total: float) -> int:
    """Higher totals suggest shorter stays."""
    if total >= _TIER_HIGH_TOTAL:
        return _NIGHTS_HIGH_TIER
    if total <= _TIER_LOW_TOTAL:
        return _NIGHTS_LOW_TIER
    return _NIGHTS_DEFAULT_TIER


def mask_monthly_amounts(text: str) -> str:
    """Blank out monthly-rate phrases so their digits never reach nightly rules."""
    return _MONTHLY_PATTERN.sub(lambda m: " " * len(m.group(0)), text)


def _near_keyword(text: str, start: int, end: int) -> bool:
    context = text[max(0, start - _KEYWORD_WINDOW_CHARS):end + _KEYWORD_WINDOW_CHARS]
    return bool(_KEYWORD_NEARBY.search(context))


# ── Monthly rules ──────────────────────────────────────────────────────────────

def monthly_rate(text: str, ctx: ParseContext) -> Optional[int]:
    for match in _MONTHLY_PATTERN.finditer(text):
        for raw in match.groups():
            if raw is None:
                continue
            value = parse_amount(raw)
            if value is not None and ctx.bounds.is_monthly(value):
                return round_half_up(value)
    return None


# ── Nightly rules ──────────────────────────────────────────────────────────────

def nightly_from_total(text: str, ctx: ParseContext) -> Optional[int]:
    """Divide a stay total by the number of nights (known, stated or guessed)."""
    bounds = ctx.bounds
    for pattern in _TOTAL_PATTERNS:
        for match in pattern.finditer(text):
            amounts = [parse_amount(g) for g in match.groups() if g is not None]
            amounts = [a for a in amounts if a is not None]
            if not amounts:
                continue
            total = min(amounts)
            if not bounds.is_total(total):
                continue

            if ctx.stay_nights:
                nightly = round_half_up(total / ctx.stay_nights)
            else:
                nights = nights_from_text(text, bounds.max_nights) or estimate_nights(total)
                nightly = round_half_up(total / nights)

            if bounds.is_nightly(nightly):
                return nightly
            log.debug("Rejected nightly %s derived from total %s", nightly, total)
    return None


def explicit_nightly(text: str, ctx: ParseContext) -> Optional[int]:
    for match in _PER_NIGHT_PATTERN.finditer(text):
        value = int(match.group(1))
        if ctx.bounds.is_nightly(value):
            return value
    return None


def currency_amount_fallback(text: str, ctx: ParseContext) -> Optional[int]:
    for match in _CURRENCY_AMOUNT_PATTERN.finditer(text):
        value = int(match.group(1))
        if ctx.bounds.is_nightly(value):
            return value
    return None


def bare_number_fallback(text: str, ctx: ParseContext) -> Optional[int]:
    """Last resort: a standalone 2-3 digit number in the tighter range."""
    bounds = ctx.bounds
    for match in _BARE_NUMBER_PATTERN.finditer(text):
        start, end = match.span(1)
        if start > 0 and text[start - 1] == "(":
            continue
        if _BARE_NUMBER_NOISE_AFTER.match(text, end):
            continue
        if _near_keyword(text, start, end):
            continue
        value = int(match.group(1))
        if bounds.is_nightly(value) and bounds.fallback_min <= value <= bounds.fallback_max:
            return value
    return None


MONTHLY_RULES: tuple[Rule, ...] = (monthly_rate,)

NIGHTLY_RULES: tuple[Rule, ...] = (
    nightly_from_total,
    explicit_nightly,
    currency_amount_fallback,
    bare_number_fallback,
)


def _first_value(rules: tuple[Rule, ...], text: str, ctx: ParseContext) -> Optional[int]:
    for rule in rules:
        value = rule(text, ctx)
        if value is not None:
            log.debug("%s matched %s", rule.__name__, value)
            return value
    return None


# ── Entry point ────────────────────────────────────────────────────────────────

def parse_prices(
    raw_text: str,
    stay_nights: Optional[int] = None,
    bounds: Optional[PriceBounds] = None,
) -> PriceEstimate:
    """Extract (nightly, monthly) prices from one listing's text.

    Unparseable text gives ``PriceEstimate(None, None)``; nothing raises for
    garbled input.
    """
    text = raw_text or ""
    ctx = ParseContext(stay_nights=stay_nights, bounds=bounds or DEFAULT_BOUNDS)

    monthly = _first_value(MONTHLY_RULES, text, ctx)
    nightly = _first_value(NIGHTLY_RULES, mask_monthly_amounts(text), ctx)
    return PriceEstimate(price_per_night=nightly, price_per_month=monthly)
