"""Centralised config loader — reads from .env and environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (silently skipped if absent)
load_dotenv(Path(__file__).parent / ".env")


def _get(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _get_int(key: str, default: int = 0) -> int:
    try:
        return int(_get(key, str(default)))
    except ValueError:
        return default


def _get_float(key: str, default: float = 0.0) -> float:
    try:
        return float(_get(key, str(default)))
    except ValueError:
        return default


def _get_list(key: str, default: str = "") -> list[str]:
    raw = _get(key, default)
    return [x.strip() for x in raw.split(",") if x.strip()]


# ── Browser ────────────────────────────────────────────────────────────────────
HEADLESS: bool = _get("HEADLESS", "true").lower() in ("1", "true", "yes")
PROXY_URL: str = _get("PROXY_URL")
SEARCH_BASE_URL: str = _get("SEARCH_BASE_URL", "https://www.airbnb.com")
LOCALE: str = _get("LOCALE", "en-US")
NAVIGATION_TIMEOUT_MS: int = _get_int("NAVIGATION_TIMEOUT_MS", 45_000)
ROOM_TYPES: list[str] = _get_list("ROOM_TYPES", "Entire home/apt")

# ── Pacing ─────────────────────────────────────────────────────────────────────
SLEEP_MIN: float = _get_float("SLEEP_MIN", 2.0)
SLEEP_MAX: float = _get_float("SLEEP_MAX", 4.0)
CITY_DELAY_SECONDS: float = _get_float("CITY_DELAY_SECONDS", 5.0)
MAX_CONCURRENT_CITIES: int = _get_int("MAX_CONCURRENT_CITIES", 1)

# ── Extraction ─────────────────────────────────────────────────────────────────
MAX_LISTINGS_PER_CITY: int = _get_int("MAX_LISTINGS_PER_CITY", 10)

# Plausibility ranges, all in the listing currency
NIGHTLY_PRICE_MIN: int = _get_int("NIGHTLY_PRICE_MIN", 30)
NIGHTLY_PRICE_MAX: int = _get_int("NIGHTLY_PRICE_MAX", 400)
MONTHLY_PRICE_MIN: int = _get_int("MONTHLY_PRICE_MIN", 800)
MONTHLY_PRICE_MAX: int = _get_int("MONTHLY_PRICE_MAX", 5000)
TOTAL_PRICE_MIN: int = _get_int("TOTAL_PRICE_MIN", 100)
TOTAL_PRICE_MAX: int = _get_int("TOTAL_PRICE_MAX", 8000)
FALLBACK_NIGHTLY_MIN: int = _get_int("FALLBACK_NIGHTLY_MIN", 50)
FALLBACK_NIGHTLY_MAX: int = _get_int("FALLBACK_NIGHTLY_MAX", 300)

# ── Aggregation ────────────────────────────────────────────────────────────────
MONTHLY_DAYS: int = _get_int("MONTHLY_DAYS", 30)
MONTHLY_DISCOUNT: float = _get_float("MONTHLY_DISCOUNT", 0.2)

# ── Output ─────────────────────────────────────────────────────────────────────
OUTPUT_FILE: str = _get("OUTPUT_FILE", "airbnb-price-analysis.json")
LOG_LEVEL: str = _get("LOG_LEVEL", "INFO").upper()
