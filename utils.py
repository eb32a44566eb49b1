"""Shared utilities: logger, sleep helpers, rounding."""

import asyncio
import logging
import math
import random

import config

# ── Logger ─────────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ── Sleep helpers ──────────────────────────────────────────────────────────────

async def async_random_sleep(
    min_s: float | None = None, max_s: float | None = None
) -> None:
    """Async random sleep (non-blocking) to look less like a bot."""
    lo = min_s if min_s is not None else config.SLEEP_MIN
    hi = max_s if max_s is not None else config.SLEEP_MAX
    duration = random.uniform(lo, hi)
    get_logger("utils").debug("Async sleeping %.2fs", duration)
    await asyncio.sleep(duration)


# ── Numbers ────────────────────────────────────────────────────────────────────

def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives: 2.5 → 3, 1050.5 → 1051."""
    return int(math.floor(value + 0.5))
