"""
Playwright stealth scraper for Airbnb search results.

One BrowserSession per city: launch Chromium, warm up on the home page,
open the search results for the city and date range with the
"Entire home/apt" filter, and hand back the first page of listing cards
as RawListing records. Prices are not interpreted here.
"""

from __future__ import annotations

import random
from typing import Callable, Optional
from urllib.parse import quote, urlencode

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright_stealth import Stealth

import config
from dates import DateRange
from models import RawListing
from utils import async_random_sleep, get_logger

log = get_logger("scraper")

ProgressCallback = Callable[[str], None]

# User-agent pool
_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
]

_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]

# Tried in order; the first selector that finds anything wins
_CARD_SELECTORS = [
    '[data-testid="card-container"]',
    '[itemprop="itemListElement"]',
    'div[role="group"]',
]
_TITLE_SELECTOR = '[data-testid="listing-card-title"]'
_LINK_SELECTOR = 'a[href*="/rooms/"]'

# Walk up from a title element until the container holds the whole card
_CARD_FROM_TITLE_JS = """
(el) => {
    let node = el.parentElement;
    for (let i = 0; i < 5 && node; i++) {
        if (node.innerText && node.innerText.length > 50) return node.innerText;
        node = node.parentElement;
    }
    return (el.parentElement || el).innerText;
}
"""


class ScrapeError(Exception):
    """The search page for a city could not be reached."""


def build_search_url(city: str, date_range: DateRange) -> str:
    params = [
        ("checkin", date_range.checkin_str),
        ("checkout", date_range.checkout_str),
        ("adults", "1"),
    ]
    params += [("room_types[]", room_type) for room_type in config.ROOM_TYPES]
    return f"{config.SEARCH_BASE_URL}/s/{quote(city, safe='')}/homes?{urlencode(params)}"


# ── Browser setup ──────────────────────────────────────────────────────────────

async def build_browser_context(browser: Browser) -> BrowserContext:
    """Create a Chromium context with randomised UA and viewport."""
    ua = random.choice(_USER_AGENTS)
    kwargs: dict = dict(
        user_agent=ua,
        viewport={"width": 1366 + random.randint(0, 554), "height": 768 + random.randint(0, 312)},
        locale=config.LOCALE,
        extra_http_headers={
            "Accept-Language": f"{config.LOCALE},en;q=0.9",
        },
    )
    if config.PROXY_URL:
        kwargs["proxy"] = {"server": config.PROXY_URL}
        log.info("Using proxy: %s", config.PROXY_URL)
    return await browser.new_context(**kwargs)


async def warm_up_session(page: Page) -> None:
    """Visit the home page first so the search request carries cookies."""
    log.info("Warming up session on %s", config.SEARCH_BASE_URL)
    try:
        await page.goto(config.SEARCH_BASE_URL, wait_until="domcontentloaded", timeout=30_000)
        await async_random_sleep()
    except Exception as exc:
        log.warning("Warm-up navigation failed (non-fatal): %s", exc)


# ── Card collection ────────────────────────────────────────────────────────────

async def _card_from_element(element) -> RawListing:
    title = None
    title_el = await element.query_selector(_TITLE_SELECTOR)
    if title_el is None:
        title_el = await element.query_selector("h1, h2, h3, h4")
    if title_el is not None:
        title = (await title_el.inner_text()).strip() or None

    link_el = await element.query_selector(_LINK_SELECTOR) or await element.query_selector("a")
    link = await link_el.evaluate("(a) => a.href") if link_el is not None else None

    text = await element.inner_text()
    return RawListing(raw_text=text, link=link, title=title)


async def collect_cards(page: Page, limit: int) -> list[RawListing]:
    """Return up to ``limit`` listing cards from the current results page."""
    for selector in _CARD_SELECTORS:
        elements = await page.query_selector_all(selector)
        log.debug("Selector %s: found %d elements", selector, len(elements))
        if elements:
            return [await _card_from_element(el) for el in elements[:limit]]

    # Title elements only: lift each to its card container
    titles = await page.query_selector_all(_TITLE_SELECTOR)
    log.debug("Selector %s: found %d elements", _TITLE_SELECTOR, len(titles))
    cards: list[RawListing] = []
    for title_el in titles[:limit]:
        text = await title_el.evaluate(_CARD_FROM_TITLE_JS)
        link = await title_el.evaluate(
            "(el) => { const a = el.closest('a') || el.parentElement.querySelector('a'); return a ? a.href : null; }"
        )
        cards.append(RawListing(raw_text=text or "", link=link, title=(await title_el.inner_text()).strip()))
    return cards


# ── Session ────────────────────────────────────────────────────────────────────

class BrowserSession:
    """A browser owned by exactly one city search."""

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self._progress = progress

    @property
    def current_url(self) -> str:
        return self._page.url

    def _emit(self, message: str) -> None:
        if self._progress:
            self._progress(message)

    async def search(self, city: str, date_range: DateRange) -> list[RawListing]:
        """Open the results page for ``city`` and return its listing cards."""
        log.info(
            "Searching %s for %s to %s (%d nights)",
            city, date_range.checkin_str, date_range.checkout_str, date_range.nights,
        )
        self._emit(f"🔍 Navigating to Airbnb for {city}...")
        await warm_up_session(self._page)

        url = build_search_url(city, date_range)
        self._emit(f"🏠 Applying \"Entire place\" filter for {city}...")
        try:
            await self._page.goto(url, wait_until="domcontentloaded", timeout=config.NAVIGATION_TIMEOUT_MS)
        except Exception as exc:
            raise ScrapeError(f"Navigation to search results failed: {exc}") from exc

        try:
            await self._page.wait_for_selector(
                ", ".join(_CARD_SELECTORS + [_TITLE_SELECTOR]),
                timeout=config.NAVIGATION_TIMEOUT_MS,
            )
        except Exception as exc:
            log.warning("Listing cards did not appear for %s: %s", city, exc)
        await async_random_sleep()

        self._emit(f"📋 Extracting listings from {city}...")
        log.info("Current page: %s (%s)", await self._page.title(), self._page.url)
        cards = await collect_cards(self._page, config.MAX_LISTINGS_PER_CITY)
        log.info("%s: collected %d listing cards", city, len(cards))
        return cards

    async def close(self) -> None:
        try:
            await self._context.close()
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightProvider:
    """Opens one stealth Chromium session per city."""

    def __init__(self, progress: Optional[ProgressCallback] = None) -> None:
        self._progress = progress

    async def open_session(self) -> BrowserSession:
        pw = await async_playwright().start()
        try:
            browser = await pw.chromium.launch(headless=config.HEADLESS, args=_LAUNCH_ARGS)
            context = await build_browser_context(browser)
            page = await context.new_page()
            await Stealth().apply_stealth_async(page)
        except Exception:
            await pw.stop()
            raise
        return BrowserSession(pw, browser, context, page, progress=self._progress)
