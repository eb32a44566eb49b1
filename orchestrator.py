"""
Multi-city run: scrape → extract → aggregate, one city at a time.

Cities are processed sequentially by default with a fixed pause between
them to stay under the target site's rate limits. A city that fails in
any way is recorded with its error message and the batch carries on.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Callable, Mapping, Optional, Protocol, Sequence

import config
from aggregator import NO_LISTINGS, aggregate_city, failed_city
from dates import DateConfig, DateConfigs, DateRange
from extractor import extract_listings
from models import AnalysisResult, CityState, CityStats, RawListing
from utils import get_logger

log = get_logger("orchestrator")

ProgressCallback = Callable[[str], None]


class Session(Protocol):
    current_url: str

    async def search(self, city: str, date_range: DateRange) -> list[RawListing]: ...

    async def close(self) -> None: ...


class Provider(Protocol):
    async def open_session(self) -> Session: ...


def resolve_date_configs(cities: Sequence[str], date_configs: DateConfigs) -> list[DateConfig]:
    """One DateConfig per city, from a shared config, a list or a per-city dict."""
    if isinstance(date_configs, DateConfig):
        return [date_configs] * len(cities)
    if isinstance(date_configs, Mapping):
        missing = [c for c in cities if c not in date_configs]
        if missing:
            raise ValueError(f"No dates given for: {', '.join(missing)}")
        return [date_configs[c] for c in cities]
    if isinstance(date_configs, Sequence) and not isinstance(date_configs, str):
        configs = list(date_configs)
        if len(configs) != len(cities):
            raise ValueError(
                f"Got {len(configs)} date configs for {len(cities)} cities"
            )
        if not all(isinstance(c, DateConfig) for c in configs):
            raise ValueError("Every date config must be a DateConfig")
        return configs
    raise ValueError(f"Unsupported date configuration: {date_configs!r}")


class Orchestrator:
    """Drives the per-city state machine and collects CityStats."""

    def __init__(
        self,
        provider: Provider,
        progress: Optional[ProgressCallback] = None,
        max_concurrent: Optional[int] = None,
        city_delay: Optional[float] = None,
        today: Optional[date] = None,
    ) -> None:
        self.provider = provider
        self.progress = progress
        self.max_concurrent = max(1, max_concurrent or config.MAX_CONCURRENT_CITIES)
        self.city_delay = config.CITY_DELAY_SECONDS if city_delay is None else city_delay
        self.today = today
        self.states: list[CityState] = []

    def _emit(self, message: str) -> None:
        log.debug(message)
        if self.progress:
            self.progress(message)

    def _set_state(self, index: int, state: CityState) -> None:
        self.states[index] = state
        log.debug("city #%d → %s", index + 1, state.value)

    async def run(self, cities: Sequence[str], date_configs: DateConfigs) -> AnalysisResult:
        cities = list(cities)
        if not cities:
            raise ValueError("At least one city must be specified")
        configs = resolve_date_configs(cities, date_configs)

        self.states = [CityState.PENDING] * len(cities)
        results: list[Optional[CityStats]] = [None] * len(cities)

        if self.max_concurrent == 1:
            for i, city in enumerate(cities):
                results[i] = await self._process_city(i, city, configs[i], len(cities))
                if i < len(cities) - 1:
                    await self._pause()
        else:
            semaphore = asyncio.Semaphore(self.max_concurrent)

            async def worker(i: int, city: str) -> None:
                async with semaphore:
                    results[i] = await self._process_city(i, city, configs[i], len(cities))
                    if i < len(cities) - 1:
                        await self._pause()

            await asyncio.gather(*(worker(i, c) for i, c in enumerate(cities)))

        result = AnalysisResult.from_cities(results)
        log.info(
            "Run complete: %d cities, %d successful, %d failed",
            result.summary.total_cities,
            result.summary.successful_cities,
            result.summary.failed_cities,
        )
        return result

    async def _pause(self) -> None:
        self._emit(f"⏳ Waiting {self.city_delay:g} seconds before next city...")
        await asyncio.sleep(self.city_delay)

    async def _process_city(
        self, index: int, city: str, date_config: DateConfig, total: int
    ) -> CityStats:
        self._emit(f"Processing {city} ({index + 1}/{total})")
        try:
            stats = await self._scrape_and_aggregate(index, city, date_config)
        except Exception as exc:
            log.error("Error processing %s: %s", city, exc)
            self._set_state(index, CityState.FAILED)
            self._emit(f"❌ {city}: {exc}")
            return failed_city(city, str(exc))

        if stats.error is None:
            self._set_state(index, CityState.DONE)
            self._emit(
                f"✅ {city}: Found {stats.listings_found} prices, "
                f"Average: ${stats.average_price}/night"
            )
        else:
            self._set_state(index, CityState.FAILED)
            if stats.error == NO_LISTINGS:
                self._emit(f"❌ {city}: {NO_LISTINGS}")
            else:
                self._emit(f"⚠️ {city}: Found listings but no valid prices")
        return stats

    async def _scrape_and_aggregate(
        self, index: int, city: str, date_config: DateConfig
    ) -> CityStats:
        date_range = date_config.resolve(self.today)

        self._set_state(index, CityState.SCRAPING)
        self._emit(f"🌐 Launching browser for {city}...")
        session = await self.provider.open_session()
        try:
            raw_listings = await session.search(city, date_range)
            page_url = getattr(session, "current_url", None)
        finally:
            await session.close()

        self._set_state(index, CityState.EXTRACTING)
        listings = extract_listings(
            raw_listings,
            stay_nights=date_range.stay_nights or None,
            page_url=page_url,
        )

        self._set_state(index, CityState.AGGREGATING)
        self._emit(f"📊 Analyzing {city} data...")
        return aggregate_city(city, listings, date_config)


async def run_analysis(
    cities: Sequence[str],
    date_configs: DateConfigs,
    progress: Optional[ProgressCallback] = None,
    provider: Optional[Provider] = None,
    max_concurrent: Optional[int] = None,
    city_delay: Optional[float] = None,
    today: Optional[date] = None,
) -> AnalysisResult:
    """Analyse every city and return the frozen AnalysisResult."""
    if provider is None:
        from scraper import PlaywrightProvider
        provider = PlaywrightProvider(progress=progress)

    orchestrator = Orchestrator(
        provider,
        progress=progress,
        max_concurrent=max_concurrent,
        city_delay=city_delay,
        today=today,
    )
    return await orchestrator.run(cities, date_configs)
