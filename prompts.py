"""Interactive date selection for the CLI (--interactive)."""

from __future__ import annotations

import re
from datetime import date
from typing import Callable, Optional

from dates import DateConfig, DateConfigs, add_months, next_month_number, parse_date

Ask = Callable[[str], str]

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MODE_SAME_DATES = 1
MODE_PER_CITY = 2
MODE_MONTH = 3


def is_valid_date(value: str, today: Optional[date] = None) -> bool:
    """YYYY-MM-DD, a real calendar date, today or later."""
    if not _DATE_RE.match(value.strip()):
        return False
    try:
        parsed = parse_date(value)
    except ValueError:
        return False
    return parsed >= (today or date.today())


def _choose(ask: Ask, prompt: str, choices: tuple[str, ...]) -> int:
    while True:
        answer = ask(prompt).strip()
        if answer in choices:
            return int(answer)
        print(f"Please enter {', '.join(choices[:-1])} or {choices[-1]}")


def _ask_date(ask: Ask, prompt: str, today: Optional[date], after: Optional[date] = None) -> date:
    while True:
        answer = ask(prompt).strip()
        if is_valid_date(answer, today) and (after is None or parse_date(answer) > after):
            return parse_date(answer)
        if after is None:
            print("Invalid date. Please use YYYY-MM-DD format and ensure date is today or in the future.")
        else:
            print("Invalid date. Check-out must be after check-in date and use YYYY-MM-DD format.")


def ask_selection_mode(ask: Ask = input) -> int:
    print("\n==== DATE SELECTION MODE ====")
    print("1. Same dates for all cities (enter start/end dates or number of months)")
    print("2. Different dates per city (specify dates for each city individually)")
    print("3. Use month parameter")
    return _choose(ask, "Select mode (1, 2, or 3): ", ("1", "2", "3"))


def ask_dates_for_all_cities(ask: Ask = input, today: Optional[date] = None) -> DateConfig:
    print("\n==== DATES FOR ALL CITIES ====")
    print("1. Specify start and end dates (YYYY-MM-DD format)")
    print("2. Specify start date and number of months")
    method = _choose(ask, "Select method (1 or 2): ", ("1", "2"))

    checkin = _ask_date(ask, "Enter check-in date (YYYY-MM-DD): ", today)
    if method == 1:
        checkout = _ask_date(ask, "Enter check-out date (YYYY-MM-DD): ", today, after=checkin)
        return DateConfig.specific(checkin, checkout)

    while True:
        answer = ask("Enter number of months (1-12): ").strip()
        if answer.isdigit() and 1 <= int(answer) <= 12:
            break
        print("Please enter a number between 1 and 12")
    return DateConfig.specific(checkin, add_months(checkin, int(answer)))


def ask_dates_per_city(
    cities: list[str], ask: Ask = input, today: Optional[date] = None
) -> list[DateConfig]:
    print("\n==== DATES PER CITY ====")
    configs: list[DateConfig] = []
    for city in cities:
        print(f"\nDates for {city}:")
        checkin = _ask_date(ask, f"  Check-in date for {city} (YYYY-MM-DD): ", today)
        checkout = _ask_date(ask, f"  Check-out date for {city} (YYYY-MM-DD): ", today, after=checkin)
        configs.append(DateConfig.specific(checkin, checkout))
    return configs


def interactive_date_configs(
    cities: list[str],
    month: Optional[int] = None,
    ask: Ask = input,
    today: Optional[date] = None,
) -> DateConfigs:
    """Run the whole prompt flow and return what the orchestrator accepts."""
    mode = ask_selection_mode(ask)
    if mode == MODE_SAME_DATES:
        config = ask_dates_for_all_cities(ask, today)
        print(f"\nUsing dates: {config.checkin} to {config.checkout} for all cities")
        return config
    if mode == MODE_PER_CITY:
        configs = ask_dates_per_city(cities, ask, today)
        print("\nUsing different dates for each city")
        return configs
    return DateConfig.for_month(month or next_month_number(today))
