"""Stay date configuration: specific check-in/check-out or a whole month."""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Mapping, Sequence, Union

DATE_FORMAT = "%Y-%m-%d"

MODE_SPECIFIC = "specific"
MODE_MONTH = "month"


def parse_date(value: str | date) -> date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def add_months(start: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's end."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_month_number(today: date | None = None) -> int:
    today = today or date.today()
    return 1 if today.month == 12 else today.month + 1


@dataclass(frozen=True)
class DateRange:
    """Concrete dates used to fill the search form."""

    checkin: date
    checkout: date
    nights: int

    @property
    def checkin_str(self) -> str:
        return self.checkin.strftime(DATE_FORMAT)

    @property
    def checkout_str(self) -> str:
        return self.checkout.strftime(DATE_FORMAT)

    @property
    def stay_nights(self) -> int:
        """Nights between the two search dates."""
        return (self.checkout - self.checkin).days


@dataclass(frozen=True)
class DateConfig:
    """Date selection for one city.

    Build with ``DateConfig.specific(...)`` or ``DateConfig.for_month(...)``.
    """

    mode: str
    checkin: date | None = None
    checkout: date | None = None
    month: int | None = None

    def __post_init__(self) -> None:
        if self.mode == MODE_SPECIFIC:
            if self.checkin is None or self.checkout is None:
                raise ValueError("Specific dates need both check-in and check-out")
            if self.nights() < 1:
                raise ValueError(
                    f"Check-out ({self.checkout}) must be after check-in ({self.checkin})"
                )
        elif self.mode == MODE_MONTH:
            if not isinstance(self.month, int) or not 1 <= self.month <= 12:
                raise ValueError(f"Month must be a number between 1 and 12, got {self.month!r}")
        else:
            raise ValueError(f"Unknown date mode: {self.mode!r}")

    @classmethod
    def specific(cls, checkin: str | date, checkout: str | date) -> DateConfig:
        return cls(mode=MODE_SPECIFIC, checkin=parse_date(checkin), checkout=parse_date(checkout))

    @classmethod
    def for_month(cls, month: int) -> DateConfig:
        return cls(mode=MODE_MONTH, month=month)

    @property
    def is_specific(self) -> bool:
        return self.mode == MODE_SPECIFIC

    def target_year(self, today: date | None = None) -> int:
        """Year of the next future occurrence of ``month``."""
        today = today or date.today()
        return today.year + 1 if self.month <= today.month else today.year

    def nights(self, today: date | None = None) -> int:
        if self.is_specific:
            days = (self.checkout - self.checkin) / timedelta(days=1)
            return math.ceil(days)
        return calendar.monthrange(self.target_year(today), self.month)[1]

    def resolve(self, today: date | None = None) -> DateRange:
        if self.is_specific:
            return DateRange(self.checkin, self.checkout, self.nights())
        year = self.target_year(today)
        days = calendar.monthrange(year, self.month)[1]
        return DateRange(date(year, self.month, 1), date(year, self.month, days), days)

    def describe(self, today: date | None = None) -> str:
        if self.is_specific:
            return f"{self.checkin:%Y-%m-%d} to {self.checkout:%Y-%m-%d} ({self.nights()} nights)"
        first = date(self.target_year(today), self.month, 1)
        return f"{first:%B %Y} ({self.nights(today)} days)"


# One shared config, one per city in order, or keyed by city
DateConfigs = Union[DateConfig, Sequence[DateConfig], Mapping[str, DateConfig]]
