"""Unit tests for stay date configuration."""

from datetime import date

import pytest

from dates import DateConfig, DateRange, add_months, next_month_number, parse_date

TODAY = date(2026, 10, 19)


class TestMonthMode:
    def test_future_month_next_year(self):
        cfg = DateConfig.for_month(2)
        assert cfg.target_year(TODAY) == 2027
        assert cfg.resolve(TODAY) == DateRange(date(2027, 2, 1), date(2027, 2, 28), 28)

    def test_later_this_year(self):
        assert DateConfig.for_month(12).target_year(TODAY) == 2026

    def test_current_month_rolls_to_next_year(self):
        assert DateConfig.for_month(10).target_year(TODAY) == 2027

    def test_nights_is_days_in_month(self):
        assert DateConfig.for_month(11).nights(TODAY) == 30
        assert DateConfig.for_month(2).nights(date(2027, 6, 1)) == 29  # 2028 is a leap year

    def test_describe(self):
        assert DateConfig.for_month(2).describe(TODAY) == "February 2027 (28 days)"

    @pytest.mark.parametrize("month", [0, 13, None])
    def test_invalid_month(self, month):
        with pytest.raises(ValueError):
            DateConfig.for_month(month)


class TestSpecificMode:
    def test_nights(self):
        cfg = DateConfig.specific("2025-06-01", "2025-06-08")
        assert cfg.is_specific
        assert cfg.nights() == 7

    def test_resolve(self):
        rng = DateConfig.specific(date(2025, 6, 1), "2025-06-08").resolve()
        assert rng.checkin_str == "2025-06-01"
        assert rng.checkout_str == "2025-06-08"
        assert rng.nights == rng.stay_nights == 7

    def test_describe(self):
        cfg = DateConfig.specific("2025-06-01", "2025-06-08")
        assert cfg.describe() == "2025-06-01 to 2025-06-08 (7 nights)"

    def test_checkout_must_follow_checkin(self):
        with pytest.raises(ValueError):
            DateConfig.specific("2025-06-08", "2025-06-08")
        with pytest.raises(ValueError):
            DateConfig.specific("2025-06-08", "2025-06-01")

    def test_missing_date(self):
        with pytest.raises(ValueError):
            DateConfig(mode="specific", checkin=date(2025, 6, 1))

    def test_bad_format(self):
        with pytest.raises(ValueError):
            DateConfig.specific("06/01/2025", "2025-06-08")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            DateConfig(mode="week")


class TestHelpers:
    def test_add_months_clamps_day(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)

    def test_next_month_number(self):
        assert next_month_number(date(2025, 12, 5)) == 1
        assert next_month_number(TODAY) == 11

    def test_parse_date(self):
        assert parse_date(" 2025-06-01 ") == date(2025, 6, 1)
        assert parse_date(date(2025, 6, 1)) == date(2025, 6, 1)
