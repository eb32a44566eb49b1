"""Tests for the terminal report."""

from aggregator import aggregate_city, failed_city
from dates import DateConfig
from models import AnalysisResult, ParsedListing
from report import format_city_report, format_report

WEEK = DateConfig.specific("2025-06-01", "2025-06-08")


def _lisbon(monthly=None):
    listings = [
        ParsedListing("Flat A", 100, monthly, "-"),
        ParsedListing("Flat B", 200, None, "-"),
        ParsedListing("Flat C", 150, None, "-"),
    ]
    return aggregate_city("Lisbon", listings, WEEK)


class TestCityReport:
    def test_successful_city(self):
        lines = format_city_report(_lisbon())
        assert lines[0] == "Lisbon:"
        assert "    Average: $150/night" in lines
        assert "    Breakdown: 7 nights × $150 average = $1050" in lines
        assert "    Source: Calculated from nightly rates (30-day estimate with 20% discount)" in lines

    def test_mixed_monthly(self):
        lines = format_city_report(_lisbon(monthly=2500))
        assert "    Listings: 1 explicit + 2 calculated (20% discount)" in lines

    def test_failed_city(self):
        assert format_city_report(failed_city("Rome", "Navigation timeout")) == ["Rome: Navigation timeout"]


class TestFullReport:
    def test_summary_and_overall(self):
        result = AnalysisResult.from_cities([_lisbon(), failed_city("Rome", "boom")])
        text = format_report(result)

        assert "Total cities analyzed: 2" in text
        assert "Successful extractions: 1" in text
        assert "Failed extractions: 1" in text
        assert "==== NIGHTLY RATES SUMMARY ====" in text
        assert "Average across all cities: $150/night" in text
        assert "Cities with calculated monthly pricing only (20% discount): Lisbon" in text

    def test_no_overall_section_when_everything_failed(self):
        result = AnalysisResult.from_cities([failed_city("Rome", "boom")])
        assert "NIGHTLY RATES SUMMARY" not in format_report(result)
