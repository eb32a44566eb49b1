"""Tests for the JSON/CSV export."""

import csv
import json

from aggregator import aggregate_city, failed_city
from dates import DateConfig
from exporter import CSV_HEADERS, build_report_data, write_results
from models import AnalysisResult, ParsedListing

WEEK = DateConfig.specific("2025-06-01", "2025-06-08")


def _result():
    listings = [
        ParsedListing("Flat A", 100, None, "https://www.airbnb.com/rooms/1"),
        ParsedListing("Flat B", 200, 3000, "https://www.airbnb.com/rooms/2"),
        ParsedListing("Flat C", 150, None, "https://www.airbnb.com/rooms/3"),
    ]
    return AnalysisResult.from_cities([
        aggregate_city("Lisbon", listings, WEEK),
        failed_city("Atlantis", "Navigation timeout"),
    ])


class TestBuildReportData:
    def test_structure(self):
        data = build_report_data(_result(), timestamp="2025-05-01T10:00:00+00:00")

        assert data["timestamp"] == "2025-05-01T10:00:00+00:00"
        assert data["summary"] == {"totalCities": 2, "successfulCities": 1, "failedCities": 1}
        assert [c["city"] for c in data["cities"]] == ["Lisbon", "Atlantis"]
        assert data["averages"]["overallAveragePrice"] == 150

    def test_city_keys(self):
        lisbon = build_report_data(_result())["cities"][0]
        assert lisbon["averagePrice"] == 150
        assert lisbon["totalCost"] == {"average": 1050, "min": 700, "max": 1400, "nights": 7}
        assert lisbon["hasExplicitPrices"] is True
        assert lisbon["hasCalculatedPrices"] is True
        assert lisbon["error"] is None

    def test_no_successful_cities(self):
        result = AnalysisResult.from_cities([failed_city("X", "No listings found")])
        averages = build_report_data(result)["averages"]
        assert averages == {"overallAveragePrice": None, "overallAverageMonthlyPrice": None}


class TestWriteResults:
    def test_writes_json_and_csv(self, tmp_path):
        out = tmp_path / "analysis.json"
        data = write_results(_result(), out)

        assert json.loads(out.read_text(encoding="utf-8")) == data
        assert (tmp_path / "analysis.csv").exists()

    def test_csv_output_name_keeps_json(self, tmp_path):
        data = write_results(_result(), tmp_path / "results.csv")

        assert json.loads((tmp_path / "results.json").read_text(encoding="utf-8")) == data
        with open(tmp_path / "results.csv", newline="", encoding="utf-8") as f:
            assert next(csv.reader(f)) == CSV_HEADERS

    def test_csv_rows(self, tmp_path):
        out = tmp_path / "analysis.json"
        write_results(_result(), out)

        with open(tmp_path / "analysis.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))

        assert rows[0] == CSV_HEADERS
        lisbon = dict(zip(CSV_HEADERS, rows[1]))
        assert lisbon["City"] == "Lisbon"
        assert lisbon["Average Nightly Price"] == "150"
        assert lisbon["Lower Boundary"] == "100"
        assert lisbon["Total Cost Range"] == "700-1400"
        assert lisbon["Nights"] == "7"
        assert lisbon["Status"] == "Success"

        atlantis = dict(zip(CSV_HEADERS, rows[2]))
        assert atlantis["Average Nightly Price"] == "N/A"
        assert atlantis["Total Cost Average"] == "N/A"
        assert atlantis["Nightly Listings Found"] == "0"
        assert atlantis["Status"] == "Failed"
