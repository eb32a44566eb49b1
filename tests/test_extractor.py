"""Unit tests for the extractor module."""

from unittest.mock import patch

from extractor import LINK_NOT_FOUND, extract_listings, extract_title
from models import RawListing
from price_parser import PriceEstimate


class TestExtractTitle:
    def test_structured_title(self):
        raw = RawListing(raw_text="whatever", title="  Loft in Paris  ")
        assert extract_title(raw, 1) == "Loft in Paris"

    def test_heuristic_line_with_separator(self):
        raw = RawListing(raw_text="4.9\nApartment in Porto · Ribeira\n€ 80 night")
        assert extract_title(raw, 1) == "Apartment in Porto · Ribeira"

    def test_skips_lines_starting_with_digit(self):
        raw = RawListing(raw_text="2 beds · 1 bath\nRoom in Rome · Trastevere")
        assert extract_title(raw, 1) == "Room in Rome · Trastevere"

    def test_fallback_title(self):
        raw = RawListing(raw_text="no separators here")
        assert extract_title(raw, 3) == "Listing 3"


class TestExtractListings:
    def test_prices_and_links(self):
        raws = [
            RawListing(raw_text="Flat · Paris\n$100 per night", link="https://www.airbnb.com/rooms/1"),
            RawListing(raw_text="Flat · Paris\n€ 1.900 monthly"),
        ]
        listings = extract_listings(raws)

        assert listings[0].price_per_night == 100
        assert listings[0].link == "https://www.airbnb.com/rooms/1"
        assert listings[1].price_per_night is None
        assert listings[1].price_per_month == 1900
        assert listings[1].link == LINK_NOT_FOUND

    def test_capped_at_limit(self):
        raws = [RawListing(raw_text=f"Flat · {i}\n$100 per night") for i in range(12)]
        assert len(extract_listings(raws)) == 10
        assert len(extract_listings(raws, limit=3)) == 3

    def test_stay_nights_from_page_url(self):
        raws = [RawListing(raw_text="Total €700")]
        listings = extract_listings(
            raws, page_url="https://www.airbnb.com/s/Paris/homes?checkin=2025-06-01&checkout=2025-06-08"
        )
        assert listings[0].price_per_night == 100

    def test_stay_nights_from_listing_link(self):
        raws = [
            RawListing(
                raw_text="Total €700",
                link="https://www.airbnb.com/rooms/42?check_in=2025-06-01&check_out=2025-06-08",
            )
        ]
        assert extract_listings(raws)[0].price_per_night == 100

    def test_explicit_stay_nights(self):
        raws = [RawListing(raw_text="Total €700")]
        assert extract_listings(raws, stay_nights=5)[0].price_per_night == 140

    def test_failing_listing_becomes_placeholder(self):
        raws = [RawListing(raw_text=f"Flat · {i}") for i in range(3)]
        estimates = [
            PriceEstimate(80, None),
            RuntimeError("boom"),
            PriceEstimate(None, None),
        ]
        with patch("extractor.parse_prices", side_effect=estimates):
            listings = extract_listings(raws)

        assert len(listings) == 3
        assert listings[0].price_per_night == 80
        assert listings[1].title == "Error parsing listing 2"
        assert listings[1].price_per_night is None
        assert listings[1].price_per_month is None
        assert listings[1].link == "N/A"
        assert listings[2].title == "Flat · 2"
