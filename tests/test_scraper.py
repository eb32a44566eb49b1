"""Search URL construction; the browser itself is not exercised here."""

from datetime import date
from urllib.parse import parse_qs, urlparse

from dates import DateRange
from scraper import build_search_url


def test_search_url_carries_dates_and_room_filter():
    url = build_search_url("New York", DateRange(date(2025, 6, 1), date(2025, 6, 8), 7))
    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    assert parsed.path == "/s/New%20York/homes"
    assert query["checkin"] == ["2025-06-01"]
    assert query["checkout"] == ["2025-06-08"]
    assert query["adults"] == ["1"]
    assert query["room_types[]"] == ["Entire home/apt"]


def test_city_with_slash_is_escaped():
    url = build_search_url("Rio/Brazil", DateRange(date(2025, 6, 1), date(2025, 6, 2), 1))
    assert "/s/Rio%2FBrazil/homes?" in url
