"""Integration tests: search query (review floor, filters, radius, ordering, paging, open now)."""
from datetime import date, datetime

import pytest

from discovery_core.geo import haversine_km
from discovery_core.opening_hours import CITY_TZ
from repositories.location_repository import get_or_create_category, set_aspect_rating
from repositories.search_repository import SearchFilters, search_locations

pytestmark = pytest.mark.integration

CHICAGO = (41.8781, -87.6298)
FOUR = [5, 4, 4, 3]
# 2026-10-19 is a Monday.
MONDAY_NOON = datetime(2026, 10, 19, 12, 0, tzinfo=CITY_TZ)


def _names(page):
    return [hit.location.name for hit in page.hits]


def test_review_floor_excludes_thin_locations(db_session, make_location):
    make_location("Three Reviews", reviews=[5, 5, 5])
    make_location("Four Reviews", reviews=FOUR)
    make_location("No Reviews")
    page = search_locations(db_session, SearchFilters())
    assert _names(page) == ["Four Reviews"]
    assert page.total == 1
    assert page.hits[0].review_count == 4
    assert page.hits[0].distance_km is None


def test_name_substring_case_insensitive(db_session, make_location):
    make_location("Art Institute", reviews=FOUR)
    make_location("Lincoln Park Zoo", reviews=FOUR)
    assert _names(search_locations(db_session, SearchFilters(name="institute"))) == ["Art Institute"]
    assert search_locations(db_session, SearchFilters(name="aquarium")).total == 0


def test_name_wildcards_are_literal(db_session, make_location):
    make_location("100% Chicago", reviews=FOUR)
    make_location("1000 Lakeshore", reviews=FOUR)
    assert _names(search_locations(db_session, SearchFilters(name="100%"))) == ["100% Chicago"]


def test_category_filter_any_of(db_session, make_location):
    park = get_or_create_category(db_session, "Park")
    museum = get_or_create_category(db_session, "Museum")
    bar = get_or_create_category(db_session, "Bar")
    make_location("Grant Park", reviews=FOUR, category_id=park.id)
    make_location("Field Museum", reviews=FOUR, category_id=museum.id)
    make_location("Green Mill", reviews=FOUR, category_id=bar.id)
    page = search_locations(db_session, SearchFilters(category_ids=[park.id, museum.id]))
    assert sorted(_names(page)) == ["Field Museum", "Grant Park"]


def test_aspect_filter_is_conjunctive_with_threshold(db_session, make_location, make_location_aspects):
    make_location("Both", reviews=FOUR, aspects={"Safety": 5, "Views": 5})
    make_location("Only Safety", reviews=FOUR, aspects={"Safety": 5, "Views": 4.5})
    make_location("Neither", reviews=FOUR, aspects={"Safety": 2})
    safety, views = make_location_aspects("Safety", "Views")
    assert _names(search_locations(db_session, SearchFilters(aspect_ids=[safety, views]))) == ["Both"]
    assert sorted(_names(search_locations(db_session, SearchFilters(aspect_ids=[safety])))) == ["Both", "Only Safety"]


def test_radius_excludes_far_locations_and_orders_by_distance(db_session, make_location):
    make_location("Milwaukee", 43.0389, -87.9065, reviews=FOUR)
    make_location("Evanston", 42.0451, -87.6877, reviews=FOUR)
    make_location("The Loop", 41.8837, -87.6325, reviews=FOUR)
    lat, lon = CHICAGO
    page = search_locations(db_session, SearchFilters(latitude=lat, longitude=lon, radius_km=25))
    assert _names(page) == ["The Loop", "Evanston"]
    distances = [hit.distance_km for hit in page.hits]
    assert distances == sorted(distances)
    assert distances[1] == pytest.approx(haversine_km(lat, lon, 42.0451, -87.6877), rel=1e-6)


def test_radius_monotonic(db_session, make_location):
    make_location("Milwaukee", 43.0389, -87.9065, reviews=FOUR)
    make_location("Evanston", 42.0451, -87.6877, reviews=FOUR)
    make_location("The Loop", 41.8837, -87.6325, reviews=FOUR)
    lat, lon = CHICAGO
    previous: set[str] = set()
    for radius in (1, 25, 200):
        found = set(_names(search_locations(db_session, SearchFilters(latitude=lat, longitude=lon, radius_km=radius))))
        assert previous <= found
        previous = found
    assert previous == {"Milwaukee", "Evanston", "The Loop"}


def test_without_geo_orders_by_rating_desc(db_session, make_location):
    make_location("Average", reviews=[3, 3, 3, 3])
    make_location("Best", reviews=[5, 5, 5, 5])
    make_location("Good", reviews=[4, 4, 4, 4])
    assert _names(search_locations(db_session, SearchFilters())) == ["Best", "Good", "Average"]


def test_pagination_total_counts_all_matches(db_session, make_location):
    for i in range(5):
        make_location(f"Place {i}", reviews=[5, 5, 5, 5 - (i % 2)])
    first = search_locations(db_session, SearchFilters(page=1, per_page=2))
    third = search_locations(db_session, SearchFilters(page=3, per_page=2))
    beyond = search_locations(db_session, SearchFilters(page=4, per_page=2))
    assert first.total == third.total == beyond.total == 5
    assert len(first.hits) == 2 and len(third.hits) == 1 and beyond.hits == []
    assert not {h.location.id for h in first.hits} & {h.location.id for h in third.hits}


def test_open_now_filters_before_paging(db_session, make_location):
    open_hours = ["Monday: 9:00 AM – 5:00 PM"]
    closed_hours = ["Monday: Closed"]
    for i in range(3):
        make_location(f"Open {i}", reviews=FOUR, opening_hours=open_hours)
        make_location(f"Closed {i}", reviews=FOUR, opening_hours=closed_hours)
    make_location("Unknown", reviews=FOUR)
    page = search_locations(db_session, SearchFilters(open_now=True, per_page=2), now=MONDAY_NOON)
    assert page.total == 3
    assert len(page.hits) == 2
    assert all(name.startswith("Open") for name in _names(page))
    rest = search_locations(db_session, SearchFilters(open_now=True, page=2, per_page=2), now=MONDAY_NOON)
    assert len(rest.hits) == 1 and rest.hits[0].location.name.startswith("Open")


def test_all_filters_combine(db_session, make_location, make_location_aspects):
    park = get_or_create_category(db_session, "Park")
    make_location("Lakefront Park", 41.88, -87.62, reviews=FOUR, aspects={"Views": 5}, category_id=park.id)
    make_location("Lakefront Cafe", 41.88, -87.62, reviews=FOUR, aspects={"Views": 5})
    make_location("Lakefront Far", 43.0, -87.9, reviews=FOUR, aspects={"Views": 5}, category_id=park.id)
    (views,) = make_location_aspects("Views")
    lat, lon = CHICAGO
    filters = SearchFilters(
        name="lakefront", latitude=lat, longitude=lon, radius_km=10,
        category_ids=[park.id], aspect_ids=[views],
    )
    assert _names(search_locations(db_session, filters)) == ["Lakefront Park"]


def test_aspect_filter_uses_latest_generation(db_session, make_location, make_location_aspects):
    faded = make_location("Faded", reviews=FOUR)
    improved = make_location("Improved", reviews=FOUR)
    (views,) = make_location_aspects("Views")
    set_aspect_rating(db_session, faded.id, views, 5, date(2026, 1, 1))
    set_aspect_rating(db_session, faded.id, views, 2, date(2026, 6, 1))
    set_aspect_rating(db_session, improved.id, views, 2, date(2026, 1, 1))
    set_aspect_rating(db_session, improved.id, views, 5, date(2026, 6, 1))
    assert _names(search_locations(db_session, SearchFilters(aspect_ids=[views]))) == ["Improved"]
