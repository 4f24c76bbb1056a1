"""Unit tests: defensive parsing of search query parameters."""
import pytest

from api.search import parse_search_filters
from utils.config import SEARCH_DEFAULT_PER_PAGE, SEARCH_DEFAULT_RADIUS_KM, SEARCH_MAX_PER_PAGE

pytestmark = pytest.mark.unit


def test_defaults():
    f = parse_search_filters()
    assert f.name is None and not f.has_geo
    assert f.category_ids == [] and f.aspect_ids == []
    assert f.open_now is False
    assert f.page == 1 and f.per_page == SEARCH_DEFAULT_PER_PAGE


def test_geo_triple_parsed():
    f = parse_search_filters(latitude="41.88", longitude="-87.63", distance="2.5")
    assert f.has_geo
    assert (f.latitude, f.longitude, f.radius_km) == (41.88, -87.63, 2.5)


def test_coordinates_without_distance_use_default_radius():
    f = parse_search_filters(latitude="41.88", longitude="-87.63", distance="far")
    assert f.radius_km == SEARCH_DEFAULT_RADIUS_KM


def test_non_numeric_coordinates_drop_geo_filter():
    """Bad coordinates are excluded from the predicate instead of raising."""
    f = parse_search_filters(latitude="abc", longitude="-87.63", distance="5")
    assert not f.has_geo and f.latitude is None and f.radius_km is None


def test_out_of_range_coordinates_drop_geo_filter():
    assert not parse_search_filters(latitude="95", longitude="10", distance="5").has_geo
    assert not parse_search_filters(latitude="10", longitude="-200", distance="5").has_geo


def test_nan_is_not_a_number():
    assert not parse_search_filters(latitude="nan", longitude="1", distance="5").has_geo


def test_id_lists_comma_and_repeated():
    """Comma lists and repeated parameters both work; junk, zero and negatives are dropped."""
    f = parse_search_filters(category_ids=["1,2,x", "3", "-4", "0", "2"], aspect_ids=["7"])
    assert f.category_ids == [1, 2, 3]
    assert f.aspect_ids == [7]


@pytest.mark.parametrize("raw", ["true", "TRUE", "1", "yes", "on"])
def test_open_now_truthy(raw):
    assert parse_search_filters(is_open_now=raw).open_now is True


@pytest.mark.parametrize("raw", [None, "", "false", "0", "nope"])
def test_open_now_falsy(raw):
    assert parse_search_filters(is_open_now=raw).open_now is False


def test_paging_bounds():
    f = parse_search_filters(page="0", per_page="1000")
    assert f.page == 1 and f.per_page == SEARCH_MAX_PER_PAGE
    f = parse_search_filters(page="x", per_page="-3")
    assert f.page == 1 and f.per_page == 1
    f = parse_search_filters(page="3", per_page="10")
    assert f.offset == 20


def test_blank_name_ignored():
    assert parse_search_filters(name="   ").name is None
    assert parse_search_filters(name=" museum ").name == "museum"
