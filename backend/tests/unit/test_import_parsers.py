"""Unit tests: import parsers (CSV/JSON)."""
import pytest

from utils.import_parsers import parse_csv, parse_json, parse_upload

pytestmark = pytest.mark.unit


def test_parse_csv_empty():
    """parse_csv with header-only returns empty list."""
    assert parse_csv(b"a,b,c\n") == []


def test_parse_csv_one_row():
    """parse_csv returns list of dicts with stripped values."""
    content = b"location_id,rating,body\n loc-1 ,5, Lovely little square \n"
    rows = parse_csv(content)
    assert rows == [{"location_id": "loc-1", "rating": "5", "body": "Lovely little square"}]


def test_parse_csv_location_format_expands_cells():
    """Hours split on | and aspect ratings on ; when location_format is set."""
    content = (
        "name,latitude,longitude,opening_hours,aspect_ratings\n"
        "Park,41.9,-87.6,Monday: 9:00 AM – 5:00 PM|Tuesday: Closed,Cleanliness=4.5;Safety=3\n"
    ).encode("utf-8")
    rows = parse_csv(content, location_format=True)
    assert rows[0]["opening_hours"] == ["Monday: 9:00 AM – 5:00 PM", "Tuesday: Closed"]
    assert rows[0]["aspect_ratings"] == {"Cleanliness": "4.5", "Safety": "3"}


def test_parse_csv_hours_not_available():
    rows = parse_csv(b"name,latitude,longitude,opening_hours\nX,1,2,N/A\n", location_format=True)
    assert rows[0]["opening_hours"] == "N/A"


def test_parse_csv_skips_blank_rows():
    rows = parse_csv(b"name,latitude\n,\nA,1\n")
    assert rows == [{"name": "A", "latitude": "1"}]


def test_parse_json_array():
    """parse_json keeps native lists/objects from JSON."""
    content = b'[{"name":"Park","opening_hours":["Sunday: Closed"],"aspect_ratings":{"Safety":5}}]'
    rows = parse_json(content, location_format=True)
    assert rows[0]["opening_hours"] == ["Sunday: Closed"]
    assert rows[0]["aspect_ratings"] == {"Safety": 5}


def test_parse_json_not_array_raises():
    """parse_json with non-array raises ValueError."""
    with pytest.raises(ValueError, match="array"):
        parse_json(b'{"x":1}')


def test_parse_json_non_object_row_raises():
    with pytest.raises(ValueError, match="Row 2"):
        parse_json(b'[{"a":1}, 5]')


def test_parse_upload_detects_format():
    """Extension wins; otherwise a leading [ means JSON."""
    assert parse_upload(b'[{"a":"1"}]', None) == [{"a": "1"}]
    assert parse_upload(b"a\n1\n", "rows.csv") == [{"a": "1"}]
    assert parse_upload(b"a\n1\n", None) == [{"a": "1"}]


def test_parse_upload_invalid_json_raises_value_error():
    with pytest.raises(ValueError):
        parse_upload(b"[not json", "data.json")
