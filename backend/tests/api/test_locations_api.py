"""API tests: location detail, batch lookup, categories and aspects."""
import pytest

from discovery_core.cache import app_cache, location_key
from repositories.location_repository import get_or_create_aspect, get_or_create_category

pytestmark = pytest.mark.api

HOURS = [
    "Monday: 9:00 AM – 5:00 PM",
    "Tuesday: 9:00 AM – 5:00 PM",
    "Wednesday: Closed",
]


def test_get_location_detail(client, make_location, db_session):
    museum = get_or_create_category(db_session, "Museum")
    loc = make_location(
        "Field Museum",
        reviews=[5, 4],
        aspects={"Cleanliness": 4.4},
        opening_hours=HOURS,
        category_id=museum.id,
    )
    r = client.get(f"/api/locations/{loc.id}")
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == loc.id
    assert data["name"] == "Field Museum"
    assert data["rating"] == pytest.approx(4.5)
    assert data["category"] == {"id": museum.id, "name": "Museum"}
    assert data["openingHours"] == HOURS
    assert data["openingStatus"] in ("open", "closed")
    assert data["groupedHours"][0] == {
        "days": ["Monday", "Tuesday"],
        "label": "Monday - Tuesday",
        "hours": "9:00 AM – 5:00 PM",
    }
    assert [(a["aspectName"], a["rating"]) for a in data["aspectRatings"]] == [("Cleanliness", 4)]
    assert data["reviewCount"] == 2
    assert len(data["siteReviews"]) == 2
    assert all(rv["source"] == "EXT" and rv["user"] is None for rv in data["siteReviews"])


def test_get_location_without_hours_is_unknown(client, make_location):
    loc = make_location()
    data = client.get(f"/api/locations/{loc.id}").json()
    assert data["openingHours"] == "N/A"
    assert data["openingStatus"] == "unknown"
    assert data["groupedHours"] == []
    assert data["rating"] is None


def test_get_location_404(client):
    r = client.get("/api/locations/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Location not found"}


def test_location_detail_is_cached(client, make_location):
    loc = make_location("Cached Place")
    assert client.get(f"/api/locations/{loc.id}").status_code == 200
    assert app_cache.has(location_key(loc.id))
    cached = app_cache.get(location_key(loc.id))
    cached["name"] = "From Cache"
    app_cache.set(location_key(loc.id), cached)
    assert client.get(f"/api/locations/{loc.id}").json()["name"] == "From Cache"


def test_batch_lookup(client, make_location):
    a = make_location("A")
    b = make_location("B")
    r = client.post("/api/locations/batch", json={"locationIds": [b.id, "missing", a.id, b.id]})
    assert r.status_code == 200
    assert [loc["id"] for loc in r.json()] == [b.id, a.id]


def test_batch_requires_list(client):
    r = client.post("/api/locations/batch", json={"locationIds": "nope"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_categories_and_aspects(client, db_session):
    get_or_create_category(db_session, "Park")
    get_or_create_aspect(db_session, "Safety")
    db_session.commit()
    categories = client.get("/api/categories").json()
    aspects = client.get("/api/aspects").json()
    assert [c["name"] for c in categories] == ["Park"]
    assert [a["name"] for a in aspects] == ["Safety"]
