"""API tests: location reports."""
import uuid

import pytest

from conftest import auth_headers

pytestmark = pytest.mark.api

BODY = "This place has closed permanently"


def _report(client, user_id, location_id, body=BODY):
    return client.post("/api/reports", json={"locationId": location_id, "body": body}, headers=auth_headers(user_id))


def test_create_report(client, make_location, user_id):
    loc = make_location("Old Diner")
    r = _report(client, user_id, loc.id)
    assert r.status_code == 201
    data = r.json()
    assert data["locationId"] == loc.id and data["userId"] == user_id
    assert data["location"]["name"] == "Old Diner"
    assert data["user"]["email"].endswith("@example.com")


def test_create_report_errors(client, make_location, user_id):
    loc = make_location()
    assert client.post("/api/reports", json={"locationId": loc.id, "body": BODY}).status_code == 401
    assert _report(client, user_id, str(uuid.uuid4())).status_code == 404
    assert _report(client, user_id, loc.id, body="short").status_code == 400
    assert _report(client, user_id, loc.id).status_code == 201
    r = _report(client, user_id, loc.id)
    assert r.status_code == 409
    assert r.json() == {"error": "You have already reported this location"}


def test_list_reports(client, make_location, user_id, other_user_id):
    a = make_location("A")
    b = make_location("B")
    _report(client, user_id, a.id)
    _report(client, other_user_id, a.id)
    _report(client, user_id, b.id)
    headers = auth_headers(user_id)
    by_location = client.get("/api/reports", params={"locationId": a.id}, headers=headers).json()
    assert {r["userId"] for r in by_location} == {user_id, other_user_id}
    by_user = client.get("/api/reports", params={"userId": user_id}, headers=headers).json()
    assert {r["locationId"] for r in by_user} == {a.id, b.id}


def test_list_reports_requires_filter(client, user_id):
    r = client.get("/api/reports", headers=auth_headers(user_id))
    assert r.status_code == 400
    assert r.json() == {"error": "Either locationId or userId is required"}


def test_delete_report(client, make_location, user_id, other_user_id):
    loc = make_location()
    report_id = _report(client, user_id, loc.id).json()["id"]
    assert client.delete("/api/reports/bad-id", headers=auth_headers(user_id)).status_code == 400
    assert client.delete(f"/api/reports/{uuid.uuid4()}", headers=auth_headers(user_id)).status_code == 404
    assert client.delete(f"/api/reports/{report_id}", headers=auth_headers(other_user_id)).status_code == 403
    r = client.delete(f"/api/reports/{report_id}", headers=auth_headers(user_id))
    assert r.status_code == 200
    assert r.json() == {"message": "Report deleted successfully"}
    assert _report(client, user_id, loc.id).status_code == 201
