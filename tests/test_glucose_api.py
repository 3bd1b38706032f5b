"""Glucose reading endpoints: validation, ordering, ranges, ownership."""

from datetime import datetime, timedelta

import pytest

from schemas.common import utcnow


def add_reading(client, value=118, reading_type="before_breakfast", **extra):
    body = {"value": value, "type": reading_type}
    body.update(extra)
    return client.post("/api/glucose", json=body)


def test_create_reading_defaults_timestamp_and_lists_newest_first(client, user):
    res = add_reading(client, 130, "fasting", timestamp="2024-01-01T07:00:00Z")
    assert res.status_code == 201

    before = utcnow() - timedelta(seconds=5)
    res = add_reading(client, 118, "before_breakfast")
    assert res.status_code == 201
    reading = res.json()
    assert reading["id"] > 0
    assert reading["userId"] == user["id"]
    assert reading["value"] == 118
    created_at = datetime.fromisoformat(reading["timestamp"])
    assert before <= created_at <= utcnow() + timedelta(seconds=5)

    listing = client.get("/api/glucose").json()
    assert [r["value"] for r in listing] == [118, 130]
    assert listing[0]["id"] == reading["id"]


@pytest.mark.parametrize("value", [20, 600])
def test_boundary_values_accepted(client, user, value):
    assert add_reading(client, value).status_code == 201


@pytest.mark.parametrize("value", [19, 601, -5])
def test_out_of_range_values_rejected(client, user, value):
    res = add_reading(client, value)
    assert res.status_code == 400
    assert "value" in res.json()["error"]["details"]["fields"]
    assert client.get("/api/glucose").json() == []


def test_unknown_reading_type_rejected(client, user):
    res = add_reading(client, 120, "after_nap")
    assert res.status_code == 400
    assert res.json()["error"]["details"]["fields"] == ["type"]


def test_requires_authentication(client):
    assert client.get("/api/glucose").status_code == 401
    assert add_reading(client).status_code == 401
    assert client.put("/api/glucose/1", json={"value": 100}).status_code == 401
    assert client.delete("/api/glucose/1").status_code == 401


def test_readings_are_isolated_between_users(client, other_client, user, other_user):
    add_reading(client, 101)
    add_reading(other_client, 202)
    assert [r["value"] for r in client.get("/api/glucose").json()] == [101]
    assert [r["value"] for r in other_client.get("/api/glucose").json()] == [202]


def test_range_query(client, user):
    for day, value in ((1, 100), (2, 120), (3, 140)):
        add_reading(client, value, timestamp=f"2024-03-0{day}T08:00:00")

    res = client.get("/api/glucose/range", params={"start": "2024-03-02", "end": "2024-03-03T23:59:59"})
    assert res.status_code == 200
    assert [r["value"] for r in res.json()] == [140, 120]


@pytest.mark.parametrize("params", [
    {},
    {"start": "2024-03-01"},
    {"start": "yesterday", "end": "2024-03-01"},
    {"start": "2024-03-05", "end": "2024-03-01"},
])
def test_range_query_validation(client, user, params):
    assert client.get("/api/glucose/range", params=params).status_code == 400


def test_update_reading(client, user):
    reading = add_reading(client, 150).json()
    res = client.put(f"/api/glucose/{reading['id']}", json={"value": 140, "note": "rechecked"})
    assert res.status_code == 200
    body = res.json()
    assert (body["value"], body["note"], body["type"]) == (140, "rechecked", "before_breakfast")
    assert body["timestamp"] == reading["timestamp"]


def test_update_reading_validation(client, user):
    reading = add_reading(client, 150).json()
    assert client.put(f"/api/glucose/{reading['id']}", json={"value": 700}).status_code == 400
    assert client.put(f"/api/glucose/{reading['id']}", json={"value": None}).status_code == 400
    assert client.get("/api/glucose").json()[0]["value"] == 150


def test_update_by_other_user_is_forbidden_and_unchanged(client, other_client, user, other_user):
    reading = add_reading(client, 150).json()
    res = other_client.put(f"/api/glucose/{reading['id']}", json={"value": 90})
    assert res.status_code == 403
    assert client.get("/api/glucose").json()[0]["value"] == 150

    assert other_client.delete(f"/api/glucose/{reading['id']}").status_code == 403
    assert len(client.get("/api/glucose").json()) == 1


def test_delete_reading_then_not_found(client, user):
    reading = add_reading(client, 150).json()
    res = client.delete(f"/api/glucose/{reading['id']}")
    assert res.status_code == 200
    assert res.json() == {"message": "Reading deleted successfully"}

    assert client.delete(f"/api/glucose/{reading['id']}").status_code == 404
    assert client.put(f"/api/glucose/{reading['id']}", json={"value": 100}).status_code == 404


def test_stats(client, user):
    for value in (60, 100, 130, 170, 200):
        add_reading(client, value)
    stats = client.get("/api/glucose/stats").json()
    assert stats["count"] == 5
    assert stats["average"] == 132
    assert (stats["minimum"], stats["maximum"]) == (60, 200)
    assert stats["inRangePercent"] == 40
    assert stats["distribution"] == {"low": 1, "in_range": 2, "elevated": 1, "high": 1}


def test_stats_empty(client, user):
    stats = client.get("/api/glucose/stats").json()
    assert stats["count"] == 0
    assert stats["average"] is None


def test_stats_range(client, user):
    add_reading(client, 100, timestamp="2024-03-01T08:00:00")
    add_reading(client, 200, timestamp="2024-03-05T08:00:00")
    stats = client.get("/api/glucose/stats", params={"start": "2024-03-04", "end": "2024-03-06"}).json()
    assert (stats["count"], stats["maximum"]) == (1, 200)

    res = client.get("/api/glucose/stats", params={"start": "2024-03-05", "end": "2024-03-01"})
    assert res.status_code == 400
    assert res.json()["error"]["details"]["fields"] == ["start", "end"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
