from datetime import date

import pytest

from breakrooms.feed import client, fetch_buildings, fetch_feed, parse_book_date, parse_hour, parse_marker, to_buildings

META = {
    "items": [
        {
            "bd_code": "BA",
            "bd_name": "Bahen Centre",
            "bd_address": "40 St George St",
            "bd_marker": "43.6598,-79.3973",
            "rooms": [
                {"room_number": "1130", "capacity": 150, "wheelchair_accessible": True},
                {"room_number": "1140", "capacity": 40, "wheelchair_accessible": False},
            ],
        },
        {
            "bd_code": "MY",
            "bd_name": "Myhal Centre",
            "bd_address": "55 St George St",
            "bd_marker": "43.6609,-79.3965",
            "rooms": [],
        },
    ]
}

QUERY = {
    "items": [
        {"book_date": 261019, "building": "BA", "room": "1130", "time": "09:00"},
        {"book_date": 261019, "building": "BA", "room": "1140", "time": "09:00"},
        {"book_date": 261019, "building": "BA", "room": "1130", "time": "10:00"},
        {"book_date": 261020, "building": "BA", "room": "1130", "time": "14:30"},
        {"book_date": 261019, "building": "ZZ", "room": "1", "time": "09:00"},
        {"book_date": "junk", "building": "BA", "room": "1130", "time": "11:00"},
    ]
}


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise RuntimeError(f"HTTP {self.status}")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        return self.responses[url]


def test_parsers():
    assert parse_book_date(261019) == date(2026, 10, 19)
    assert parse_book_date("260105") == date(2026, 1, 5)
    assert parse_hour("09:00") == 9
    assert parse_hour("14:30") == 14
    assert parse_marker("43.6598,-79.3973") == (43.6598, -79.3973)
    with pytest.raises(ValueError):
        parse_book_date("2610")
    with pytest.raises(ValueError):
        parse_hour("25:00")


def test_to_buildings():
    ba, my = to_buildings(QUERY, META)
    assert ba.code == "BA"
    assert ba.latlng == (43.6598, -79.3973)
    assert [r.room for r in ba.rooms] == ["1130", "1140"]
    assert ba.rooms[0].capacity == 150

    monday = ba.available_rooms[date(2026, 10, 19)]
    assert sorted(monday) == [9, 10]
    assert [s.room for s in monday[9]] == ["1130", "1140"]
    assert ba.available_rooms[date(2026, 10, 20)][14][0].hour == 14
    assert my.available_rooms == {}


def test_fetch_feed_uses_both_endpoints():
    session = FakeSession({client.QUERY_URL: FakeResponse(QUERY), client.BUILDINGS_URL: FakeResponse(META)})
    query, meta = fetch_feed(session)
    assert query is QUERY and meta is META
    assert [c[0] for c in session.calls] == [client.QUERY_URL, client.BUILDINGS_URL]
    assert all(c[1] == 30 for c in session.calls)

    buildings = fetch_buildings(session)
    assert [b.code for b in buildings] == ["BA", "MY"]


def test_fetch_feed_rejects_unexpected_shape():
    session = FakeSession({client.QUERY_URL: FakeResponse({"ok": False}), client.BUILDINGS_URL: FakeResponse(META)})
    with pytest.raises(RuntimeError):
        fetch_feed(session)


def test_fetch_feed_propagates_http_errors():
    session = FakeSession({client.QUERY_URL: FakeResponse(QUERY, status=503), client.BUILDINGS_URL: FakeResponse(META)})
    with pytest.raises(RuntimeError, match="503"):
        fetch_feed(session)
