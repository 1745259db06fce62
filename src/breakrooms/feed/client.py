import requests

BASE = "https://madlab01.act.utoronto.ca/RoomAvailability"
QUERY_URL = f"{BASE}/lsm_query.json"
BUILDINGS_URL = f"{BASE}/lsm_buildings.json"


def _get_items(session, url: str) -> dict:
    r = session.get(url, timeout=30)
    r.raise_for_status()
    data = r.json()
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise RuntimeError(f"Room availability feed returned unexpected shape: {url}")
    return data


def fetch_feed(session=None) -> tuple:
    """Return (query, meta): open room slots and building metadata."""
    session = session or requests.Session()
    query = _get_items(session, QUERY_URL)
    meta = _get_items(session, BUILDINGS_URL)
    return query, meta


def fetch_buildings(session=None) -> list:
    from . import normalize
    query, meta = fetch_feed(session)
    return normalize.to_buildings(query, meta)
