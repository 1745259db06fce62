import logging
from datetime import date

from ..models import Building, Room, RoomSlot

logger = logging.getLogger(__name__)


def parse_book_date(raw) -> date:
    """261019 -> date(2026, 10, 19)"""
    s = str(raw).strip().zfill(6)
    if len(s) != 6 or not s.isdigit():
        raise ValueError(f"book_date must be yymmdd, got {raw!r}")
    return date(2000 + int(s[0:2]), int(s[2:4]), int(s[4:6]))


def parse_hour(raw) -> int:
    """'09:00' -> 9. Minutes are dropped; the feed is hourly."""
    h, _, m = str(raw).strip().partition(":")
    hour = int(h)
    if m and not m.strip().isdigit():
        raise ValueError(f"bad minutes in time: {raw!r}")
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {raw!r}")
    return hour


def parse_marker(raw) -> tuple:
    """'43.6598,-79.3973' -> (43.6598, -79.3973)"""
    lat, lng = str(raw).split(",")
    return float(lat), float(lng)


def _building(item: dict) -> Building:
    lat, lng = parse_marker(item.get("bd_marker"))
    return Building(
        code=str(item.get("bd_code") or "").strip(),
        name=str(item.get("bd_name") or "").strip(),
        address=str(item.get("bd_address") or "").strip(),
        lat=lat,
        lng=lng,
        rooms=tuple(
            Room(
                room=str(r.get("room_number")).strip(),
                capacity=r.get("capacity"),
                wheelchair_accessible=r.get("wheelchair_accessible"),
            )
            for r in item.get("rooms") or []
            if r.get("room_number") is not None
        ),
        available_rooms={},
    )


def to_buildings(query: dict, meta: dict) -> list:
    buildings = []
    by_code = {}
    for item in (meta or {}).get("items") or []:
        try:
            b = _building(item)
        except (TypeError, ValueError) as e:
            logger.warning("Skipping building %r: %s", item.get("bd_code"), e)
            continue
        if not b.code:
            continue
        buildings.append(b)
        by_code[b.code] = b

    skipped = 0
    for row in (query or {}).get("items") or []:
        code = str(row.get("building") or "").strip()
        room = str(row.get("room") or "").strip()
        b = by_code.get(code)
        if b is None or not room:
            logger.warning("Room has no building: %s %s", code, room)
            skipped += 1
            continue
        try:
            day = parse_book_date(row.get("book_date"))
            hour = parse_hour(row.get("time"))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping slot %s %s: %s", code, room, e)
            skipped += 1
            continue
        hours = b.available_rooms.setdefault(day, {})
        hours.setdefault(hour, []).append(RoomSlot(code, room, hour))

    if skipped:
        logger.info("Skipped %d feed row(s)", skipped)
    return buildings
