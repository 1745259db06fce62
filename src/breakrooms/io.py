from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dateutil import tz
from dateutil.parser import isoparse
from ics import Calendar
from ics.grammar.parse import string_to_container

from .models import Building, Event, Room, RoomSlot

logger = logging.getLogger(__name__)


def parse_favorites(raw: Optional[str]) -> List[str]:
    """
    "ba, my,,SS " -> ["BA", "MY", "SS"]
    """
    if not raw:
        return []
    return [s.strip().upper() for s in raw.split(",") if s.strip()]


# --- calendar -----------------------------------------------------------


def _raw_vevents(text: str) -> Dict[str, Dict[str, list]]:
    """
    uid -> {property name -> content lines} for every VEVENT, as written in
    the document. ics turns floating and date-only starts into UTC, so the
    original lines are needed to tell them apart.
    """
    out: Dict[str, Dict[str, list]] = {}
    for cal in string_to_container(text):
        for comp in cal:
            if getattr(comp, "name", "") != "VEVENT":
                continue
            props: Dict[str, list] = {}
            for line in comp:
                if hasattr(line, "value"):
                    props.setdefault(line.name.upper(), []).append(line)
            uid_lines = props.get("UID")
            if uid_lines:
                out.setdefault(uid_lines[0].value.strip(), props)
    return out


def _extra_lines(ics_event, name: str) -> list:
    return [
        line for line in (getattr(ics_event, "extra", None) or [])
        if getattr(line, "name", "").upper() == name
    ]


def _is_floating(line) -> bool:
    """No TZID and no trailing Z: local wall-clock time (or a plain date)."""
    return "TZID" not in line.params and not line.value.strip().upper().endswith("Z")


def _is_date_only(line) -> bool:
    value_type = (line.params.get("VALUE") or [""])[0].upper()
    return value_type == "DATE" or "T" not in line.value.strip().upper()


def _parse_exdates(lines) -> Tuple[datetime, ...]:
    out: List[datetime] = []
    for line in lines:
        tzid = (line.params.get("TZID") or [None])[0]
        zone = tz.gettz(tzid) if tzid else None
        for raw in line.value.split(","):
            raw = raw.strip()
            if not raw:
                continue
            dt = isoparse(raw)
            if dt.tzinfo is None and zone is not None:
                dt = dt.replace(tzinfo=zone)
            out.append(dt)
    return tuple(out)


def _event_start(ics_event, dtstart) -> datetime:
    if dtstart is not None and _is_floating(dtstart):
        # floating or all-day: keep naive, read later in the configured zone
        return isoparse(dtstart.value.strip())
    return ics_event.begin.datetime


def load_calendar(text: str) -> List[Event]:
    """
    Parses an iCalendar document into Events.

    Floating and all-day starts stay naive; RRULE and EXDATE come straight
    from the event's own lines.
    """
    cal = Calendar(text)
    raw = _raw_vevents(text)
    out: List[Event] = []

    for e in cal.events:
        if e.begin is None:
            logger.warning("Skipping event %s without a start", e.uid)
            continue

        props = raw.get(e.uid)
        if props is None:
            # ics made up the uid, fall back to whatever it left unparsed
            props = {
                "RRULE": _extra_lines(e, "RRULE"),
                "EXDATE": _extra_lines(e, "EXDATE"),
            }
        dtstart = (props.get("DTSTART") or [None])[0]
        rrules = props.get("RRULE") or []

        duration = e.duration or timedelta(0)
        if not duration and dtstart is not None and _is_date_only(dtstart):
            duration = timedelta(days=1)

        out.append(
            Event(
                uid=e.uid,
                start=_event_start(e, dtstart),
                duration=duration,
                summary=(e.name or "").strip(),
                description=(e.description or "").strip(),
                location=(e.location or "").strip() or None,
                rrule=rrules[0].value if rrules else None,
                exdates=_parse_exdates(props.get("EXDATE") or []),
            )
        )

    out.sort(key=lambda ev: (ev.start.replace(tzinfo=None), ev.uid))
    return out


def load_calendar_file(path: str | Path) -> List[Event]:
    p = Path(path)
    return load_calendar(p.read_text(encoding="utf-8"))


# --- buildings ----------------------------------------------------------


def building_to_dict(b: Building) -> Dict[str, Any]:
    return {
        "code": b.code,
        "name": b.name,
        "address": b.address,
        "latlng": [b.lat, b.lng],
        "rooms": [
            {
                "room": r.room,
                "capacity": r.capacity,
                "wheelchair_accessible": r.wheelchair_accessible,
            }
            for r in b.rooms
        ],
        "availableRooms": {
            day.isoformat(): {
                str(hour): [s.room for s in slots]
                for hour, slots in sorted(hours.items())
            }
            for day, hours in sorted(b.available_rooms.items())
        },
    }


def building_from_dict(row: Dict[str, Any]) -> Building:
    code = (row.get("code") or "").strip()
    lat, lng = row["latlng"]

    available: Dict[date, Dict[int, List[RoomSlot]]] = {}
    for day_raw, hours in (row.get("availableRooms") or {}).items():
        day = date.fromisoformat(day_raw)
        available[day] = {
            int(hour): [RoomSlot(code, str(room), int(hour)) for room in rooms]
            for hour, rooms in hours.items()
        }

    return Building(
        code=code,
        name=(row.get("name") or "").strip(),
        address=(row.get("address") or "").strip(),
        lat=float(lat),
        lng=float(lng),
        rooms=tuple(
            Room(
                room=str(r["room"]),
                capacity=r.get("capacity"),
                wheelchair_accessible=r.get("wheelchair_accessible"),
            )
            for r in row.get("rooms") or []
        ),
        available_rooms=available,
    )


def load_buildings(path: str | Path) -> List[Building]:
    """
    Reads a normalized availability document:
    {"buildings": [{code, name, address, latlng, rooms, availableRooms}]}
    """
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not isinstance(data.get("buildings"), list):
        raise ValueError(f"{p}: expected an object with a 'buildings' list")
    return [building_from_dict(row) for row in data["buildings"] if row.get("code")]


def dump_buildings(buildings: Sequence[Building], path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {"buildings": [building_to_dict(b) for b in buildings]}
    p.write_text(json.dumps(payload, indent=2), encoding="utf-8")
