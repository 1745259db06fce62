from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ics import Calendar, Event

from .models import FreeInterval, ScheduleEntry, ScoredPath

NO_PATHS_DESCRIPTION = (
    "There is no building with a room open for this entire break. "
    "Check the hourly search for individual rooms."
)
PATHS_HEADER = "These rooms are open for your entire break:\n\n"


def _hours_minutes(hours: float):
    total = int(round(hours * 60))
    return total // 60, total % 60


def break_title(interval: FreeInterval) -> str:
    h, m = _hours_minutes(interval.length)
    if m:
        return f"{h} Hour {m} Minute Break"
    return f"{h} Hour Break"


def path_line(scored: ScoredPath) -> str:
    """'BA: 1130(10-12) -> 1140(12-14)'"""
    steps = " -> ".join(f"{s.room}({s.start}-{s.end})" for s in scored.path.steps)
    return f"{scored.building_code}: {steps}"


def break_description(paths: Sequence[ScoredPath]) -> str:
    if not paths:
        return NO_PATHS_DESCRIPTION
    return PATHS_HEADER + "".join(path_line(p) + "\n" for p in paths)


def break_event(day: date, entry: ScheduleEntry, zone: Optional[tzinfo] = None) -> Event:
    interval = entry.interval
    h, m = _hours_minutes(interval.start)
    begin = datetime.combine(day, time(h, m), tzinfo=zone)
    return Event(
        name=break_title(interval),
        begin=begin,
        duration=timedelta(minutes=int(round(interval.length * 60))),
        description=break_description(entry.top_paths),
    )


def build_calendar(
    schedule: Mapping[date, Sequence[ScheduleEntry]],
    zone: Optional[tzinfo] = None,
) -> Calendar:
    cal = Calendar()
    for day in sorted(schedule):
        for entry in schedule[day]:
            cal.events.add(break_event(day, entry, zone))
    return cal


def export_ics(
    schedule: Optional[Mapping[date, Sequence[ScheduleEntry]]],
    zone: Optional[tzinfo] = None,
) -> Optional[str]:
    """Serialized calendar, or None while there is no schedule yet."""
    if not schedule:
        return None
    return build_calendar(schedule, zone).serialize()


def write_ics(
    schedule: Mapping[date, Sequence[ScheduleEntry]],
    path: str | Path,
    zone: Optional[tzinfo] = None,
) -> bool:
    text = export_ics(schedule, zone)
    if text is None:
        return False
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return True
