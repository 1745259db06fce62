from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterator, List, Optional, Tuple

from dateutil.rrule import rrulestr


LatLng = Tuple[float, float]


def building_code_from_location(location: Optional[str]) -> Optional[str]:
    """
    "MY 150" -> "MY"
    "BA"     -> "BA"
    "" / None -> None
    """
    if not location:
        return None
    parts = location.split()
    if not parts:
        return None
    return parts[0]


@dataclass(frozen=True)
class Room:
    room: str
    capacity: Optional[int] = None
    wheelchair_accessible: Optional[bool] = None


@dataclass(frozen=True)
class RoomSlot:
    building_code: str
    room: str
    hour: int          # hour of day the room is open, [hour, hour + 1)


@dataclass(frozen=True)
class Building:
    code: str
    name: str
    address: str
    lat: float
    lng: float
    rooms: Tuple[Room, ...] = ()
    # day -> hour -> rooms open during that hour
    available_rooms: Dict[date, Dict[int, List[RoomSlot]]] = field(default_factory=dict)

    @property
    def latlng(self) -> LatLng:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class Event:
    uid: str
    start: datetime
    duration: timedelta
    summary: str = ""
    description: str = ""
    location: Optional[str] = None
    rrule: Optional[str] = None        # raw RRULE value, e.g. "FREQ=WEEKLY;BYDAY=MO,WE"
    exdates: Tuple[datetime, ...] = ()

    @property
    def recurring(self) -> bool:
        return bool(self.rrule)

    @property
    def building_code(self) -> Optional[str]:
        return building_code_from_location(self.location)

    def occurrence_starts(self, tz: Optional[tzinfo] = None) -> Iterator[datetime]:
        """
        Yields the start instant of every occurrence, in order.

        The rule is expanded from the event start expressed in ``tz`` so that
        weekly classes keep their wall-clock time across DST changes.
        A naive (floating) start is expanded in wall-clock time and each
        occurrence is then read in ``tz``.
        Each step of a valid RRULE moves strictly forward in time; callers
        rely on that to bound their scans.
        """
        if not self.recurring:
            yield in_zone(self.start, tz)
            return

        if self.start.tzinfo is None:
            rules = rrulestr(self.rrule, dtstart=self.start, forceset=True, ignoretz=True)
            for exdate in self.exdates:
                if exdate.tzinfo is not None:
                    exdate = in_zone(exdate, tz).replace(tzinfo=None)
                rules.exdate(exdate)
            for dt in rules:
                yield in_zone(dt, tz)
            return

        dtstart = in_zone(self.start, tz)
        rules = rrulestr(self.rrule, dtstart=dtstart, forceset=True)
        for exdate in self.exdates:
            rules.exdate(in_zone(exdate, dtstart.tzinfo))
        yield from rules


@dataclass(frozen=True)
class Occurrence:
    uid: str
    day: date
    times_of_day: Tuple[float, ...]    # fractional hours, 8:30am -> 8.5
    duration: timedelta
    building_code: Optional[str]
    summary: str = ""

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600.0


@dataclass(frozen=True)
class FreeInterval:
    start: float
    end: float
    before_building_code: Optional[str] = None
    after_building_code: Optional[str] = None

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class PathStep:
    room: str
    start: int
    end: int


@dataclass(frozen=True)
class CandidatePath:
    building_code: str
    steps: Tuple[PathStep, ...]

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def start(self) -> int:
        return self.steps[0].start

    @property
    def end(self) -> int:
        return self.steps[-1].end


@dataclass(frozen=True)
class ScoredPath:
    score: float
    building_code: str
    path: CandidatePath


@dataclass(frozen=True)
class ScheduleEntry:
    interval: FreeInterval
    top_paths: Tuple[ScoredPath, ...] = ()


@dataclass(frozen=True)
class NearbyBuilding:
    building: Building
    distance_sq: float
    slots: Tuple[RoomSlot, ...]


def in_zone(dt: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)
