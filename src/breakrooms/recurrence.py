"""Incremental expansion of recurring calendar events into per-day occurrences."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Event, Occurrence, in_zone

logger = logging.getLogger(__name__)


def time_of_day(dt: datetime) -> float:
    """9:30 -> 9.5"""
    return dt.hour + dt.minute / 60.0


def _occurrence(event: Event, start: datetime) -> Occurrence:
    return Occurrence(
        uid=event.uid,
        day=start.date(),
        times_of_day=(time_of_day(start),),
        duration=event.duration,
        building_code=event.building_code,
        summary=event.summary,
    )


@dataclass
class RecurrenceCursor:
    """
    Expansion state of one recurring event.

    ``occurrences_by_day`` only ever holds days <= ``last_checked_day`` and
    every day it holds is complete. The cursor only moves forward.
    """
    uid: str
    starts: Iterator[datetime]
    occurrences_by_day: Dict[date, Occurrence] = field(default_factory=dict)
    last_checked_day: Optional[date] = None
    exhausted: bool = False
    # first occurrence pulled past last_checked_day, not yet recorded
    pending: Optional[datetime] = None

    def _record(self, event: Event, start: datetime) -> None:
        day = start.date()
        existing = self.occurrences_by_day.get(day)
        if existing is None:
            self.occurrences_by_day[day] = _occurrence(event, start)
        else:
            self.occurrences_by_day[day] = replace(
                existing, times_of_day=existing.times_of_day + (time_of_day(start),)
            )

    def advance(self, event: Event, through_day: date) -> None:
        if self.last_checked_day is not None and self.last_checked_day >= through_day:
            logger.debug("cache hit for %s through %s", self.uid, through_day)
            return

        while not self.exhausted:
            if self.pending is None:
                try:
                    self.pending = next(self.starts, None)
                except ValueError as exc:
                    # dateutil rejects some rules only when expansion starts
                    logger.warning("Dropping rule for %s: %s", self.uid, exc)
                    self.pending = None
                if self.pending is None:
                    self.exhausted = True
                    break
            if self.pending.date() > through_day:
                break
            self._record(event, self.pending)
            self.pending = None

        self.last_checked_day = through_day


class RecurrenceCache:
    """
    Cursors for every recurring event of one loaded calendar, keyed by uid.

    Throw the whole cache away when a different calendar is loaded.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz
        self._cursors: Dict[str, RecurrenceCursor] = {}

    def __len__(self) -> int:
        return len(self._cursors)

    def cursor(self, event: Event) -> RecurrenceCursor:
        cur = self._cursors.get(event.uid)
        if cur is None:
            cur = RecurrenceCursor(uid=event.uid, starts=event.occurrence_starts(self.tz))
            self._cursors[event.uid] = cur
        return cur

    def advance(self, event: Event, through_day: date) -> None:
        # Non-recurring events have nothing to expand.
        if not event.recurring:
            return
        self.cursor(event).advance(event, through_day)

    def occurrence_on(self, event: Event, day: date) -> Optional[Occurrence]:
        self.advance(event, day)
        return self.cursor(event).occurrences_by_day.get(day)

    def warm(self, events: Iterable[Event], through_day: date) -> None:
        for event in events:
            self.advance(event, through_day)


def occurrences_on_day(
    events: Iterable[Event],
    day: date,
    cache: RecurrenceCache,
) -> List[Occurrence]:
    """
    Every occurrence of ``events`` that falls on ``day``.
    Recurring events go through the cache; single events are checked directly.
    """
    out: List[Occurrence] = []
    for event in events:
        if event.recurring:
            occ = cache.occurrence_on(event, day)
            if occ is not None:
                out.append(occ)
            continue

        start = in_zone(event.start, cache.tz)
        if start.date() == day:
            out.append(_occurrence(event, start))
    return out


def week_days(today: date) -> List[date]:
    """
    Monday..Friday of the week containing ``today``, weeks starting on Sunday.
    On a Sunday this is the coming work week; on a Saturday the one just past.
    """
    sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    return [sunday + timedelta(days=i) for i in range(1, 6)]
