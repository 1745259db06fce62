"""
Weekly room schedule for one person's calendar.

``ScheduleBuilder`` is the session object: it holds the loaded calendar, the
building snapshot, the favorites and the recurrence cache for that calendar.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Collection, Dict, List, Optional, Sequence

from .freetime import free_intervals
from .models import Building, Event, FreeInterval, LatLng, ScheduleEntry, ScoredPath
from .pathsearch import GreedyPathSearch, PathSearch
from .ranker import MatchConfig, score_path, select_top
from .recurrence import RecurrenceCache, occurrences_on_day, week_days

logger = logging.getLogger(__name__)

UNKNOWN_LATLNG: LatLng = (0.0, 0.0)

Schedule = Dict[date, List[ScheduleEntry]]


class ScheduleBuilder:
    def __init__(
        self,
        cfg: Optional[MatchConfig] = None,
        favorites: Collection[str] = (),
        path_search: Optional[PathSearch] = None,
    ):
        self.cfg = cfg or MatchConfig()
        self.favorites = frozenset(favorites)
        self.path_search = path_search or GreedyPathSearch(max_steps=self.cfg.max_path_steps)
        self.events: Optional[List[Event]] = None
        self.buildings: Optional[List[Building]] = None
        self.cache = RecurrenceCache(self.cfg.zone())
        self._by_code: Dict[str, Building] = {}

    @property
    def ready(self) -> bool:
        return self.events is not None and self.buildings is not None

    def load_calendar(self, events: Sequence[Event], today: Optional[date] = None) -> None:
        """Replace the calendar. Cursors from the previous one are dropped."""
        self.events = list(events)
        self.cache = RecurrenceCache(self.cfg.zone())
        today = today or self.today()
        self.cache.warm(self.events, today + timedelta(days=7))
        logger.info("Loaded %d event(s), %d recurring", len(self.events), len(self.cache))

    def load_buildings(self, buildings: Sequence[Building]) -> None:
        self.buildings = list(buildings)
        self._by_code = {b.code: b for b in self.buildings}

    def set_favorites(self, favorites: Collection[str]) -> None:
        self.favorites = frozenset(favorites)

    def today(self) -> date:
        return datetime.now(self.cfg.zone()).date()

    def latlng(self, building_code: Optional[str]) -> LatLng:
        b = self._by_code.get(building_code) if building_code else None
        return b.latlng if b is not None else UNKNOWN_LATLNG

    def rank_interval(self, day: date, interval: FreeInterval) -> List[ScoredPath]:
        """Scored paths from every building for one free interval, best first."""
        from_latlng = self.latlng(interval.before_building_code)
        to_latlng = self.latlng(interval.after_building_code)

        scored: List[ScoredPath] = []
        for b in self.buildings or ():
            for path in self.path_search.find_paths(b, day, interval.start, interval.end):
                scored.append(
                    ScoredPath(
                        score=score_path(
                            path, from_latlng, b.latlng, to_latlng, b.code, self.favorites, self.cfg
                        ),
                        building_code=b.code,
                        path=path,
                    )
                )
        return select_top(scored, self.cfg.top_n, self.cfg.per_building_cap)

    def build_day(self, day: date) -> List[ScheduleEntry]:
        occurrences = occurrences_on_day(self.events or (), day, self.cache)
        entries: List[ScheduleEntry] = []
        for interval in free_intervals(occurrences, self.cfg.work_start, self.cfg.work_end):
            entries.append(ScheduleEntry(interval, tuple(self.rank_interval(day, interval))))
        return entries

    def build(self, today: Optional[date] = None) -> Schedule:
        """
        Entries for each remaining work day of the current week, keyed by day.
        Empty until both a calendar and buildings are loaded.
        """
        if not self.ready:
            return {}
        today = today or self.today()
        schedule: Schedule = {}
        for day in week_days(today):
            if day < today:
                continue
            schedule[day] = self.build_day(day)
        return schedule
