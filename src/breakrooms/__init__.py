# Room suggestions for the breaks in a class calendar
from .models import (
    Building,
    CandidatePath,
    Event,
    FreeInterval,
    NearbyBuilding,
    Occurrence,
    PathStep,
    Room,
    RoomSlot,
    ScheduleEntry,
    ScoredPath,
)
from .recurrence import RecurrenceCache, RecurrenceCursor, occurrences_on_day, week_days
from .freetime import free_intervals
from .pathsearch import GreedyPathSearch, PathSearch, room_windows, suffix_similarity
from .ranker import MatchConfig, closest_buildings, get_closest_rooms, score_path, select_top
from .schedule import ScheduleBuilder
from .export import build_calendar, export_ics, write_ics
from .io import load_buildings, dump_buildings, load_calendar, load_calendar_file, parse_favorites

__all__ = [
    "Building",
    "CandidatePath",
    "Event",
    "FreeInterval",
    "NearbyBuilding",
    "Occurrence",
    "PathStep",
    "Room",
    "RoomSlot",
    "ScheduleEntry",
    "ScoredPath",
    "RecurrenceCache",
    "RecurrenceCursor",
    "occurrences_on_day",
    "week_days",
    "free_intervals",
    "GreedyPathSearch",
    "PathSearch",
    "room_windows",
    "suffix_similarity",
    "MatchConfig",
    "closest_buildings",
    "get_closest_rooms",
    "score_path",
    "select_top",
    "ScheduleBuilder",
    "build_calendar",
    "export_ics",
    "write_ics",
    "load_buildings",
    "dump_buildings",
    "load_calendar",
    "load_calendar_file",
    "parse_favorites",
]
