from datetime import timedelta

from dateutil import tz

from breakrooms.export import (
    NO_PATHS_DESCRIPTION,
    break_description,
    break_title,
    build_calendar,
    export_ics,
    path_line,
    write_ics,
)
from breakrooms.models import CandidatePath, FreeInterval, PathStep, ScheduleEntry, ScoredPath

from factories import MONDAY, utc

CHAIN = ScoredPath(
    0.5, "BA", CandidatePath("BA", (PathStep("1130", 10, 12), PathStep("1140", 12, 14)))
)
SINGLE = ScoredPath(2.0, "MY", CandidatePath("MY", (PathStep("150", 10, 14),)))

SCHEDULE = {
    MONDAY: [
        ScheduleEntry(FreeInterval(8, 9, None, "MY")),
        ScheduleEntry(FreeInterval(10, 13.5, "MY", None), (CHAIN, SINGLE)),
    ]
}


def test_break_title():
    assert break_title(FreeInterval(8, 9)) == "1 Hour Break"
    assert break_title(FreeInterval(10, 13.5)) == "3 Hour 30 Minute Break"
    assert break_title(FreeInterval(12, 12.25)) == "0 Hour 15 Minute Break"


def test_path_line():
    assert path_line(CHAIN) == "BA: 1130(10-12) -> 1140(12-14)"
    assert path_line(SINGLE) == "MY: 150(10-14)"


def test_break_description():
    assert break_description(()) == NO_PATHS_DESCRIPTION
    text = break_description([CHAIN, SINGLE])
    assert text.startswith("These rooms are open for your entire break:\n\n")
    assert text.endswith("BA: 1130(10-12) -> 1140(12-14)\nMY: 150(10-14)\n")


def test_build_calendar_one_event_per_break():
    cal = build_calendar(SCHEDULE, tz.UTC)
    events = sorted(cal.events, key=lambda e: e.begin)
    assert len(events) == 2

    morning, afternoon = events
    assert morning.name == "1 Hour Break"
    assert morning.begin == utc(2026, 10, 19, 8, 0)
    assert morning.duration == timedelta(hours=1)
    assert morning.description == NO_PATHS_DESCRIPTION

    assert afternoon.begin == utc(2026, 10, 19, 10, 0)
    assert afternoon.duration == timedelta(hours=3, minutes=30)
    assert "BA: 1130(10-12) -> 1140(12-14)" in afternoon.description


def test_export_ics_text():
    text = export_ics(SCHEDULE, tz.UTC)
    assert text.startswith("BEGIN:VCALENDAR")
    assert text.count("BEGIN:VEVENT") == 2
    assert "SUMMARY:3 Hour 30 Minute Break" in text


def test_nothing_to_export():
    assert export_ics(None) is None
    assert export_ics({}) is None


def test_write_ics(tmp_path):
    out = tmp_path / "out" / "breaks.ics"
    assert write_ics(SCHEDULE, out, tz.UTC)
    assert out.read_text(encoding="utf-8").count("BEGIN:VEVENT") == 2
    assert not write_ics({}, tmp_path / "empty.ics")
    assert not (tmp_path / "empty.ics").exists()
