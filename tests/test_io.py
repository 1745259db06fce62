import json
from datetime import date, datetime, timedelta

import pytest
from dateutil import tz

from breakrooms.freetime import free_intervals
from breakrooms.io import (
    dump_buildings,
    load_buildings,
    load_calendar,
    load_calendar_file,
    parse_favorites,
)
from breakrooms.ranker import MatchConfig
from breakrooms.recurrence import RecurrenceCache, occurrences_on_day
from breakrooms.schedule import ScheduleBuilder

from factories import MONDAY, make_building, utc

ICS = "\r\n".join([
    "BEGIN:VCALENDAR",
    "VERSION:2.0",
    "PRODID:-//test//breakrooms//EN",
    "BEGIN:VEVENT",
    "UID:lecture-1",
    "DTSTAMP:20260901T000000Z",
    "DTSTART:20261005T130000Z",
    "DTEND:20261005T140000Z",
    "SUMMARY:CSC148 Lecture",
    "LOCATION:MY 150",
    "RRULE:FREQ=WEEKLY;BYDAY=MO,WE;UNTIL=20261211T000000Z",
    "EXDATE:20261012T130000Z",
    "END:VEVENT",
    "BEGIN:VEVENT",
    "UID:office-hours",
    "DTSTAMP:20260901T000000Z",
    "DTSTART:20261020T170000Z",
    "DTEND:20261020T183000Z",
    "SUMMARY:Office hours",
    "END:VEVENT",
    "END:VCALENDAR",
    "",
])


def test_parse_favorites():
    assert parse_favorites("ba, my,,SS ") == ["BA", "MY", "SS"]
    assert parse_favorites("") == []
    assert parse_favorites(None) == []


def test_load_calendar():
    lecture, office = load_calendar(ICS)

    assert lecture.uid == "lecture-1"
    assert lecture.recurring
    assert lecture.rrule == "FREQ=WEEKLY;BYDAY=MO,WE;UNTIL=20261211T000000Z"
    assert lecture.exdates == (utc(2026, 10, 12, 13, 0),)
    assert lecture.start == utc(2026, 10, 5, 13, 0)
    assert lecture.duration == timedelta(hours=1)
    assert lecture.building_code == "MY"
    assert lecture.summary == "CSC148 Lecture"

    assert office.uid == "office-hours"
    assert not office.recurring
    assert office.location is None
    assert office.building_code is None
    assert office.duration == timedelta(hours=1, minutes=30)


def test_loaded_rule_expands():
    lecture, _ = load_calendar(ICS)
    days = [dt.date() for dt in lecture.occurrence_starts()][:4]
    assert days == [date(2026, 10, 5), date(2026, 10, 7), date(2026, 10, 14), date(2026, 10, 19)]


def test_load_calendar_file(tmp_path):
    p = tmp_path / "classes.ics"
    p.write_text(ICS, encoding="utf-8")
    assert [e.uid for e in load_calendar_file(p)] == ["lecture-1", "office-hours"]


def test_buildings_json(tmp_path):
    ba = make_building("BA", lat=43.65, lng=-79.39, open_hours={"1130": [9, 10], "1140": [10]})
    p = tmp_path / "availability.json"
    dump_buildings([ba], p)

    raw = json.loads(p.read_text(encoding="utf-8"))
    assert raw["buildings"][0]["availableRooms"] == {
        "2026-10-19": {"9": ["1130"], "10": ["1130", "1140"]}
    }

    [loaded] = load_buildings(p)
    assert loaded == ba
    assert loaded.available_rooms[MONDAY][10][1].building_code == "BA"


def test_load_buildings_rejects_wrong_shape(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps([{"code": "BA"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_buildings(p)


def _vcalendar(*event_lines):
    return "\r\n".join([
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//test//breakrooms//EN",
        "BEGIN:VEVENT",
        "DTSTAMP:20260901T000000Z",
        *event_lines,
        "END:VEVENT",
        "END:VCALENDAR",
        "",
    ])


def test_floating_start_reads_as_local_time():
    [ev] = load_calendar(_vcalendar(
        "UID:seminar",
        "DTSTART:20261019T090000",
        "DTEND:20261019T100000",
        "LOCATION:MY 150",
    ))
    assert ev.start == datetime(2026, 10, 19, 9, 0)
    assert ev.start.tzinfo is None

    cache = RecurrenceCache(tz.gettz("America/Toronto"))
    [o] = occurrences_on_day([ev], MONDAY, cache)
    assert o.times_of_day == (9.0,)


def test_floating_weekly_rule_builds_a_schedule():
    events = load_calendar(_vcalendar(
        "UID:lab",
        "DTSTART:20261005T090000",
        "DTEND:20261005T100000",
        "LOCATION:MY 150",
        "RRULE:FREQ=WEEKLY;BYDAY=MO;UNTIL=20261211T090000",
        "EXDATE:20261012T090000",
    ))
    assert events[0].exdates == (datetime(2026, 10, 12, 9, 0),)

    b = ScheduleBuilder(MatchConfig())
    b.load_calendar(events, today=MONDAY)
    b.load_buildings([])
    monday = b.build(MONDAY)[MONDAY]
    assert [(e.interval.start, e.interval.end) for e in monday] == [(8, 9), (10, 21)]
    assert b.cache.occurrence_on(events[0], date(2026, 10, 12)) is None


def test_all_day_event_blocks_its_whole_day():
    [ev] = load_calendar(_vcalendar(
        "UID:holiday",
        "DTSTART;VALUE=DATE:20261019",
        "SUMMARY:Reading day",
    ))
    assert ev.start == datetime(2026, 10, 19)
    assert ev.duration == timedelta(days=1)

    cache = RecurrenceCache(tz.gettz("America/Toronto"))
    assert occurrences_on_day([ev], date(2026, 10, 18), cache) == []
    [o] = occurrences_on_day([ev], MONDAY, cache)
    assert o.times_of_day == (0.0,)
    assert free_intervals([o], 8, 21) == []
