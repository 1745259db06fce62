#!/usr/bin/env python3
"""
Suggest study rooms for the breaks in a class calendar.

    breakrooms --calendar classes.ics --availability data/availability.json
    breakrooms --calendar classes.ics --fetch --favorites "BA,MY" -o breaks.ics
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from .export import write_ics
from .feed import fetch_buildings
from .io import load_buildings, load_calendar_file, parse_favorites
from .ranker import MatchConfig, fmt_hour
from .schedule import Schedule, ScheduleBuilder


def print_schedule(schedule: Schedule) -> None:
    """
    Pretty table: one block per day, one row per suggested path.
    """
    print(f"{'BREAK':<17} {'RANK':<4} {'BLDG':<6} {'ROOMS':<50} {'SCORE':>12}")
    for day in sorted(schedule):
        print("=" * 93)
        print(day.strftime("%A %Y-%m-%d"))
        print("-" * 93)
        for entry in schedule[day]:
            iv = entry.interval
            when = f"{fmt_hour(iv.start)}-{fmt_hour(iv.end)}"
            if not entry.top_paths:
                print(f"{when:<17} {'-':<4} {'-':<6} {'no building open for the whole break':<50}")
                continue
            for i, sp in enumerate(entry.top_paths, start=1):
                rooms = " -> ".join(f"{s.room}({s.start}-{s.end})" for s in sp.path.steps)
                label = when if i == 1 else ""
                print(f"{label:<17} {i:<4} {sp.building_code:<6} {rooms:<50} {sp.score:>12.3g}")
    print("=" * 93)


def main():
    parser = argparse.ArgumentParser(description="Find rooms that stay open for your whole break")
    parser.add_argument("--calendar", required=True, help="class calendar (.ics)")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--availability", help="normalized availability JSON (see breakrooms-feed)")
    source.add_argument("--fetch", action="store_true", help="download availability now")
    parser.add_argument("--favorites", default="", help='comma separated building codes, e.g. "BA,MY"')
    parser.add_argument("--start-hour", type=float, default=MatchConfig.work_start)
    parser.add_argument("--end-hour", type=float, default=MatchConfig.work_end)
    parser.add_argument("--top-n", type=int, default=MatchConfig.top_n)
    parser.add_argument("--cap", type=int, default=MatchConfig.per_building_cap, help="max paths per building")
    parser.add_argument("--timezone", default=MatchConfig.timezone)
    parser.add_argument("--today", type=date.fromisoformat, help="pretend today is YYYY-MM-DD")
    parser.add_argument("--output", "-o", help="write the breaks to an .ics file")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        cfg = MatchConfig(
            work_start=args.start_hour,
            work_end=args.end_hour,
            top_n=args.top_n,
            per_building_cap=args.cap,
            timezone=args.timezone,
        )
        builder = ScheduleBuilder(cfg, favorites=parse_favorites(args.favorites))

        events = load_calendar_file(args.calendar)
        print(f"Loaded {len(events)} event(s) from {args.calendar}", file=sys.stderr)
        today = args.today or builder.today()
        builder.load_calendar(events, today=today)

        if args.fetch:
            print("Fetching room availability feed...", file=sys.stderr)
            buildings = fetch_buildings()
        else:
            buildings = load_buildings(args.availability)
        print(f"Loaded {len(buildings)} building(s)", file=sys.stderr)
        builder.load_buildings(buildings)

        schedule = builder.build(today)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not schedule:
        print("No work days left this week.", file=sys.stderr)
        return

    print_schedule(schedule)

    if args.output:
        write_ics(schedule, args.output, cfg.zone())
        n = sum(len(entries) for entries in schedule.values())
        print(f"Wrote {n} break(s) to {args.output}", file=sys.stderr)


if __name__ == "__main__":
    main()
