#!/usr/bin/env python3
"""Fetch the room availability feed and write it as normalized JSON. Run as: breakrooms-feed --output FILE."""
import argparse
import sys

from ..io import dump_buildings
from .client import fetch_buildings


def main():
    parser = argparse.ArgumentParser(description="Room availability feed -> normalized buildings JSON")
    parser.add_argument("--output", "-o", default="data/availability.json", help="write JSON to file")
    args = parser.parse_args()

    print("Fetching room availability feed...", file=sys.stderr)
    try:
        buildings = fetch_buildings()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    n_slots = sum(
        len(slots)
        for b in buildings
        for hours in b.available_rooms.values()
        for slots in hours.values()
    )
    dump_buildings(buildings, args.output)
    print(f"Wrote {len(buildings)} building(s), {n_slots} open slot(s) to {args.output}", file=sys.stderr)


if __name__ == "__main__":
    main()
