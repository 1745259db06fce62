"""
Room path search inside one building.

For a target interval, every room's availability is collapsed into maximal
windows of whole hours. A path starts in a room open at the first hour and is
extended greedily: always into the room that stays open the longest, and on a
tie into the room whose identifier looks most like the previous one. Only
paths that reach the last hour exactly are kept.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from .models import Building, CandidatePath, PathStep, RoomSlot

logger = logging.getLogger(__name__)

Window = Tuple[int, int]                     # [start_hour, end_hour)
RoomComparator = Callable[[str, str], float]  # higher = more alike


def _smooth(delta: float) -> float:
    # 1.0 at delta == 0, ~0.42 at 1, ~0.07 at 2
    s = 1.0 / (1.0 + math.exp(-2.0 * delta))
    return 4.0 * s * (1.0 - s)


def suffix_similarity(a: str, b: str) -> float:
    """
    Compares two room identifiers from their last character backwards.

    Position i (0 = last character) is worth 2**i. Identical characters score
    the full weight, two different digits score a smoothed fraction of it that
    falls off with their numeric distance, anything else scores nothing.
    """
    score = 0.0
    for i, (x, y) in enumerate(zip(reversed(a), reversed(b))):
        if x == y:
            score += 2 ** i
        elif x.isdigit() and y.isdigit():
            score += _smooth(int(x) - int(y)) * 2 ** i
    return score


def room_windows(
    hours: Mapping[int, Sequence[RoomSlot]],
    rooms: Iterable[str],
    first_hour: int,
    last_hour: int,
) -> Dict[str, List[Window]]:
    """
    Maximal [start, end) runs of consecutive open hours for each room, looking
    only at hours first_hour..last_hour-1. Rooms listed in ``rooms`` come first
    in the result, in that order; rooms only seen in ``hours`` follow.
    """
    windows: Dict[str, List[Window]] = {room: [] for room in rooms}
    run_start: Dict[str, int] = {}
    run_end: Dict[str, int] = {}

    for hour in range(first_hour, last_hour):
        for slot in hours.get(hour) or ():
            room = slot.room
            windows.setdefault(room, [])
            if room not in run_start:
                run_start[room] = hour
            elif run_end[room] < hour:
                windows[room].append((run_start[room], run_end[room]))
                run_start[room] = hour
            run_end[room] = hour + 1

    for room, start in run_start.items():
        windows[room].append((start, run_end[room]))
    return windows


class PathSearch(Protocol):
    def find_paths(
        self, building: Building, day: date, start: float, end: float
    ) -> List[CandidatePath]:
        ...


@dataclass(frozen=True)
class GreedyPathSearch:
    similarity: RoomComparator = suffix_similarity
    max_steps: int = 100

    def _best_extension(
        self,
        windows: Mapping[str, Sequence[Window]],
        path_end: int,
        last_room: str,
    ) -> Optional[Tuple[str, int]]:
        best: Optional[Tuple[str, int]] = None
        for room, spans in windows.items():
            span = next((w for w in spans if w[0] <= path_end < w[1]), None)
            if span is None:
                continue
            if (
                best is None
                or span[1] > best[1]
                or (span[1] == best[1]
                    and self.similarity(last_room, best[0]) < self.similarity(last_room, room))
            ):
                best = (room, span[1])
        return best

    def find_paths(
        self, building: Building, day: date, start: float, end: float
    ) -> List[CandidatePath]:
        hours = building.available_rooms.get(day)
        if not hours:
            return []

        first_hour = math.floor(start)
        last_hour = math.ceil(end)
        windows = room_windows(hours, (r.room for r in building.rooms), first_hour, last_hour)

        paths: List[CandidatePath] = []
        for room, spans in windows.items():
            seed = next((w for w in spans if w[0] == first_hour), None)
            if seed is None:
                continue

            steps = [PathStep(room, seed[0], seed[1])]
            path_end = seed[1]
            remaining = self.max_steps
            while path_end < last_hour and remaining > 0:
                best = self._best_extension(windows, path_end, steps[-1].room)
                if best is None:
                    break
                steps.append(PathStep(best[0], path_end, best[1]))
                path_end = best[1]
                remaining -= 1

            if path_end == last_hour:
                paths.append(CandidatePath(building.code, tuple(steps)))

        logger.debug("%s: %d path(s) for %s [%s, %s)", building.code, len(paths), day, start, end)
        return paths
