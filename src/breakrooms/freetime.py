from __future__ import annotations

from typing import List, Optional, Sequence

from .models import FreeInterval, Occurrence


def busy_blocks(occurrences: Sequence[Occurrence]) -> List[list]:
    """
    One [start, end, first_building, last_building] block per start time,
    sorted by start, with overlapping or touching blocks merged.
    """
    blocks: List[list] = []
    for occ in occurrences:
        hours = occ.duration_hours
        for t in occ.times_of_day:
            blocks.append([t, t + hours, occ.building_code, occ.building_code])
    blocks.sort(key=lambda b: b[0])

    # Merge right to left so each block only ever absorbs its successor.
    for i in range(len(blocks) - 1, 0, -1):
        prev, cur = blocks[i - 1], blocks[i]
        if cur[0] <= prev[1]:
            if cur[1] >= prev[1]:
                prev[1] = cur[1]
                prev[3] = cur[3]
            del blocks[i]
    return blocks


def free_intervals(
    occurrences: Sequence[Occurrence],
    work_start: float,
    work_end: float,
) -> List[FreeInterval]:
    """
    Gaps between ``occurrences`` inside [work_start, work_end), in order.

    Each gap records the building of the class that ends at its start and of
    the class that begins at its end (None at the edges of the day).
    """
    out: List[FreeInterval] = []
    current_start = work_start
    before: Optional[str] = None

    for start, end, first_building, last_building in busy_blocks(occurrences):
        gap_end = min(start, work_end)
        if gap_end > current_start:
            after = first_building if start <= work_end else None
            out.append(FreeInterval(current_start, gap_end, before, after))
        if end > current_start:
            current_start = end
            before = last_building

    if current_start < work_end:
        out.append(FreeInterval(current_start, work_end, before, None))
    return out
