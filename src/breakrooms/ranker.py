# src/breakrooms/ranker.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Collection, Dict, Iterable, List, Optional, Sequence

from dateutil import tz

from .models import Building, CandidatePath, LatLng, NearbyBuilding, ScoredPath


@dataclass(frozen=True)
class MatchConfig:
    # Working hours, fractional 24h clock
    work_start: float = 8.0
    work_end: float = 21.0

    # Selection
    top_n: int = 10
    per_building_cap: int = 2

    # Scoring
    favorite_divisor: float = 100.0

    # Safety ceiling on greedy extensions per path
    max_path_steps: int = 100

    # Wall-clock zone used for day keys and hours of day
    timezone: str = "America/Toronto"

    def __post_init__(self):
        if self.work_start < 0 or self.work_end > 24:
            raise ValueError(f"work hours must lie within [0, 24], got {self.work_start}-{self.work_end}")
        if self.work_start >= self.work_end:
            raise ValueError(f"work_start ({self.work_start}) must be before work_end ({self.work_end})")
        for name in ("top_n", "per_building_cap", "max_path_steps"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.favorite_divisor <= 0:
            raise ValueError("favorite_divisor must be positive")

    def zone(self) -> tzinfo:
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown timezone: {self.timezone!r}")
        return zone


def squared_distance(a: LatLng, b: LatLng) -> float:
    """
    Squared lat/lng difference. Not a real distance, but monotone with one
    over the few hundred meters of a campus, which is all ranking needs.
    """
    dlat = a[0] - b[0]
    dlng = a[1] - b[1]
    return dlat * dlat + dlng * dlng


def score_path(
    path: CandidatePath,
    from_latlng: LatLng,
    building_latlng: LatLng,
    to_latlng: LatLng,
    building_code: str,
    favorites: Collection[str] = (),
    cfg: Optional[MatchConfig] = None,
) -> float:
    """
    (detour in + detour out) * number of rooms. Lower is better.
    Favorite buildings get their score divided by cfg.favorite_divisor.
    """
    divisor = cfg.favorite_divisor if cfg is not None else MatchConfig.favorite_divisor
    score = (
        squared_distance(from_latlng, building_latlng)
        + squared_distance(building_latlng, to_latlng)
    ) * len(path)
    if building_code in favorites:
        return score / divisor
    return score


def select_top(
    scored: Iterable[ScoredPath],
    n: int,
    per_building_cap: int,
) -> List[ScoredPath]:
    """
    Best ``n`` paths by ascending score with at most ``per_building_cap``
    from any one building. Equal scores keep their input order.
    """
    ranked = sorted(scored, key=lambda s: s.score)
    out: List[ScoredPath] = []
    used: Dict[str, int] = {}

    for s in ranked:
        if len(out) >= n:
            break
        count = used.get(s.building_code, 0)
        if count >= per_building_cap:
            continue
        out.append(s)
        used[s.building_code] = count + 1

    return out


def closest_buildings(
    buildings: Sequence[Building],
    day: date,
    hour: int,
    lat: float,
    lng: float,
) -> List[NearbyBuilding]:
    """
    Buildings with at least one room open during ``hour`` on ``day``,
    nearest first.
    """
    here = (lat, lng)
    out: List[NearbyBuilding] = []

    for b in buildings:
        slots = (b.available_rooms.get(day) or {}).get(hour) or []
        if not slots:
            continue
        out.append(
            NearbyBuilding(
                building=b,
                distance_sq=squared_distance(here, b.latlng),
                slots=tuple(slots),
            )
        )

    out.sort(key=lambda r: r.distance_sq)
    return out


def get_closest_rooms(
    buildings: Optional[Sequence[Building]],
    year: int,
    month: int,
    day: int,
    hour: int,
    lat: float,
    lng: float,
) -> List[NearbyBuilding]:
    if not buildings:
        return []
    return closest_buildings(buildings, date(year, month, day), hour, lat, lng)


def fmt_hour(hour: float) -> str:
    """
    Convert a fractional hour to a human-readable time like '2:30pm'.
    """
    mins = int(round(hour * 60))
    h24 = (mins // 60) % 24
    m = mins % 60
    ampm = "am" if h24 < 12 else "pm"
    h12 = h24 % 12
    if h12 == 0:
        h12 = 12
    return f"{h12}:{m:02d}{ampm}"
