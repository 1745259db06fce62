# Room availability feed client — drop-in package under breakrooms.feed
from .client import fetch_feed, fetch_buildings
from .normalize import to_buildings, parse_book_date, parse_hour, parse_marker

__all__ = [
    "fetch_feed",
    "fetch_buildings",
    "to_buildings",
    "parse_book_date",
    "parse_hour",
    "parse_marker",
]
