"""REST fetchers for historical records and live-station readings."""

from agromet.fetch.station_records import (
    cache_records,
    fetch_live_measurements,
    fetch_live_series,
    fetch_multi_station_series,
    fetch_station_records,
    fetch_station_series,
    load_cached_records,
)

__all__ = [
    "fetch_station_records",
    "fetch_station_series",
    "fetch_multi_station_series",
    "fetch_live_measurements",
    "fetch_live_series",
    "cache_records",
    "load_cached_records",
]
