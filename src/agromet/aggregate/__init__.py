"""Range filtering, interval aggregation and summary statistics."""

from agromet.aggregate.filter_range import custom_bounds_ms, filter_by_range
from agromet.aggregate.intervals import aggregate, dedupe_hours, thin_hours
from agromet.aggregate.query import (
    QueryCache,
    QueryResult,
    allowed_intervals,
    is_interval_allowed,
    parse_interval,
    parse_range,
    run_multi_station,
    run_query,
)
from agromet.aggregate.summary import daily_summary, stats

__all__ = [
    "filter_by_range",
    "custom_bounds_ms",
    "aggregate",
    "dedupe_hours",
    "thin_hours",
    "stats",
    "daily_summary",
    "run_query",
    "run_multi_station",
    "QueryCache",
    "QueryResult",
    "parse_range",
    "parse_interval",
    "is_interval_allowed",
    "allowed_intervals",
]
