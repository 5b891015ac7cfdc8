"""Chart query pipeline: filter -> aggregate -> stats, with memoisation.

A chart holds one fetched series per station and recomputes what it draws
whenever the range, interval or reducer changes. run_query() is that
recompute as a pure function of (series, ChartQuery); QueryCache memoises it
per series so flipping back to a previous selection is free.

Also here: parsing of the UI range/interval labels, and the rule that an
interval must be at most half the range so a chart gets at least two points.
"""

from __future__ import annotations

import math
import re
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Mapping

import pandas as pd

from agromet.aggregate.filter_range import filter_by_range
from agromet.aggregate.intervals import aggregate
from agromet.aggregate.summary import stats
from agromet.schemas.query import (
    NO_INTERVAL,
    ChartQuery,
    CustomRange,
    Interval,
    RangeSpec,
    RelativeRange,
)
from agromet.schemas.series import StationStats

# UI labels for ranges; both the historical ("3M") and live ("3month") vocabularies
RANGE_LABELS: dict[str, str] = {
    "1D": "day",
    "1W": "week",
    "1M": "month",
    "3M": "3month",
    "6M": "6month",
    "1Y": "1year",
    "5Y": "5year",
    "10Y": "10year",
    "20Y": "20year",
    "30Y": "30year",
    "50Y": "50year",
    "All": "all",
}

# Range lengths in months, for the interval validity rule
RANGE_MONTHS: dict[str, float] = {
    "day": 1 / 30,
    "week": 0.25,
    "month": 1,
    "3month": 3,
    "6month": 6,
    "1year": 12,
    "5year": 60,
    "10year": 120,
    "20year": 240,
    "30year": 360,
    "50year": 600,
    "all": math.inf,
}

# Data-average options offered on historical charts, in display order
DATA_AVERAGE_LABELS = ["1W", "1M", "3M", "6M", "1Y", "5Y", "10Y", "20Y", "30Y"]

DEFAULT_RANGE = RelativeRange("3month")

_HOURS_LABEL = re.compile(r"^(\d+)H$")
_CALENDAR_LABEL = re.compile(r"^(\d+)([MY])$")


@dataclass(frozen=True)
class QueryResult:
    """What a chart draws for one station: the series and its stats.

    Results may be shared through QueryCache; treat the frame as read-only.
    """

    series: pd.DataFrame
    stats: StationStats


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def parse_range(
    label: str | None,
    start: date | str | None = None,
    end: date | str | None = None,
    default: RangeSpec = DEFAULT_RANGE,
) -> RangeSpec:
    """Map a UI range label to a RangeSpec.

    "custom" needs both start and end; without them, and for unknown labels,
    the default range is returned.

    Raises:
        ValueError: If custom dates are malformed or end is before start
    """
    if label is None:
        return default
    if label == "custom":
        if start is None or end is None or start == "" or end == "":
            return default
        return CustomRange(_as_date(start), _as_date(end))

    unit = RANGE_LABELS.get(label, label)
    if unit not in RANGE_MONTHS:
        return default
    return RelativeRange(unit)


def parse_interval(label: str | int | None) -> Interval:
    """Map a UI interval label to an Interval.

    Accepts "none", hour labels ("1H".."72H", or a bare int of hours),
    "1W", month labels ("1M", "3M", "6M") and year labels ("1Y".."30Y").
    Unknown labels mean no aggregation.
    """
    if label is None:
        return NO_INTERVAL
    if isinstance(label, int):
        return Interval("hours", label) if label >= 1 else NO_INTERVAL

    text = label.strip()
    if text in ("", "none"):
        return NO_INTERVAL
    if text == "1W":
        return Interval("week")

    hours = _HOURS_LABEL.match(text)
    if hours and int(hours.group(1)) >= 1:
        return Interval("hours", int(hours.group(1)))

    calendar = _CALENDAR_LABEL.match(text)
    if calendar:
        count, unit = int(calendar.group(1)), calendar.group(2)
        try:
            if unit == "M":
                return Interval("month", count)
            return Interval("year", count * 12)
        except ValueError:
            return NO_INTERVAL

    return NO_INTERVAL


def range_months(range_spec: RangeSpec) -> float:
    """Length of a range in months (custom ranges count 30 days per month)."""
    if isinstance(range_spec, CustomRange):
        return range_spec.span_days / 30
    return RANGE_MONTHS[range_spec.unit]


def interval_months(interval: Interval) -> float:
    """Length of an interval in months; hours count 720 per month."""
    if interval.kind == "none":
        return 0.0
    if interval.kind == "hours":
        return interval.n / 720
    if interval.kind == "week":
        return 0.25
    return float(interval.n)


def is_interval_allowed(range_spec: RangeSpec, interval: Interval) -> bool:
    """An interval may be at most half the range, so at least two buckets result."""
    if interval.kind == "none":
        return True
    return interval_months(interval) <= range_months(range_spec) / 2


def allowed_intervals(
    range_spec: RangeSpec,
    candidates: Iterable[Interval] | None = None,
) -> list[Interval]:
    """Filter interval options down to those valid for a range.

    Args:
        range_spec: Active range
        candidates: Intervals to consider (default: the historical
            data-average options, 1W through 30Y)

    Returns:
        Allowed intervals in candidate order
    """
    if candidates is None:
        candidates = [parse_interval(label) for label in DATA_AVERAGE_LABELS]
    return [interval for interval in candidates if is_interval_allowed(range_spec, interval)]


def run_query(
    series: pd.DataFrame,
    query: ChartQuery,
    now: datetime | pd.Timestamp | None = None,
) -> QueryResult:
    """Filter a series to the query's range, aggregate it, and compute stats.

    Args:
        series: DataFrame with series schema
        query: Range, interval, reducer, anchor and timezone
        now: Wall-clock override for anchor="now"

    Returns:
        QueryResult with the charted series and its StationStats; the series
        is never the caller's frame, so later edits to the input do not leak
        into results held by QueryCache
    """
    filtered = filter_by_range(
        series, query.range, anchor=query.anchor, now=now, tz=query.tz
    )
    aggregated = aggregate(filtered, query.interval, reducer=query.reducer, tz=query.tz)
    if aggregated is series:
        # "all" range with no interval passes the input straight through
        aggregated = series.copy()
    return QueryResult(series=aggregated, stats=stats(aggregated))


def run_multi_station(
    station_series: Mapping[str, pd.DataFrame],
    query: ChartQuery,
    now: datetime | pd.Timestamp | None = None,
) -> dict[str, QueryResult]:
    """Run the same query over every station's series, preserving station order."""
    return {
        station: run_query(series, query, now=now)
        for station, series in station_series.items()
    }


class QueryCache:
    """LRU memo of run_query results keyed by (series_key, ChartQuery).

    series_key identifies one fetched series (e.g. "rainfall/Gazipur"); the
    caller must invalidate it when that series is refetched. Queries anchored
    on the wall clock are never cached since their result drifts with time.
    """

    def __init__(self, max_entries: int = 256) -> None:
        self._entries: OrderedDict[tuple[str, ChartQuery], QueryResult] = OrderedDict()
        self._max_entries = max(1, max_entries)
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self,
        series_key: str,
        series: pd.DataFrame,
        query: ChartQuery,
        now: datetime | pd.Timestamp | None = None,
    ) -> QueryResult:
        """Return the cached result for (series_key, query), computing it on a miss."""
        if query.anchor == "now" and not isinstance(query.range, CustomRange):
            self.misses += 1
            return run_query(series, query, now=now)

        key = (series_key, query)
        if key in self._entries:
            self.hits += 1
            self._entries.move_to_end(key)
            return self._entries[key]

        self.misses += 1
        result = run_query(series, query, now=now)
        self._entries[key] = result
        if len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
        return result

    def invalidate(self, series_key: str) -> int:
        """Drop every entry for one series; returns how many were dropped."""
        stale = [key for key in self._entries if key[0] == series_key]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
