"""Re-aggregate a series into fixed time intervals.

Two families of intervals:

Hour intervals (live-station data, sub-hourly sampling):
- First keep one reading per local clock hour (the earliest)
- Then, for n > 1 hours, keep the first reading of each n-hour slot.
  This thins the series; nothing is averaged.

Calendar intervals (historical daily data):
- week: (year, (day_of_year - 1) // 7), stamped at week start + 3.5 days
- month(n): (year, (month - 1) // n), stamped on the 15th of the center month
- year(n): n / 12 years per bucket aligned on multiples of that span,
  stamped on 1 July of the center year
Each bucket collapses to one point with the reducer (mean, or sum for
cumulative quantities). Empty buckets never appear.

All calendar fields are read in the station timezone.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from agromet.schemas.query import Interval
from agromet.schemas.series import (
    MS_PER_DAY,
    Reducer,
    make_series,
    to_epoch_ms,
    to_local_datetimes,
)

# Week buckets are stamped at their center
HALF_WEEK_MS = int(3.5 * MS_PER_DAY)


def _localized_ms(naive: pd.Series, tz: str) -> pd.Series:
    local = naive.dt.tz_localize(
        tz,
        ambiguous=np.zeros(len(naive), dtype=bool),
        nonexistent="shift_forward",
    )
    return to_epoch_ms(local)


def _local_midnights_ms(years: pd.Series, months, days, tz: str) -> pd.Series:
    """Epoch ms of local midnight for each (year, month, day) row."""
    naive = pd.to_datetime(
        pd.DataFrame({"year": years, "month": months, "day": days})
    )
    return _localized_ms(naive, tz)


def dedupe_hours(series: pd.DataFrame, tz: str = "UTC") -> pd.DataFrame:
    """Keep the earliest reading of each local clock hour.

    Idempotent: a deduped series passes through unchanged.

    Args:
        series: DataFrame with series schema
        tz: Station timezone that defines the clock hours

    Returns:
        Sorted series with at most one point per (year, month, day, hour)
    """
    if series.empty:
        return series

    df = series.sort_values("ts_ms", kind="stable").reset_index(drop=True)
    local = to_local_datetimes(df["ts_ms"], tz)
    hour_keys = pd.DataFrame(
        {
            "year": local.dt.year,
            "month": local.dt.month,
            "day": local.dt.day,
            "hour": local.dt.hour,
        }
    )
    first = ~hour_keys.duplicated(keep="first")
    return df[first].reset_index(drop=True)


def thin_hours(series: pd.DataFrame, hours: int, tz: str = "UTC") -> pd.DataFrame:
    """Hour-dedup, then keep the first point of each n-hour slot.

    Slots shorter than a day restart at each local midnight. Slots of 24
    hours or more are aligned on days since the epoch, counted from local
    midnight.

    Args:
        series: DataFrame with series schema
        hours: Slot length in hours (1 means hour-dedup only)
        tz: Station timezone

    Returns:
        Thinned, sorted series
    """
    deduped = dedupe_hours(series, tz)
    if hours == 1 or deduped.empty:
        return deduped

    local = to_local_datetimes(deduped["ts_ms"], tz)
    midnight_ms = to_epoch_ms(local.dt.normalize())

    if hours >= 24:
        day_index = midnight_ms // MS_PER_DAY
        slot = np.floor(day_index % (hours / 24))
        slot_keys = pd.DataFrame({"slot": day_index - slot})
    else:
        slot_keys = pd.DataFrame(
            {"midnight": midnight_ms, "slot": local.dt.hour // hours}
        )

    first = ~slot_keys.duplicated(keep="first")
    return deduped[first].reset_index(drop=True)


def _week_bucket_ms(local: pd.Series, tz: str) -> pd.Series:
    years = local.dt.year
    week_num = (local.dt.dayofyear - 1) // 7
    # Week starts are whole local calendar days after Jan 1
    start_naive = pd.to_datetime(
        pd.DataFrame({"year": years, "month": 1, "day": 1})
    ) + pd.to_timedelta(week_num * 7, unit="D")
    return _localized_ms(start_naive, tz) + HALF_WEEK_MS


def _month_bucket_ms(local: pd.Series, months: int, tz: str) -> pd.Series:
    bucket_index = (local.dt.month - 1) // months
    center_month = bucket_index * months + months // 2 + 1
    return _local_midnights_ms(local.dt.year, center_month, 15, tz)


def _year_bucket_ms(local: pd.Series, years_per_bucket: int, tz: str) -> pd.Series:
    bucket_year = (local.dt.year // years_per_bucket) * years_per_bucket
    center_year = bucket_year + years_per_bucket // 2
    return _local_midnights_ms(center_year, 7, 1, tz)


def bucket_timestamps(series: pd.DataFrame, interval: Interval, tz: str = "UTC") -> pd.Series:
    """Representative timestamp (epoch ms) of the calendar bucket of each point.

    Each bucket has exactly one representative timestamp, so grouping on it
    groups by bucket.

    Raises:
        ValueError: If interval is not a calendar interval
    """
    local = to_local_datetimes(series["ts_ms"], tz)
    if interval.kind == "week":
        return _week_bucket_ms(local, tz)
    if interval.kind == "month":
        return _month_bucket_ms(local, interval.n, tz)
    if interval.kind == "year":
        return _year_bucket_ms(local, interval.years, tz)
    raise ValueError(f"Not a calendar interval: {interval!r}")


def bucket_calendar(
    series: pd.DataFrame,
    interval: Interval,
    reducer: Reducer = "mean",
    tz: str = "UTC",
) -> pd.DataFrame:
    """Collapse each calendar bucket to one point using the reducer.

    Args:
        series: DataFrame with series schema
        interval: week, month(n) or year(n)
        reducer: "mean" or "sum"
        tz: Station timezone

    Returns:
        Series with one point per non-empty bucket, sorted by bucket timestamp
    """
    if series.empty:
        return series

    df = series.assign(bucket_ts=bucket_timestamps(series, interval, tz).to_numpy())
    reduced = df.groupby("bucket_ts", sort=True)["value"].agg(reducer)
    return make_series(reduced.index.to_numpy(), reduced.to_numpy())


def aggregate(
    series: pd.DataFrame,
    interval: Interval,
    reducer: Reducer = "mean",
    tz: str = "UTC",
) -> pd.DataFrame:
    """Re-aggregate a series to the requested interval.

    The engine does not check that the interval suits the range; a large
    interval over a short range simply yields one bucket.

    Args:
        series: DataFrame with series schema
        interval: Interval spec; kind="none" returns the series unchanged
        reducer: "mean" or "sum" for calendar buckets (hour thinning ignores it)
        tz: Station timezone for calendar fields

    Returns:
        DataFrame with series schema

    Raises:
        ValueError: If reducer is not "mean" or "sum"
    """
    if reducer not in ("mean", "sum"):
        raise ValueError(f"Unknown reducer {reducer!r}")

    if interval.kind == "none" or series.empty:
        return series

    if interval.kind == "hours":
        return thin_hours(series, interval.n, tz)

    return bucket_calendar(series, interval, reducer, tz)
