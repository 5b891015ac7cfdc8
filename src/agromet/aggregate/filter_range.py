"""Filter a series to a requested time window.

Relative ranges look back a fixed number of calendar days from an anchor:
- anchor="latest": the most recent point in the series (historical charts,
  where the newest record may be months old)
- anchor="now": the wall clock (live-station charts)

Custom ranges are inclusive calendar dates in the station timezone; the end
date runs through 23:59:59.999.
"""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd

from agromet.schemas.query import Anchor, CustomRange, RangeSpec, RelativeRange


def _local_timestamp(day: date, tz: str, offset: pd.Timedelta | None = None) -> pd.Timestamp:
    naive = pd.Timestamp(day.year, day.month, day.day)
    if offset is not None:
        naive = naive + offset
    return naive.tz_localize(tz, ambiguous=False, nonexistent="shift_forward")


def _to_ms(ts: pd.Timestamp) -> int:
    return ts.value // 1_000_000


def custom_bounds_ms(range_spec: CustomRange, tz: str = "UTC") -> tuple[int, int]:
    """Return the inclusive (start, end) epoch ms of a custom range.

    Start is local midnight of the start date, end is 23:59:59.999 local of
    the end date.
    """
    start = _local_timestamp(range_spec.start, tz)
    end = _local_timestamp(
        range_spec.end,
        tz,
        offset=pd.Timedelta(hours=23, minutes=59, seconds=59, milliseconds=999),
    )
    return _to_ms(start), _to_ms(end)


def _resolve_now(now: datetime | pd.Timestamp | None, tz: str) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz=tz)
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize(tz, ambiguous=False, nonexistent="shift_forward")
    return ts.tz_convert(tz)


def relative_cutoff_ms(
    anchor_ts: pd.Timestamp,
    lookback_days: int,
) -> int:
    """Epoch ms of the anchor moved back lookback_days calendar days.

    The subtraction keeps local wall-clock time, so a DST change inside the
    window does not shift the cutoff by an hour.
    """
    wall = anchor_ts.tz_localize(None) - pd.Timedelta(days=lookback_days)
    cutoff = wall.tz_localize(anchor_ts.tz, ambiguous=False, nonexistent="shift_forward")
    return _to_ms(cutoff)


def filter_by_range(
    series: pd.DataFrame,
    range_spec: RangeSpec,
    anchor: Anchor = "latest",
    now: datetime | pd.Timestamp | None = None,
    tz: str = "UTC",
) -> pd.DataFrame:
    """Keep the points of a series that fall inside a time window.

    Args:
        series: DataFrame with series schema, sorted by ts_ms
        range_spec: RelativeRange or CustomRange
        anchor: "latest" to look back from the last point, "now" to look back
            from the wall clock
        now: Wall-clock override for anchor="now" (naive values are read in tz)
        tz: Station timezone for calendar arithmetic

    Returns:
        DataFrame with series schema; empty input gives empty output
    """
    if series.empty:
        return series

    ts = series["ts_ms"]

    if isinstance(range_spec, CustomRange):
        start_ms, end_ms = custom_bounds_ms(range_spec, tz)
        keep = (ts >= start_ms) & (ts <= end_ms)
        return series[keep].reset_index(drop=True)

    if not isinstance(range_spec, RelativeRange):
        raise TypeError(f"Unsupported range spec: {range_spec!r}")

    lookback = range_spec.lookback_days
    if lookback is None:
        return series

    if anchor == "now":
        anchor_ts = _resolve_now(now, tz)
    else:
        anchor_ts = pd.Timestamp(int(ts.iloc[-1]), unit="ms", tz="UTC").tz_convert(tz)

    cutoff = relative_cutoff_ms(anchor_ts, lookback)
    return series[ts >= cutoff].reset_index(drop=True)
