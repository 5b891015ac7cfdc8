"""Expand raw records into canonical time series.

This stage:
- Melts monthly day1..day31 records into one row per day
- Drops missing, empty and non-numeric values
- Drops days that do not exist in their month (Feb 30, Feb 29 outside leap years)
- Stamps each day at local midnight in the station timezone (epoch ms)
- Sorts ascending by timestamp, keeping record order for equal timestamps

Design principles:
- Permissive: bad values are skipped, never raised
- Duplicates are preserved; interval bucketing collapses them later
- Output always has the series schema, even when empty
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from agromet.schemas.raw_record import DAY_FIELDS, records_to_frame
from agromet.schemas.series import empty_series, make_series, to_epoch_ms


def _localize_midnights(dates: pd.Series, tz: str) -> pd.Series:
    """Attach the station timezone to naive midnights.

    Midnights skipped by a DST jump shift forward; ambiguous ones take the
    standard-time reading.
    """
    return dates.dt.tz_localize(
        tz,
        ambiguous=np.zeros(len(dates), dtype=bool),
        nonexistent="shift_forward",
    )


def expand(
    records: Iterable[Mapping[str, Any]] | pd.DataFrame,
    tz: str = "UTC",
    verbose: bool = False,
) -> pd.DataFrame:
    """Expand monthly raw records into a sorted daily series.

    Args:
        records: Raw records (dicts or a DataFrame) with year, month and
            day1..day31 fields
        tz: Station timezone used to place each day's midnight
        verbose: If True, print how many points were extracted

    Returns:
        DataFrame with series schema (ts_ms, value)
    """
    df = records_to_frame(records)
    if df.empty:
        return empty_series()

    df["year"] = pd.to_numeric(df["year"], errors="coerce")
    df["month"] = pd.to_numeric(df["month"], errors="coerce")

    long = df.melt(
        id_vars=["year", "month"],
        value_vars=DAY_FIELDS,
        var_name="day",
        value_name="value",
    )
    long["day"] = long["day"].str[3:].astype(int)
    long["value"] = pd.to_numeric(long["value"], errors="coerce")

    usable = (
        np.isfinite(long["value"])
        & (long["year"] % 1 == 0)
        & (long["month"] % 1 == 0)
    )
    long = long[usable]
    if long.empty:
        if verbose:
            print(f"[expand] No usable values in {len(df)} monthly records")
        return empty_series()

    # Invalid calendar dates (Feb 30, month 13) become NaT and are dropped
    dates = pd.to_datetime(
        pd.DataFrame(
            {
                "year": long["year"].astype(int),
                "month": long["month"].astype(int),
                "day": long["day"],
            }
        ),
        errors="coerce",
    )
    valid = dates.notna()
    long = long[valid]
    dates = dates[valid]

    if long.empty:
        if verbose:
            print(f"[expand] No valid dates in {len(df)} monthly records")
        return empty_series()

    ts_ms = to_epoch_ms(_localize_midnights(dates, tz))
    series = make_series(ts_ms.to_numpy(), long["value"].to_numpy())

    if verbose:
        print(f"[expand] Extracted {len(series)} daily points from {len(df)} monthly records")

    return series


def _parse_timestamp(value: Any, tz: str) -> pd.Timestamp | None:
    """Parse a measurement timestamp; naive values are read in the station timezone."""
    if value is None or value == "":
        return None
    if not isinstance(value, (str, datetime)):
        return None
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError):
        return None
    if ts is pd.NaT:
        return None
    if ts.tzinfo is None:
        return ts.tz_localize(tz, ambiguous=False, nonexistent="shift_forward")
    return ts.tz_convert(tz)


def _parse_value(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        stripped = str(value).strip()
        if stripped == "":
            return None
        try:
            result = float(stripped)
        except ValueError:
            return None
    return result if np.isfinite(result) else None


def expand_measurements(
    items: Iterable[Mapping[str, Any]],
    tz: str = "UTC",
) -> pd.DataFrame:
    """Turn live-station measurements into a sorted series.

    Each item carries a "date_value" timestamp (ISO string, "YYYY-MM-DD HH:MM:SS"
    or datetime) and a "last_value" reading. Items with an unparseable
    timestamp or value are skipped.

    Args:
        items: Measurement dicts from the live-station API
        tz: Station timezone for naive timestamps

    Returns:
        DataFrame with series schema (ts_ms, value)
    """
    ts_list: list[pd.Timestamp] = []
    values: list[float] = []
    for item in items:
        ts = _parse_timestamp(item.get("date_value"), tz)
        value = _parse_value(item.get("last_value"))
        if ts is None or value is None:
            continue
        ts_list.append(ts)
        values.append(value)

    if not ts_list:
        return empty_series()

    ts_ms = [ts.value // 1_000_000 for ts in ts_list]
    return make_series(ts_ms, values)
