"""Canonical time series schema.

Every stage after expansion works on the same two-column frame:

    ts_ms  int64    epoch milliseconds
    value  float64  reading (or bucket reducer output)

Non-negotiables:
- rows are sorted by ts_ms, non-decreasing
- no nulls in either column
- duplicate timestamps are allowed until interval bucketing collapses them
- the frame uses a default RangeIndex

Calendar meaning (local day, hour, month) is always derived from ts_ms and a
station timezone at the point of use; nothing timezone-specific is stored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

import pandas as pd

from agromet.schemas.validate import (
    require_columns,
    require_dtypes,
    require_no_nulls,
    require_sorted,
)

Reducer = Literal["mean", "sum"]

SERIES_FIELDS = ["ts_ms", "value"]

REQUIRED_COLUMNS = SERIES_FIELDS.copy()

MS_PER_DAY = 86_400_000

_DATASET_NAME = "series"


def empty_series() -> pd.DataFrame:
    """Return an empty series frame with the canonical columns and dtypes."""
    return pd.DataFrame(
        {
            "ts_ms": pd.Series([], dtype="int64"),
            "value": pd.Series([], dtype="float64"),
        }
    )


def make_series(ts_ms, values) -> pd.DataFrame:
    """Build a canonical series frame from parallel sequences, sorted by ts_ms."""
    df = pd.DataFrame(
        {
            "ts_ms": pd.Series(ts_ms, dtype="int64"),
            "value": pd.Series(values, dtype="float64"),
        }
    )
    return df.sort_values("ts_ms", kind="stable").reset_index(drop=True)


def to_local_datetimes(ts_ms: pd.Series, tz: str) -> pd.Series:
    """Convert epoch milliseconds to tz-aware timestamps in the station timezone."""
    return pd.to_datetime(ts_ms, unit="ms", utc=True).dt.tz_convert(tz)


def to_epoch_ms(ts: pd.Series) -> pd.Series:
    """Convert tz-aware timestamps to epoch milliseconds (int64)."""
    epoch = pd.Timestamp("1970-01-01", tz="UTC")
    return ((ts.dt.tz_convert("UTC") - epoch) // pd.Timedelta(milliseconds=1)).astype("int64")


def validate_series(df: pd.DataFrame) -> None:
    """Validate that a DataFrame conforms to the series schema.

    Checks performed:
    - ts_ms and value columns present
    - ts_ms is integer, value is float
    - no nulls
    - sorted ascending by ts_ms

    Raises:
        ValueError: If any validation check fails
    """
    require_columns(df.columns, REQUIRED_COLUMNS, dataset=_DATASET_NAME)

    if df.empty:
        return

    require_dtypes(df, {"ts_ms": "int", "value": "float"}, dataset=_DATASET_NAME)
    require_no_nulls(df, SERIES_FIELDS, dataset=_DATASET_NAME)
    require_sorted(df, "ts_ms", dataset=_DATASET_NAME)


@dataclass(frozen=True)
class StationStats:
    """Summary statistics over one series.

    Empty series produce NaN for every statistic and count 0; display code
    renders NaN as "-".
    """

    min: float
    max: float
    mean: float
    sum: float
    count: int

    @classmethod
    def empty(cls) -> "StationStats":
        nan = float("nan")
        return cls(min=nan, max=nan, mean=nan, sum=nan, count=0)

    def central(self, reducer: Reducer = "mean") -> float:
        """Return the headline value: mean, or sum for cumulative parameters."""
        return self.sum if reducer == "sum" else self.mean

    def formatted(self, reducer: Reducer = "mean") -> dict[str, str | int]:
        """Display strings with two decimals, "-" for missing."""

        def fmt(value: float) -> str:
            return "-" if math.isnan(value) else f"{value:.2f}"

        label = "total" if reducer == "sum" else "avg"
        return {
            "min": fmt(self.min),
            "max": fmt(self.max),
            label: fmt(self.central(reducer)),
            "count": self.count,
        }
