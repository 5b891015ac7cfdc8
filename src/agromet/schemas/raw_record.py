"""Raw monthly climate record schema.

One raw record holds one calendar month of daily observations for one
station and parameter, exactly as the records API returns it:

    {"station": "Gazipur", "year": 2024, "month": 2, "day1": 21.4, ..., "day31": null}

Rules:
- month is 1-12
- day1..day31 are optional; absent, null and "" all mean "no reading"
- days that do not exist in the month (Feb 30, Apr 31) are ignored downstream

Records are never retained past expansion; this module only describes them.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypedDict

import pandas as pd

from agromet.schemas.validate import (
    require_columns,
    require_int_range,
    require_no_nulls,
    require_unique,
)


class RawRecord(TypedDict, total=False):
    """One station-month of daily values.

    Only year and month are required; day keys are "day1" through "day31".
    """

    station: str  # Station name or identifier
    year: int  # Calendar year
    month: int  # Calendar month, 1-12


MAX_DAYS = 31

# Column names for the daily value slots
DAY_FIELDS = [f"day{day}" for day in range(1, MAX_DAYS + 1)]

# Required columns for validation
REQUIRED_COLUMNS = ["year", "month"]

_DATASET_NAME = "raw_records"


def records_to_frame(records: Iterable[Mapping[str, Any]] | pd.DataFrame) -> pd.DataFrame:
    """Return raw records as a DataFrame with every day column present.

    Missing day columns are added as nulls so callers can melt over DAY_FIELDS
    without checking which days a payload happened to include.
    """
    if isinstance(records, pd.DataFrame):
        df = records.copy()
    else:
        df = pd.DataFrame(list(records))

    for col in REQUIRED_COLUMNS + DAY_FIELDS:
        if col not in df.columns:
            df[col] = None

    return df


def validate_raw_records(
    records: Iterable[Mapping[str, Any]] | pd.DataFrame,
    require_unique_months: bool = True,
) -> None:
    """Validate raw records strictly.

    The expansion stage tolerates bad records; this is for callers that want
    to reject a payload outright (e.g. the fetch CLI with --strict).

    Checks performed:
    - year and month present and non-null
    - year and month are integers, month in [1, 12]
    - (station, year, month) unique if require_unique_months=True and a
      station column is present

    Raises:
        ValueError: If any validation check fails
    """
    if isinstance(records, pd.DataFrame):
        df = records
    else:
        df = pd.DataFrame(list(records))

    require_columns(df.columns, REQUIRED_COLUMNS, dataset=_DATASET_NAME)

    if df.empty:
        return

    numeric = pd.DataFrame(
        {
            "year": pd.to_numeric(df["year"], errors="coerce"),
            "month": pd.to_numeric(df["month"], errors="coerce"),
        },
        index=df.index,
    )
    require_no_nulls(numeric, REQUIRED_COLUMNS, dataset=_DATASET_NAME)
    require_int_range(numeric, "year", lo=1, hi=9999, dataset=_DATASET_NAME)
    require_int_range(numeric, "month", lo=1, hi=12, dataset=_DATASET_NAME)

    if require_unique_months and "station" in df.columns:
        keyed = numeric.assign(station=df["station"])
        require_unique(keyed, ["station", "year", "month"], dataset=_DATASET_NAME)
