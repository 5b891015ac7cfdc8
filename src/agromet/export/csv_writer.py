"""CSV exports of charted series.

Formats (dates are US locale, as the portal's downloads have always been):
month, day and 12-hour clock hour are not zero-padded (M/D/YYYY, h:MM:SS AM/PM)
- single series:   Date,Time,<title (unit)>       e.g. 1/5/2024,1:00:00 PM,25.5
- multi-station:   Date,<station>,<station>,...   values to 2 decimals, blank gaps
- combined:        Date,Parameter,Station,Value,Unit
- daily table:     Date,Min u,Max u,Avg u | Date,Total u | Date,Average u

Row builders are pure; write_csv() does the atomic file write.
"""

from __future__ import annotations

import csv
import re
from datetime import date
from pathlib import Path
from typing import Mapping

import pandas as pd

from agromet.schemas.parameters import SummaryKind, get_parameter
from agromet.schemas.query import CustomRange, RangeSpec
from agromet.schemas.series import to_local_datetimes

Row = list[str]

# File-name labels for relative ranges
RANGE_FILE_LABELS = {
    "day": "1Day",
    "week": "1Week",
    "month": "1Month",
    "3month": "3Months",
    "6month": "6Months",
    "1year": "1Year",
    "all": "AllData",
}


def _us_date(ts: pd.Timestamp) -> str:
    return f"{ts.month}/{ts.day}/{ts.year}"


def _us_time(ts: pd.Timestamp) -> str:
    hour12 = ts.hour % 12 or 12
    suffix = "AM" if ts.hour < 12 else "PM"
    return f"{hour12}:{ts.minute:02d}:{ts.second:02d} {suffix}"


def _plain_number(value: float) -> str:
    """Shortest round-trip text for a reading: 25 -> "25", 25.5 -> "25.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def series_csv_rows(series: pd.DataFrame, header: str, tz: str = "UTC") -> list[Row]:
    """Rows for one station's series: Date, Time and the raw value."""
    rows: list[Row] = [["Date", "Time", header]]
    if series.empty:
        return rows

    local = to_local_datetimes(series["ts_ms"], tz)
    for ts, value in zip(local, series["value"]):
        rows.append([_us_date(ts), _us_time(ts), _plain_number(value)])
    return rows


def multi_station_csv_rows(
    station_series: Mapping[str, pd.DataFrame],
    tz: str = "UTC",
) -> list[Row]:
    """Wide table: one row per timestamp across all stations, one column per station.

    Where a station has several points at one timestamp, the first is used.
    """
    stations = list(station_series)
    rows: list[Row] = [["Date", *stations]]

    columns = {
        station: series.drop_duplicates("ts_ms", keep="first").set_index("ts_ms")["value"]
        for station, series in station_series.items()
        if not series.empty
    }
    if not columns:
        return rows

    wide = pd.DataFrame(columns).sort_index()
    local = to_local_datetimes(pd.Series(wide.index, dtype="int64"), tz)
    for ts, (_, values) in zip(local, wide.iterrows()):
        cells = [
            "" if station not in values or pd.isna(values[station]) else f"{values[station]:.2f}"
            for station in stations
        ]
        rows.append([_us_date(ts), *cells])
    return rows


def combined_csv_rows(
    all_data: Mapping[str, Mapping[str, pd.DataFrame]],
    tz: str = "UTC",
) -> list[Row]:
    """Long table over every parameter and station."""
    rows: list[Row] = [["Date", "Parameter", "Station", "Value", "Unit"]]
    for parameter_key, station_series in all_data.items():
        parameter = get_parameter(parameter_key)
        for station, series in station_series.items():
            if series.empty:
                continue
            local = to_local_datetimes(series["ts_ms"], tz)
            for ts, value in zip(local, series["value"]):
                rows.append(
                    [_us_date(ts), parameter.label, station, f"{value:.2f}", parameter.unit]
                )
    return rows


def daily_table_csv_rows(table: pd.DataFrame, kind: SummaryKind, unit: str = "") -> list[Row]:
    """Rows for a daily summary table built by daily_summary()."""
    if kind == "temperature":
        rows: list[Row] = [["Date", f"Min {unit}", f"Max {unit}", f"Avg {unit}"]]
        fields = ["min", "max", "average"]
    elif kind == "total":
        rows = [["Date", f"Total {unit}"]]
        fields = ["total"]
    else:
        rows = [["Date", f"Average {unit}"]]
        fields = ["average"]

    for record in table.to_dict("records"):
        rows.append([record["date"], *(f"{record[field]:.1f}" for field in fields)])
    return rows


def range_file_label(range_spec: RangeSpec) -> str:
    if isinstance(range_spec, CustomRange):
        return f"{range_spec.start.isoformat()}_to_{range_spec.end.isoformat()}"
    return RANGE_FILE_LABELS.get(range_spec.unit, range_spec.unit)


def export_filename(title: str, label: str, today: date | None = None) -> str:
    """Download file name: Title_With_Underscores_<label>_<YYYY-MM-DD>.csv"""
    today = today or date.today()
    safe_title = re.sub(r"\s+", "_", title)
    return f"{safe_title}_{label}_{today.isoformat()}.csv"


def write_csv(rows: list[Row], path: Path | str, verbose: bool = True) -> Path | None:
    """Write CSV rows atomically.

    Args:
        rows: Header row followed by data rows
        path: Output CSV path
        verbose: If True, print what was written or skipped

    Returns:
        Path to written file, or None if there were no data rows
    """
    path = Path(path)
    if len(rows) <= 1:
        if verbose:
            print(f"[export] Skipping {path.name}: no data")
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".csv.tmp")
    with tmp_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerows(rows)
    tmp_path.replace(path)

    if verbose:
        print(f"[export] Wrote {len(rows) - 1} rows to {path}")
    return path
