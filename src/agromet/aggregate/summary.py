"""Summary statistics and daily tables over a series.

stats() feeds the per-station min/max/avg panel under a chart.
daily_summary() builds the "last 7 days" table shown for live stations:
readings are hour-deduped, grouped by local calendar date, and summarised
as min/max/average (temperature), total (rainfall) or average (anything else).
"""

from __future__ import annotations

import pandas as pd

from agromet.aggregate.intervals import dedupe_hours
from agromet.schemas.parameters import SummaryKind
from agromet.schemas.series import StationStats, to_local_datetimes

DAILY_SUMMARY_FIELDS: dict[str, list[str]] = {
    "temperature": ["date", "min", "max", "average", "count"],
    "total": ["date", "total", "count"],
    "average": ["date", "average", "count"],
}


def stats(series: pd.DataFrame) -> StationStats:
    """Compute min, max, mean, sum and count over a series.

    Args:
        series: DataFrame with series schema

    Returns:
        StationStats; NaN statistics and count 0 for an empty series
    """
    values = series["value"].dropna() if "value" in series.columns else pd.Series(dtype=float)
    if values.empty:
        return StationStats.empty()

    return StationStats(
        min=float(values.min()),
        max=float(values.max()),
        mean=float(values.mean()),
        sum=float(values.sum()),
        count=int(len(values)),
    )


def daily_summary(
    series: pd.DataFrame,
    kind: SummaryKind = "average",
    tz: str = "UTC",
    days: int = 7,
) -> pd.DataFrame:
    """Summarise the most recent calendar days of a series.

    Args:
        series: DataFrame with series schema (typically live readings)
        kind: "temperature" (min/max/average), "total" or "average"
        tz: Station timezone that defines calendar dates
        days: Number of most recent dates to keep

    Returns:
        DataFrame with one row per date, newest first; date is "YYYY-MM-DD"
        and statistics are rounded to one decimal
    """
    columns = DAILY_SUMMARY_FIELDS[kind]
    if series.empty:
        return pd.DataFrame(columns=columns)

    deduped = dedupe_hours(series, tz)
    local = to_local_datetimes(deduped["ts_ms"], tz)
    df = deduped.assign(date=local.dt.strftime("%Y-%m-%d").to_numpy())

    grouped = df.groupby("date")["value"]
    if kind == "temperature":
        table = grouped.agg(min="min", max="max", average="mean", count="count")
    elif kind == "total":
        table = grouped.agg(total="sum", count="count")
    else:
        table = grouped.agg(average="mean", count="count")

    table = table.reset_index().sort_values("date", ascending=False).head(days).copy()
    stat_cols = [col for col in columns if col not in ("date", "count")]
    table[stat_cols] = table[stat_cols].round(1)
    table["count"] = table["count"].astype(int)

    return table[columns].reset_index(drop=True)
