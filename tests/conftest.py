"""Pytest configuration and fixtures."""

from __future__ import annotations

import calendar
from datetime import datetime
from typing import Callable

import pandas as pd
import pytest

from agromet.schemas.series import make_series as _make_series_frame


def _to_ms(*parts: int, tz: str = "UTC") -> int:
    return pd.Timestamp(datetime(*parts)).tz_localize(tz).value // 1_000_000


@pytest.fixture
def ms() -> Callable[..., int]:
    """Epoch milliseconds of a local wall-clock time: ms(2024, 2, 29, tz="UTC")."""
    return _to_ms


@pytest.fixture
def make_raw_records():
    """Factory fixture for creating monthly raw records with every day filled."""

    def _make(
        year: int = 2024,
        months: tuple[int, ...] = (1, 2, 3),
        station: str = "Gazipur",
        value: Callable[[int, int, int], float] | None = None,
    ) -> list[dict]:
        if value is None:
            value = lambda y, m, d: float(d)  # noqa: E731
        records = []
        for month in months:
            record = {"station": station, "year": year, "month": month}
            for day in range(1, calendar.monthrange(year, month)[1] + 1):
                record[f"day{day}"] = value(year, month, day)
            records.append(record)
        return records

    return _make


@pytest.fixture
def make_series():
    """Factory fixture for creating series frames from datetimes."""

    def _make(
        times: list[datetime],
        values: list[float] | None = None,
        tz: str = "UTC",
    ) -> pd.DataFrame:
        if values is None:
            values = [float(i) for i in range(len(times))]
        ts_ms = [_to_ms(*t.timetuple()[:6], tz=tz) for t in times]
        return _make_series_frame(ts_ms, values)

    return _make


@pytest.fixture
def hourly_day():
    """24 hourly readings on 2024-07-01 UTC, value = hour."""
    times = pd.date_range("2024-07-01 00:00", periods=24, freq="h", tz="UTC")
    return _make_series_frame(
        [ts.value // 1_000_000 for ts in times],
        [float(ts.hour) for ts in times],
    )
