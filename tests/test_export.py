"""Tests for CSV and parquet exports."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from agromet.export.csv_writer import (
    combined_csv_rows,
    daily_table_csv_rows,
    export_filename,
    multi_station_csv_rows,
    range_file_label,
    series_csv_rows,
    write_csv,
)
from agromet.export.parquet_store import read_series, write_series
from agromet.schemas.query import CustomRange, RelativeRange
from agromet.schemas.series import empty_series


class TestSeriesRows:
    def test_dates_and_hours_not_zero_padded(self, make_series) -> None:
        """US locale output: 1/5/2024 and 9:05:00 AM, never 01/05/2024 or 09:05:00."""
        series = make_series([datetime(2024, 1, 5, 9, 5)], [1.0])
        rows = series_csv_rows(series, "x")

        assert rows[1][:2] == ["1/5/2024", "9:05:00 AM"]

    def test_us_date_and_time(self, make_series) -> None:
        series = make_series([datetime(2024, 1, 5, 13), datetime(2024, 1, 6)], [25.5, 25.0])
        rows = series_csv_rows(series, "Rainfall (mm)")

        assert rows == [
            ["Date", "Time", "Rainfall (mm)"],
            ["1/5/2024", "1:00:00 PM", "25.5"],
            ["1/6/2024", "12:00:00 AM", "25"],
        ]

    def test_rendered_in_station_timezone(self, make_series) -> None:
        series = make_series([datetime(2024, 1, 5, 18)], [1.0])
        rows = series_csv_rows(series, "x", tz="Asia/Dhaka")

        assert rows[1][:2] == ["1/6/2024", "12:00:00 AM"]

    def test_empty_series_header_only(self) -> None:
        assert series_csv_rows(empty_series(), "x") == [["Date", "Time", "x"]]


class TestMultiStationRows:
    def test_wide_table_with_gaps(self, make_series) -> None:
        station_series = {
            "Gazipur": make_series([datetime(2024, 1, 1), datetime(2024, 1, 2)], [1.0, 2.5]),
            "Rangpur": make_series([datetime(2024, 1, 2)], [3.0]),
            "Barishal": empty_series(),
        }
        rows = multi_station_csv_rows(station_series)

        assert rows == [
            ["Date", "Gazipur", "Rangpur", "Barishal"],
            ["1/1/2024", "1.00", "", ""],
            ["1/2/2024", "2.50", "3.00", ""],
        ]

    def test_all_empty(self) -> None:
        rows = multi_station_csv_rows({"Gazipur": empty_series()})

        assert rows == [["Date", "Gazipur"]]


def test_export_package_imports() -> None:
    """The export package and its submodules import on every supported Python."""
    import agromet.export as export

    assert export.export_filename is export_filename
    assert export.write_series is write_series


class TestOtherRows:
    def test_combined_rows(self, make_series) -> None:
        all_data = {"rainfall": {"Gazipur": make_series([datetime(2024, 1, 1)], [1.0])}}
        rows = combined_csv_rows(all_data)

        assert rows[1] == ["1/1/2024", "Rainfall", "Gazipur", "1.00", "mm"]

    def test_daily_table_rows(self) -> None:
        table = pd.DataFrame(
            {"date": ["2024-07-02"], "min": [20.0], "max": [31.5], "average": [25.25], "count": [24]}
        )
        rows = daily_table_csv_rows(table, "temperature", "°C")

        assert rows[0] == ["Date", "Min °C", "Max °C", "Avg °C"]
        assert rows[1] == ["2024-07-02", "20.0", "31.5", "25.2"]

    def test_range_file_label(self) -> None:
        assert range_file_label(RelativeRange("1year")) == "1Year"
        assert range_file_label(RelativeRange("5year")) == "5year"
        assert (
            range_file_label(CustomRange(date(2024, 1, 1), date(2024, 3, 31)))
            == "2024-01-01_to_2024-03-31"
        )

    def test_export_filename(self) -> None:
        name = export_filename("Rainfall  Gazipur", "1Year", today=date(2024, 5, 1))

        assert name == "Rainfall_Gazipur_1Year_2024-05-01.csv"


class TestWriteCsv:
    def test_writes_and_quotes(self, tmp_path) -> None:
        rows = [["Date", "Station, North"], ["1/1/2024", "1.00"]]
        path = write_csv(rows, tmp_path / "out" / "export.csv", verbose=False)

        assert path == tmp_path / "out" / "export.csv"
        assert path.read_text(encoding="utf-8") == 'Date,"Station, North"\n1/1/2024,1.00\n'
        assert not (tmp_path / "out" / "export.csv.tmp").exists()

    def test_header_only_is_skipped(self, tmp_path) -> None:
        path = tmp_path / "export.csv"

        assert write_csv([["Date", "Gazipur"]], path, verbose=False) is None
        assert not path.exists()


class TestParquetStore:
    def test_round_trip(self, tmp_path, make_series) -> None:
        series = make_series([datetime(2024, 1, 1), datetime(2024, 1, 2)], [1.5, 2.5])
        path = write_series(series, tmp_path / "series" / "Gazipur.parquet", verbose=False)

        pd.testing.assert_frame_equal(read_series(path), series)

    def test_rejects_unsorted(self, tmp_path) -> None:
        unsorted = pd.DataFrame({"ts_ms": [2, 1], "value": [1.0, 2.0]})

        with pytest.raises(ValueError, match="Not sorted"):
            write_series(unsorted, tmp_path / "bad.parquet", verbose=False)
        assert not (tmp_path / "bad.parquet").exists()
