"""CSV export of charted series and parquet persistence of series."""

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

__all__ = [
    "series_csv_rows",
    "multi_station_csv_rows",
    "combined_csv_rows",
    "daily_table_csv_rows",
    "range_file_label",
    "export_filename",
    "write_csv",
    "write_series",
    "read_series",
]
