"""CLI for exporting one parameter across several stations as a wide CSV.

Usage:
    python scripts/export_station_csv.py --parameter rainfall \
        --stations Gazipur Rangpur Barishal --range 1Y --interval 1M

Fetches live from the records API and writes:
    data/exports/<Parameter_Label>_<range>_<YYYY-MM-DD>.csv
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from agromet.aggregate.query import parse_interval, parse_range, run_multi_station
from agromet.config import exports_dir, station_timezone
from agromet.export.csv_writer import (
    export_filename,
    multi_station_csv_rows,
    range_file_label,
    write_csv,
)
from agromet.fetch.station_records import fetch_multi_station_series
from agromet.schemas.parameters import get_parameter
from agromet.schemas.query import ChartQuery


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export one parameter for several stations to CSV."
    )
    parser.add_argument("--parameter", required=True, help="Parameter key (e.g., rainfall)")
    parser.add_argument("--stations", nargs="+", required=True, help="Station names")
    parser.add_argument("--range", default="3M", help="Range label or custom (default: 3M)")
    parser.add_argument("--start", default=None, help="Custom range start YYYY-MM-DD")
    parser.add_argument("--end", default=None, help="Custom range end YYYY-MM-DD")
    parser.add_argument("--interval", default="none", help="Data average label (default: none)")
    parser.add_argument("--base-url", default=None, help="Records API base URL")
    parser.add_argument("--tz", default=None, help="Station timezone")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the CSV (default: data/exports)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    tz = args.tz or station_timezone()
    parameter = get_parameter(args.parameter)

    try:
        range_spec = parse_range(args.range, args.start, args.end)
    except ValueError as exc:
        print(f"[export] ERROR: {exc}")
        sys.exit(1)

    query = ChartQuery(
        range=range_spec,
        interval=parse_interval(args.interval),
        reducer=parameter.reducer,
        tz=tz,
    )

    station_series = fetch_multi_station_series(
        args.stations, args.parameter, tz=tz, base_url=args.base_url
    )
    results = run_multi_station(station_series, query)

    rows = multi_station_csv_rows(
        {station: result.series for station, result in results.items()}, tz=tz
    )
    output_dir = args.output_dir or exports_dir()
    filename = export_filename(parameter.safe_label, range_file_label(range_spec))
    if write_csv(rows, output_dir / filename) is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
