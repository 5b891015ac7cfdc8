"""Main script to run the data pipeline for one station and parameter.

Pipeline flow:
    fetch_station_records -> expand -> filter_by_range -> aggregate -> export
"""

from __future__ import annotations

import argparse
from pathlib import Path

from agromet.aggregate.query import parse_interval, parse_range, run_query
from agromet.clean.expand_records import expand
from agromet.config import station_timezone
from agromet.export.csv_writer import export_filename, range_file_label, series_csv_rows, write_csv
from agromet.export.parquet_store import write_series
from agromet.fetch.station_records import cache_records, fetch_station_records
from agromet.schemas.parameters import get_parameter
from agromet.schemas.query import ChartQuery


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run agromet data pipeline.")
    parser.add_argument("--station", required=True, help="Station name, e.g. Gazipur")
    parser.add_argument("--parameter", required=True, help="Parameter key, e.g. rainfall")
    parser.add_argument("--range", default="1Y", help="Range label (default: 1Y)")
    parser.add_argument("--interval", default="1M", help="Data average label (default: 1M)")
    parser.add_argument("--base-url", default=None, help="Records API base URL")
    parser.add_argument("--tz", default=None, help="Station timezone")
    parser.add_argument(
        "--data-dir",
        default="data",
        help="Base data directory (default: data)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    data_dir = Path(args.data_dir)
    tz = args.tz or station_timezone()
    parameter = get_parameter(args.parameter)

    # Stage 1: Fetch raw records
    print(f"[pipeline] Fetching {parameter.label} for {args.station}")
    records = fetch_station_records(args.station, args.parameter, base_url=args.base_url)
    raw_path = data_dir / "raw" / "records" / args.parameter / args.station / "records.json"
    cache_records(records, raw_path)
    print(f"[pipeline] Fetched {len(records)} monthly records")

    # Stage 2: Expand to a daily series
    series = expand(records, tz=tz, verbose=True)
    if series.empty:
        print("[pipeline] No data available")
        return

    # Stage 3: Filter and aggregate
    query = ChartQuery(
        range=parse_range(args.range),
        interval=parse_interval(args.interval),
        reducer=parameter.reducer,
        tz=tz,
    )
    result = run_query(series, query)
    print(f"[pipeline] {len(result.series)} charted points, stats {result.stats.formatted(query.reducer)}")

    # Stage 4: Persist and export
    series_path = data_dir / "clean" / "series" / args.parameter / f"{args.station}.parquet"
    write_series(result.series, series_path)

    header = f"{parameter.label} ({parameter.unit})"
    title = f"{parameter.label} {args.station}"
    csv_path = data_dir / "exports" / export_filename(title, range_file_label(query.range))
    write_csv(series_csv_rows(result.series, header, tz=tz), csv_path)


if __name__ == "__main__":
    main()
