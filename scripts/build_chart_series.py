"""CLI wrapper for building a chart series from cached raw records.

Usage:
    python scripts/build_chart_series.py --station Gazipur --parameter rainfall \
        --range 5Y --interval 1M

    python scripts/build_chart_series.py --station Gazipur --parameter maximum-temp \
        --range custom --start 2020-01-01 --end 2020-12-31 --interval 1W

This reads raw records from:
    data/raw/records/<parameter>/<station>/records.json

And writes the charted series to:
    data/clean/series/<parameter>/<station>.parquet
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from agromet.aggregate.query import is_interval_allowed, parse_interval, parse_range, run_query
from agromet.clean.expand_records import expand
from agromet.config import raw_records_dir, series_dir, station_timezone
from agromet.export.parquet_store import write_series
from agromet.fetch.station_records import load_cached_records
from agromet.schemas.parameters import get_parameter
from agromet.schemas.query import ChartQuery


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Filter and aggregate one station's records into a chart series."
    )
    parser.add_argument("--station", required=True, help="Station name (e.g., Gazipur)")
    parser.add_argument("--parameter", required=True, help="Parameter key (e.g., rainfall)")
    parser.add_argument(
        "--range",
        default="3M",
        help="Range label: 1M, 3M, 6M, 1Y, 5Y, 10Y, 20Y, 30Y, 50Y, All or custom (default: 3M)",
    )
    parser.add_argument("--start", default=None, help="Custom range start YYYY-MM-DD")
    parser.add_argument("--end", default=None, help="Custom range end YYYY-MM-DD")
    parser.add_argument(
        "--interval",
        default="none",
        help="Data average: none, 1W, 1M, 3M, 6M, 1Y, 5Y, 10Y, 20Y, 30Y or <n>H (default: none)",
    )
    parser.add_argument(
        "--anchor",
        choices=["latest", "now"],
        default="latest",
        help="Look back from the newest record (latest) or from today (now)",
    )
    parser.add_argument(
        "--tz",
        default=None,
        help=f"Station timezone (default: {station_timezone()})",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Raw records JSON (default: data/raw/records/<parameter>/<station>/records.json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output parquet (default: data/clean/series/<parameter>/<station>.parquet)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    input_path = args.input or raw_records_dir(args.parameter, args.station) / "records.json"
    output_path = args.output or series_dir(args.parameter) / f"{args.station}.parquet"
    tz = args.tz or station_timezone()

    if not input_path.exists():
        print(f"[aggregate] ERROR: No cached records at {input_path}")
        sys.exit(1)

    try:
        range_spec = parse_range(args.range, args.start, args.end)
    except ValueError as exc:
        print(f"[aggregate] ERROR: {exc}")
        sys.exit(1)

    parameter = get_parameter(args.parameter)
    query = ChartQuery(
        range=range_spec,
        interval=parse_interval(args.interval),
        reducer=parameter.reducer,
        anchor=args.anchor,
        tz=tz,
    )

    if not is_interval_allowed(query.range, query.interval):
        print(
            f"[aggregate] Warning: interval {args.interval} is more than half of range "
            f"{args.range}; expect fewer than two points"
        )

    records = load_cached_records(input_path)
    series = expand(records, tz=tz, verbose=True)
    result = run_query(series, query)

    print(f"[aggregate] {len(series)} points -> {len(result.series)} charted points")
    summary = result.stats.formatted(query.reducer)
    print(f"[aggregate] {parameter.label} ({parameter.unit}): {summary}")

    write_series(result.series, output_path)


if __name__ == "__main__":
    main()
