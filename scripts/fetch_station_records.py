"""CLI wrapper for fetching raw station records.

Usage:
    python scripts/fetch_station_records.py --station Gazipur --parameter rainfall

Writes the raw monthly records to:
    data/raw/records/<parameter>/<station>/records.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import requests

from agromet.config import api_base_url, raw_records_dir
from agromet.fetch.station_records import cache_records, fetch_station_records
from agromet.schemas.raw_record import validate_raw_records


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch raw monthly records for one station and parameter."
    )
    parser.add_argument("--station", required=True, help="Station name (e.g., Gazipur)")
    parser.add_argument("--parameter", required=True, help="Parameter key (e.g., rainfall)")
    parser.add_argument(
        "--base-url",
        default=None,
        help=f"Records API base URL (default: {api_base_url()})",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10000,
        help="Maximum monthly records to fetch (default: 10000)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output JSON path (default: data/raw/records/<parameter>/<station>/records.json)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject the payload if any record has a bad year/month or a duplicate month",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    output_path = args.output or raw_records_dir(args.parameter, args.station) / "records.json"

    print(f"[fetch] Fetching {args.parameter} records for {args.station}")
    try:
        records = fetch_station_records(
            args.station,
            args.parameter,
            base_url=args.base_url,
            limit=args.limit,
        )
    except requests.RequestException as exc:
        print(f"[fetch] ERROR: {exc}")
        sys.exit(1)

    if not records:
        print(f"[fetch] ERROR: No records returned for {args.station}/{args.parameter}")
        sys.exit(1)

    if args.strict:
        try:
            validate_raw_records(records)
        except ValueError as exc:
            print(f"[fetch] ERROR: {exc}")
            sys.exit(1)

    cache_records(records, output_path)
    print(f"[fetch] Wrote {len(records)} monthly records to {output_path}")


if __name__ == "__main__":
    main()
