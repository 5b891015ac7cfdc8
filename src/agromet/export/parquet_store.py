"""Persist series frames as parquet."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from agromet.schemas.series import SERIES_FIELDS, validate_series


def write_series(series: pd.DataFrame, output_path: Path | str, verbose: bool = True) -> Path:
    """Validate and write a series to parquet.

    Args:
        series: DataFrame with series schema
        output_path: Path to write parquet

    Returns:
        Path to written output file

    Raises:
        ValueError: If series fails schema validation
    """
    output_path = Path(output_path)

    validate_series(series)

    # Atomic write
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_suffix(".parquet.tmp")
    series[SERIES_FIELDS].to_parquet(tmp_path, index=False)
    tmp_path.replace(output_path)

    if verbose:
        print(f"[export] wrote {len(series)} points to {output_path}")
    return output_path


def read_series(input_path: Path | str) -> pd.DataFrame:
    """Read a series parquet file and check it against the schema.

    Raises:
        ValueError: If the file does not hold a valid series
    """
    series = pd.read_parquet(Path(input_path))
    validate_series(series)
    return series.reset_index(drop=True)
