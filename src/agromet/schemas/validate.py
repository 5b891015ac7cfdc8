"""Validation helpers for schema enforcement.

These helpers ensure DataFrames conform to expected schemas.
All helpers raise ValueError with actionable messages including:
- Dataset name (if provided)
- Offending columns
- Count of failing rows
- Sample of failing row indices (first 5)

They are meant for write/persist boundaries. The aggregation engine itself
never raises on bad data; it drops what it cannot use.
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd


def _format_error(
    dataset: str | None,
    rule: str,
    detail: str,
    failing_indices: list[Any] | None = None,
    count: int | None = None,
) -> str:
    """Format a validation error message consistently."""
    parts = []
    if dataset:
        parts.append(f"[{dataset}]")
    parts.append(rule)
    parts.append(f": {detail}")
    if count is not None:
        parts.append(f" ({count} rows)")
    if failing_indices:
        sample = failing_indices[:5]
        parts.append(f" | sample indices: {sample}")
    return "".join(parts)


def require_columns(
    df_columns: Iterable[str],
    required: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if required columns are missing.

    Args:
        df_columns: Column names from a DataFrame (e.g., df.columns)
        required: Required column names
        dataset: Optional dataset name for error messages

    Raises:
        ValueError: If any required columns are missing
    """
    missing = set(required) - set(df_columns)
    if missing:
        raise ValueError(
            _format_error(dataset, "Missing columns", f"{sorted(missing)}")
        )


def require_dtypes(
    df: pd.DataFrame,
    expected: dict[str, str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if columns have unexpected dtype kinds.

    Expected kinds are "int", "float" or "numeric" (int or float).

    Args:
        df: DataFrame to check
        expected: Dict mapping column names to expected dtype kind
        dataset: Optional dataset name for error messages

    Raises:
        ValueError: If any columns have incompatible dtypes
    """
    checks = {
        "int": pd.api.types.is_integer_dtype,
        "float": pd.api.types.is_float_dtype,
        "numeric": pd.api.types.is_numeric_dtype,
    }
    mismatches = []
    for col, kind in expected.items():
        if col not in df.columns:
            continue  # Let require_columns handle missing columns
        actual = df[col].dtype
        # Booleans count as numeric in pandas, never as values here
        if pd.api.types.is_bool_dtype(actual) or not checks[kind](actual):
            mismatches.append(f"{col}: expected {kind}, got {actual}")

    if mismatches:
        raise ValueError(
            _format_error(dataset, "Dtype mismatch", "; ".join(mismatches))
        )


def require_no_nulls(
    df: pd.DataFrame,
    cols: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if specified columns contain null values.

    Args:
        df: DataFrame to check
        cols: Column names that must not have nulls
        dataset: Optional dataset name for error messages

    Raises:
        ValueError: If any specified columns have null values
    """
    for col in cols:
        if col not in df.columns:
            continue  # Let require_columns handle missing columns

        null_mask = df[col].isna()
        null_count = int(null_mask.sum())
        if null_count > 0:
            failing_indices = df.index[null_mask].tolist()
            raise ValueError(
                _format_error(
                    dataset,
                    "Null values",
                    f"column '{col}' has nulls",
                    failing_indices,
                    null_count,
                )
            )


def require_unique(
    df: pd.DataFrame,
    key_cols: list[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if key columns have duplicate combinations.

    Args:
        df: DataFrame to check
        key_cols: Column names that form a unique key
        dataset: Optional dataset name for error messages

    Raises:
        ValueError: If duplicate key combinations exist
    """
    if df.empty:
        return

    for col in key_cols:
        if col not in df.columns:
            return  # Let require_columns handle missing columns

    dup_mask = df.duplicated(subset=key_cols, keep=False)
    dup_count = int(dup_mask.sum())
    if dup_count > 0:
        failing_indices = df.index[dup_mask].tolist()
        raise ValueError(
            _format_error(
                dataset,
                "Duplicate keys",
                f"columns {key_cols} have duplicates",
                failing_indices,
                dup_count,
            )
        )


def require_int_range(
    df: pd.DataFrame,
    col: str,
    lo: int,
    hi: int,
    allow_null: bool = False,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if integer values are outside the specified range.

    Args:
        df: DataFrame to check
        col: Column name to check
        lo: Minimum allowed value (inclusive)
        hi: Maximum allowed value (inclusive)
        allow_null: If True, null values are allowed
        dataset: Optional dataset name for error messages

    Raises:
        ValueError: If values are outside range or not integer-like
    """
    if col not in df.columns:
        return  # Let require_columns handle missing columns

    if df.empty:
        return

    series = df[col]
    if allow_null:
        series = series.dropna()

    not_integral = (series % 1) != 0
    out_of_range = (series < lo) | (series > hi) | not_integral
    bad_count = int(out_of_range.sum())
    if bad_count > 0:
        failing_indices = series.index[out_of_range].tolist()
        raise ValueError(
            _format_error(
                dataset,
                "Out of range",
                f"column '{col}' must be an integer in [{lo}, {hi}]",
                failing_indices,
                bad_count,
            )
        )


def require_sorted(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if a column is not non-decreasing.

    Args:
        df: DataFrame to check
        col: Column that must be sorted ascending
        dataset: Optional dataset name for error messages

    Raises:
        ValueError: If any row is smaller than its predecessor
    """
    if col not in df.columns:
        return  # Let require_columns handle missing columns

    if len(df) < 2:
        return

    backwards = df[col].diff() < 0
    bad_count = int(backwards.sum())
    if bad_count > 0:
        failing_indices = df.index[backwards].tolist()
        raise ValueError(
            _format_error(
                dataset,
                "Not sorted",
                f"column '{col}' must be non-decreasing",
                failing_indices,
                bad_count,
            )
        )
