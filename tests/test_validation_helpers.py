"""Tests for validation helper functions."""

from __future__ import annotations

import pandas as pd
import pytest

from agromet.schemas.validate import (
    require_columns,
    require_dtypes,
    require_int_range,
    require_no_nulls,
    require_sorted,
    require_unique,
)


class TestRequireColumns:
    """Tests for require_columns helper."""

    def test_all_columns_present_passes(self) -> None:
        """Should pass when all required columns are present."""
        require_columns(["ts_ms", "value", "extra"], ["ts_ms", "value"])

    def test_missing_column_raises(self) -> None:
        """Should raise when required column is missing."""
        with pytest.raises(ValueError, match="Missing columns"):
            require_columns(["ts_ms"], ["ts_ms", "value"])

    def test_dataset_name_in_error(self) -> None:
        """Dataset name should appear in error message."""
        with pytest.raises(ValueError, match=r"\[series\]"):
            require_columns(["ts_ms"], ["ts_ms", "value"], dataset="series")


class TestRequireDtypes:
    """Tests for require_dtypes helper."""

    def test_matching_dtypes_pass(self) -> None:
        df = pd.DataFrame({"ts_ms": [1, 2], "value": [1.5, 2.5]})
        require_dtypes(df, {"ts_ms": "int", "value": "float"})

    def test_float_for_int_raises(self) -> None:
        df = pd.DataFrame({"ts_ms": [1.0, 2.0]})
        with pytest.raises(ValueError, match="Dtype mismatch"):
            require_dtypes(df, {"ts_ms": "int"})

    def test_numeric_accepts_int_and_float(self) -> None:
        df = pd.DataFrame({"a": [1, 2], "b": [1.5, 2.5]})
        require_dtypes(df, {"a": "numeric", "b": "numeric"})

    def test_bool_is_not_numeric(self) -> None:
        """Booleans are rejected even though pandas treats them as numeric."""
        df = pd.DataFrame({"value": [True, False]})
        with pytest.raises(ValueError, match="value: expected numeric"):
            require_dtypes(df, {"value": "numeric"})

    def test_missing_column_skipped(self) -> None:
        require_dtypes(pd.DataFrame({"a": [1]}), {"b": "int"})


class TestRequireNoNulls:
    """Tests for require_no_nulls helper."""

    def test_no_nulls_passes(self) -> None:
        """Should pass when no nulls in specified columns."""
        df = pd.DataFrame({"a": [1, 2, 3], "b": ["x", "y", "z"]})
        require_no_nulls(df, ["a", "b"])

    def test_null_raises(self) -> None:
        """Should raise when null found."""
        df = pd.DataFrame({"a": [1, None, 3]})
        with pytest.raises(ValueError, match="Null values"):
            require_no_nulls(df, ["a"])

    def test_includes_count(self) -> None:
        """Error message should include count of nulls."""
        df = pd.DataFrame({"a": [None, None, 3]})
        with pytest.raises(ValueError, match="2 rows"):
            require_no_nulls(df, ["a"])


class TestRequireUnique:
    """Tests for require_unique helper."""

    def test_unique_passes(self) -> None:
        df = pd.DataFrame({"station": ["A", "A"], "month": [1, 2]})
        require_unique(df, ["station", "month"])

    def test_duplicate_raises(self) -> None:
        df = pd.DataFrame({"station": ["A", "A"], "month": [1, 1]})
        with pytest.raises(ValueError, match="Duplicate keys"):
            require_unique(df, ["station", "month"])

    def test_empty_df_passes(self) -> None:
        require_unique(pd.DataFrame({"a": [], "b": []}), ["a", "b"])


class TestRequireIntRange:
    """Tests for require_int_range helper."""

    def test_in_range_passes(self) -> None:
        require_int_range(pd.DataFrame({"month": [1, 6, 12]}), "month", lo=1, hi=12)

    def test_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match="Out of range"):
            require_int_range(pd.DataFrame({"month": [0, 13]}), "month", lo=1, hi=12)

    def test_fractional_raises(self) -> None:
        """A fractional value is not an integer even when inside the bounds."""
        with pytest.raises(ValueError, match="must be an integer"):
            require_int_range(pd.DataFrame({"month": [2.5]}), "month", lo=1, hi=12)

    def test_allow_null(self) -> None:
        df = pd.DataFrame({"month": [1.0, None]})
        require_int_range(df, "month", lo=1, hi=12, allow_null=True)


class TestRequireSorted:
    """Tests for require_sorted helper."""

    def test_sorted_passes(self) -> None:
        """Equal neighbours are allowed."""
        require_sorted(pd.DataFrame({"ts_ms": [1, 2, 2, 5]}), "ts_ms")

    def test_unsorted_raises(self) -> None:
        df = pd.DataFrame({"ts_ms": [1, 3, 2, 5, 4]})
        with pytest.raises(ValueError, match=r"Not sorted.*\(2 rows\)"):
            require_sorted(df, "ts_ms")

    def test_single_row_passes(self) -> None:
        require_sorted(pd.DataFrame({"ts_ms": [7]}), "ts_ms")
