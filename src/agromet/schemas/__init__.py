"""Schema definitions for the agromet pipeline.

This package defines the contract layer - what "valid data" looks like.
Nothing here should do work, only define structure.

Schemas:
- raw_record: Monthly day1..day31 records as the API returns them
- series: Canonical (ts_ms, value) time series and its summary stats
- query: Range, interval and chart query value objects
- parameters: Measured parameter catalog (labels, units, reducers)
- validate: Validation helpers and validators
"""

from agromet.schemas.parameters import (
    PARAMETERS,
    Parameter,
    default_reducer,
    get_parameter,
    summary_kind,
)
from agromet.schemas.query import (
    LOOKBACK_DAYS,
    NO_INTERVAL,
    ChartQuery,
    CustomRange,
    Interval,
    RangeSpec,
    RelativeRange,
)
from agromet.schemas.raw_record import (
    DAY_FIELDS,
    RawRecord,
    records_to_frame,
    validate_raw_records,
)
from agromet.schemas.series import (
    MS_PER_DAY,
    SERIES_FIELDS,
    StationStats,
    empty_series,
    make_series,
    validate_series,
)
from agromet.schemas.validate import (
    require_columns,
    require_dtypes,
    require_int_range,
    require_no_nulls,
    require_sorted,
    require_unique,
)

__all__ = [
    # Raw records
    "RawRecord",
    "DAY_FIELDS",
    "records_to_frame",
    "validate_raw_records",
    # Series
    "SERIES_FIELDS",
    "MS_PER_DAY",
    "StationStats",
    "empty_series",
    "make_series",
    "validate_series",
    # Query
    "RelativeRange",
    "CustomRange",
    "RangeSpec",
    "Interval",
    "NO_INTERVAL",
    "ChartQuery",
    "LOOKBACK_DAYS",
    # Parameters
    "Parameter",
    "PARAMETERS",
    "get_parameter",
    "default_reducer",
    "summary_kind",
    # Validation helpers
    "require_columns",
    "require_dtypes",
    "require_no_nulls",
    "require_unique",
    "require_int_range",
    "require_sorted",
]
