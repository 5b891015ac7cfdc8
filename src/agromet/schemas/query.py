"""Range, interval and chart query value objects.

These are the only inputs the aggregation engine takes besides the series
itself. All of them are frozen (hashable), so a ChartQuery can key a cache.

Constructing one with an unknown unit or interval raises ValueError: that is
a caller bug, unlike bad data, which the engine drops silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Union

from agromet.schemas.series import Reducer

RangeUnit = Literal[
    "day",
    "week",
    "month",
    "3month",
    "6month",
    "1year",
    "5year",
    "10year",
    "20year",
    "30year",
    "50year",
    "all",
]

# Lookback in days for each relative range unit ("all" has no lookback)
LOOKBACK_DAYS: dict[str, int] = {
    "day": 1,
    "week": 7,
    "month": 30,
    "3month": 90,
    "6month": 180,
    "1year": 365,
    "5year": 1825,
    "10year": 3650,
    "20year": 7300,
    "30year": 10950,
    "50year": 18250,
}

RANGE_UNITS = tuple(LOOKBACK_DAYS) + ("all",)

IntervalKind = Literal["none", "hours", "week", "month", "year"]

MONTH_INTERVALS = (1, 3, 6)
YEAR_INTERVALS = (12, 60, 120, 240, 360)  # months: 1, 5, 10, 20, 30 years

Anchor = Literal["latest", "now"]


@dataclass(frozen=True)
class RelativeRange:
    """Look back a fixed number of days from an anchor timestamp."""

    unit: RangeUnit = "3month"

    def __post_init__(self) -> None:
        if self.unit not in RANGE_UNITS:
            raise ValueError(
                f"Unknown range unit {self.unit!r}, expected one of {list(RANGE_UNITS)}"
            )

    @property
    def lookback_days(self) -> int | None:
        """Days to look back, or None for "all"."""
        return LOOKBACK_DAYS.get(self.unit)


@dataclass(frozen=True)
class CustomRange:
    """Inclusive calendar range; end extends to 23:59:59.999 local time."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Custom range end {self.end} is before start {self.start}")

    @property
    def span_days(self) -> int:
        return (self.end - self.start).days + 1


RangeSpec = Union[RelativeRange, CustomRange]


@dataclass(frozen=True)
class Interval:
    """Re-aggregation granularity.

    Attributes:
        kind: "none", "hours", "week", "month" or "year"
        n: hours for kind="hours"; months for kind="month" (1, 3, 6) and
            kind="year" (12, 60, 120, 240, 360); ignored otherwise
    """

    kind: IntervalKind = "none"
    n: int = 1

    def __post_init__(self) -> None:
        if self.kind == "hours":
            if self.n < 1:
                raise ValueError(f"Hour interval must be >= 1, got {self.n}")
        elif self.kind == "month":
            if self.n not in MONTH_INTERVALS:
                raise ValueError(
                    f"Month interval must be one of {MONTH_INTERVALS}, got {self.n}"
                )
        elif self.kind == "year":
            if self.n not in YEAR_INTERVALS:
                raise ValueError(
                    f"Year interval must be one of {YEAR_INTERVALS} months, got {self.n}"
                )
        elif self.kind in ("none", "week"):
            # n carries no meaning here; normalise so equal intervals hash equal
            object.__setattr__(self, "n", 1)
        else:
            raise ValueError(f"Unknown interval kind {self.kind!r}")

    @property
    def years(self) -> int:
        """Years per bucket for kind="year"."""
        return self.n // 12


NO_INTERVAL = Interval()


@dataclass(frozen=True)
class ChartQuery:
    """Everything a chart needs to turn a raw series into what it draws.

    Attributes:
        range: Time window to keep
        interval: Re-aggregation granularity (default: none)
        reducer: How buckets collapse, "mean" or "sum" for cumulative quantities
        anchor: Relative ranges look back from the last point ("latest") or
            from the wall clock ("now")
        tz: Station timezone for every calendar computation
    """

    range: RangeSpec = field(default_factory=RelativeRange)
    interval: Interval = NO_INTERVAL
    reducer: Reducer = "mean"
    anchor: Anchor = "latest"
    tz: str = "UTC"

    def __post_init__(self) -> None:
        if self.reducer not in ("mean", "sum"):
            raise ValueError(f"Unknown reducer {self.reducer!r}")
        if self.anchor not in ("latest", "now"):
            raise ValueError(f"Unknown anchor {self.anchor!r}")
