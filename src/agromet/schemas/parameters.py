"""Catalog of measured parameters.

Keys are the path segments the records API uses (e.g. "rainfall").
Cumulative parameters are summed rather than averaged when bucketed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from agromet.schemas.series import Reducer

SummaryKind = Literal["temperature", "total", "average"]


@dataclass(frozen=True)
class Parameter:
    key: str
    label: str
    unit: str
    cumulative: bool = False

    @property
    def reducer(self) -> Reducer:
        return "sum" if self.cumulative else "mean"

    @property
    def safe_label(self) -> str:
        """Label with every non-alphanumeric character replaced, for filenames."""
        return "".join(ch if ch.isalnum() else "_" for ch in self.label)


PARAMETERS: dict[str, Parameter] = {
    p.key: p
    for p in [
        Parameter("maximum-temp", "Maximum Temperature", "°C"),
        Parameter("minimum-temp", "Minimum Temperature", "°C"),
        Parameter("rainfall", "Rainfall", "mm", cumulative=True),
        Parameter("relative-humidity", "Relative Humidity", "%"),
        Parameter("sunshine", "Sunshine Duration", "hrs"),
        Parameter("wind-speed", "Wind Speed", "m/s"),
        Parameter("soil-moisture", "Soil Moisture", "%"),
        Parameter("soil-temperature", "Soil Temperature", "°C"),
        Parameter("average-temperature", "Average Temperature", "°C"),
        Parameter("solar-radiation", "Solar Radiation", "W/m²"),
        Parameter("evapo-transpiration", "Evapo-Transpiration", "mm", cumulative=True),
    ]
}

# Live-station parameter names with a dedicated daily table layout
_LIVE_SUMMARY_KINDS: dict[str, SummaryKind] = {
    "Air Temperature": "temperature",
    "Accumulated Rain 1h": "total",
}


def get_parameter(key: str) -> Parameter:
    """Look up a parameter; unknown keys get a generic, averaged entry."""
    if key in PARAMETERS:
        return PARAMETERS[key]
    return Parameter(key=key, label=key, unit="")


def default_reducer(key: str) -> Reducer:
    return get_parameter(key).reducer


def summary_kind(name: str) -> SummaryKind:
    """Daily table layout for a parameter key or live-station parameter name."""
    if name in _LIVE_SUMMARY_KINDS:
        return _LIVE_SUMMARY_KINDS[name]
    if name in PARAMETERS and PARAMETERS[name].cumulative:
        return "total"
    return "average"
