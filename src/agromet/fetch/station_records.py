"""Fetch station records from the climate REST APIs.

Two sources:
- Historical records API: GET {base}/{parameter}?station=...&limit=...
  returns {"success": true, "data": [RawRecord, ...]}
- Live-station API: GET {live}/research-measures/station/{id}/parameter/{name}
  returns [{"date_value": ..., "last_value": ...}, ...]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import quote

import pandas as pd
import requests

from agromet.clean.expand_records import expand, expand_measurements
from agromet.config import api_base_url, live_api_base_url
from agromet.schemas.query import CustomRange
from agromet.schemas.series import empty_series

DEFAULT_LIMIT = 10000
DEFAULT_TIMEOUT = 60


def station_records_url(parameter: str, base_url: str | None = None) -> str:
    base = (base_url or api_base_url()).rstrip("/")
    return f"{base}/{parameter}"


def live_measurements_url(
    station_id: str | int,
    parameter: str,
    base_url: str | None = None,
) -> str:
    base = (base_url or live_api_base_url()).rstrip("/")
    return (
        f"{base}/research-measures/station/{quote(str(station_id), safe='')}"
        f"/parameter/{quote(parameter, safe='')}"
    )


def fetch_station_records(
    station: str,
    parameter: str,
    base_url: str | None = None,
    limit: int = DEFAULT_LIMIT,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[dict[str, Any]]:
    """Fetch all monthly raw records for one station and parameter.

    Args:
        station: Station name or identifier
        parameter: Parameter key (e.g. "rainfall")
        base_url: Records API base URL (default from config)
        limit: Maximum number of monthly records
        session: Optional requests session (default: module-level requests)
        timeout: Request timeout in seconds

    Returns:
        List of raw record dicts; empty if the API reports no success or no data

    Raises:
        requests.HTTPError: If the API responds with an error status
    """
    http = session if session is not None else requests
    response = http.get(
        station_records_url(parameter, base_url),
        params={"station": station, "limit": limit},
        timeout=timeout,
    )
    response.raise_for_status()
    payload = response.json()

    if not isinstance(payload, dict) or not payload.get("success"):
        return []
    data = payload.get("data") or []
    return [record for record in data if isinstance(record, dict)]


def fetch_station_series(
    station: str,
    parameter: str,
    tz: str = "UTC",
    base_url: str | None = None,
    limit: int = DEFAULT_LIMIT,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> pd.DataFrame:
    """Fetch one station's records and expand them to a daily series."""
    records = fetch_station_records(
        station,
        parameter,
        base_url=base_url,
        limit=limit,
        session=session,
        timeout=timeout,
    )
    return expand(records, tz=tz)


def fetch_multi_station_series(
    stations: Iterable[str],
    parameter: str,
    tz: str = "UTC",
    base_url: str | None = None,
    limit: int = DEFAULT_LIMIT,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    verbose: bool = True,
) -> dict[str, pd.DataFrame]:
    """Fetch and expand one parameter for several stations.

    A station whose request fails gets an empty series; the others are
    still fetched.

    Returns:
        Dict of station -> series, in the order the stations were given
    """
    stations = list(stations)
    result: dict[str, pd.DataFrame] = {}
    for station in stations:
        try:
            result[station] = fetch_station_series(
                station,
                parameter,
                tz=tz,
                base_url=base_url,
                limit=limit,
                session=session,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            print(f"[fetch] ERROR: {parameter} for {station}: {exc}")
            result[station] = empty_series()

    if verbose:
        with_data = sum(1 for series in result.values() if not series.empty)
        print(f"[fetch] {with_data}/{len(stations)} stations have data for {parameter}")

    return result


def fetch_live_measurements(
    station_id: str | int,
    parameter: str,
    time_range: str | None = None,
    custom_range: CustomRange | None = None,
    interval_hours: int | None = None,
    base_url: str | None = None,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[dict[str, Any]]:
    """Fetch live readings for one station parameter.

    The live API filters server-side: a custom range wins over a range
    label, and interval_hours asks the server to thin the readings.

    Raises:
        requests.HTTPError: If the API responds with an error status
    """
    params: dict[str, Any] = {}
    if custom_range is not None:
        params["startDate"] = custom_range.start.isoformat()
        params["endDate"] = custom_range.end.isoformat()
    elif time_range and time_range != "custom":
        params["timeRange"] = time_range
    if interval_hours is not None:
        params["interval"] = str(interval_hours)

    http = session if session is not None else requests
    response = http.get(
        live_measurements_url(station_id, parameter, base_url),
        params=params,
        timeout=timeout,
    )
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


def fetch_live_series(
    station_id: str | int,
    parameter: str,
    tz: str = "UTC",
    **kwargs: Any,
) -> pd.DataFrame:
    """Fetch live readings and parse them into a series."""
    return expand_measurements(fetch_live_measurements(station_id, parameter, **kwargs), tz=tz)


def cache_records(records: list[dict[str, Any]], path: Path | str) -> Path:
    """Write raw records to a JSON cache file atomically.

    Returns:
        Path to written cache file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".json.tmp")
    with tmp_path.open("w", encoding="utf-8") as handle:
        json.dump(records, handle)
    tmp_path.replace(path)
    return path


def load_cached_records(path: Path | str) -> list[dict[str, Any]]:
    """Read raw records from a JSON cache file.

    Raises:
        FileNotFoundError: If the cache file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Record cache not found: {path}")
    with path.open(encoding="utf-8") as handle:
        data = json.load(handle)
    return [record for record in data if isinstance(record, dict)]
