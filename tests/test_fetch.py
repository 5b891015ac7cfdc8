"""Tests for the REST fetch layer, using a stub session instead of the network."""

from __future__ import annotations

from datetime import date

import pytest
import requests

from agromet.fetch.station_records import (
    cache_records,
    fetch_live_measurements,
    fetch_live_series,
    fetch_multi_station_series,
    fetch_station_records,
    fetch_station_series,
    live_measurements_url,
    load_cached_records,
)
from agromet.schemas.query import CustomRange

BASE = "http://api.test/api"
LIVE = "http://live.test/api"


class _StubResponse:
    def __init__(self, payload, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class _StubSession:
    """Answers GETs from a handler and records every call."""

    def __init__(self, handler) -> None:
        self._handler = handler
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        return self._handler(url, params or {})


def _records_for(station: str) -> list[dict]:
    return [{"station": station, "year": 2024, "month": 1, "day1": 1.0, "day2": 2.0}]


class TestFetchStationRecords:
    def test_returns_data_list(self) -> None:
        session = _StubSession(
            lambda url, params: _StubResponse(
                {"success": True, "data": _records_for("Gazipur") + ["junk"]}
            )
        )
        records = fetch_station_records("Gazipur", "rainfall", base_url=BASE, session=session)

        assert records == _records_for("Gazipur")
        assert session.calls == [
            (f"{BASE}/rainfall", {"station": "Gazipur", "limit": 10000})
        ]

    def test_unsuccessful_payload_is_empty(self) -> None:
        session = _StubSession(lambda url, params: _StubResponse({"success": False, "data": []}))

        assert fetch_station_records("Gazipur", "rainfall", base_url=BASE, session=session) == []

    def test_http_error_raises(self) -> None:
        session = _StubSession(lambda url, params: _StubResponse({}, status=500))

        with pytest.raises(requests.HTTPError):
            fetch_station_records("Gazipur", "rainfall", base_url=BASE, session=session)

    def test_base_url_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("AGROMET_API_URL", "http://env.test/api/")
        session = _StubSession(lambda url, params: _StubResponse({"success": True, "data": []}))

        fetch_station_records("Gazipur", "sunshine", session=session)

        assert session.calls[0][0] == "http://env.test/api/sunshine"

    def test_station_series_is_expanded(self) -> None:
        session = _StubSession(
            lambda url, params: _StubResponse({"success": True, "data": _records_for("Gazipur")})
        )
        series = fetch_station_series("Gazipur", "rainfall", base_url=BASE, session=session)

        assert series["value"].tolist() == [1.0, 2.0]


class TestFetchMultiStation:
    def test_failed_station_gets_empty_series(self) -> None:
        def handler(url, params):
            if params["station"] == "Bad":
                raise requests.ConnectionError("unreachable")
            return _StubResponse({"success": True, "data": _records_for(params["station"])})

        result = fetch_multi_station_series(
            ["Gazipur", "Bad", "Rangpur"],
            "rainfall",
            base_url=BASE,
            session=_StubSession(handler),
            verbose=False,
        )

        assert list(result) == ["Gazipur", "Bad", "Rangpur"]
        assert result["Bad"].empty
        assert len(result["Rangpur"]) == 2


class TestFetchLive:
    def test_url_quotes_parameter_name(self) -> None:
        url = live_measurements_url(7, "Air Temperature", base_url=LIVE)

        assert url == f"{LIVE}/research-measures/station/7/parameter/Air%20Temperature"

    def test_custom_range_params(self) -> None:
        session = _StubSession(lambda url, params: _StubResponse([]))
        fetch_live_measurements(
            7,
            "Air Temperature",
            time_range="7D",
            custom_range=CustomRange(date(2024, 7, 1), date(2024, 7, 7)),
            interval_hours=3,
            base_url=LIVE,
            session=session,
        )

        assert session.calls[0][1] == {
            "startDate": "2024-07-01",
            "endDate": "2024-07-07",
            "interval": "3",
        }

    def test_time_range_param(self) -> None:
        session = _StubSession(lambda url, params: _StubResponse([]))
        fetch_live_measurements(7, "Air Temperature", time_range="7D", base_url=LIVE, session=session)

        assert session.calls[0][1] == {"timeRange": "7D"}

    def test_non_list_payload_is_empty(self) -> None:
        session = _StubSession(lambda url, params: _StubResponse({"error": "nope"}))

        assert fetch_live_measurements(7, "Air Temperature", base_url=LIVE, session=session) == []

    def test_live_series_parsed(self) -> None:
        payload = [
            {"date_value": "2024-07-01 10:00:00", "last_value": "30.1"},
            {"date_value": "2024-07-01 09:00:00", "last_value": "29.4"},
            {"date_value": "garbage", "last_value": "1"},
        ]
        session = _StubSession(lambda url, params: _StubResponse(payload))
        series = fetch_live_series(7, "Air Temperature", base_url=LIVE, session=session)

        assert series["value"].tolist() == [29.4, 30.1]


class TestRecordCache:
    def test_round_trip(self, tmp_path) -> None:
        records = _records_for("Gazipur")
        path = cache_records(records, tmp_path / "raw" / "records.json")

        assert load_cached_records(path) == records
        assert not (tmp_path / "raw" / "records.json.tmp").exists()

    def test_missing_cache_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="Record cache not found"):
            load_cached_records(tmp_path / "nope.json")
