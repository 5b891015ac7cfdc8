"""Tests for environment-driven configuration."""

from __future__ import annotations

from agromet import config


def test_defaults(monkeypatch) -> None:
    for name in ("AGROMET_API_URL", "AGROMET_LIVE_API_URL", "AGROMET_TZ"):
        monkeypatch.delenv(name, raising=False)

    assert config.api_base_url() == config.DEFAULT_API_BASE_URL
    assert config.live_api_base_url() == config.DEFAULT_LIVE_API_BASE_URL
    assert config.station_timezone() == "Asia/Dhaka"


def test_overrides_strip_trailing_slash(monkeypatch) -> None:
    monkeypatch.setenv("AGROMET_LIVE_API_URL", "https://live.example/api/")
    monkeypatch.setenv("AGROMET_TZ", "UTC")

    assert config.live_api_base_url() == "https://live.example/api"
    assert config.station_timezone() == "UTC"


def test_data_paths() -> None:
    root = config.data_root()

    assert config.raw_records_dir("rainfall", "Gazipur") == root / "raw" / "records" / "rainfall" / "Gazipur"
    assert config.series_dir("rainfall") == root / "clean" / "series" / "rainfall"
    assert config.exports_dir() == root / "exports"
