"""Configuration settings for the agromet pipeline."""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_API_BASE_URL = "http://localhost:5000/api"
DEFAULT_LIVE_API_BASE_URL = "https://saads.brri.gov.bd/api"
DEFAULT_STATION_TZ = "Asia/Dhaka"


def project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def data_root() -> Path:
    return project_root() / "data"


def raw_records_dir(parameter: str, station: str) -> Path:
    return data_root() / "raw" / "records" / parameter / station


def series_dir(parameter: str) -> Path:
    return data_root() / "clean" / "series" / parameter


def exports_dir() -> Path:
    return data_root() / "exports"


def api_base_url() -> str:
    """Base URL of the historical-records REST API (no trailing slash)."""
    return os.environ.get("AGROMET_API_URL", DEFAULT_API_BASE_URL).rstrip("/")


def live_api_base_url() -> str:
    """Base URL of the live-station measurements API (no trailing slash)."""
    return os.environ.get("AGROMET_LIVE_API_URL", DEFAULT_LIVE_API_BASE_URL).rstrip("/")


def station_timezone() -> str:
    return os.environ.get("AGROMET_TZ", DEFAULT_STATION_TZ)
