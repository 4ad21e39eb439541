"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "ActivityTiming"
APP_AUTHOR = "ActivityTiming"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)


def get_config_path() -> Path:
    """Return the default location of the timing configuration file."""
    return Path(_dirs().user_config_path) / "timing.json"


def get_report_dir() -> Path:
    path = Path(_dirs().user_data_path) / "reports"
    path.mkdir(parents=True, exist_ok=True)
    return path
