"""Configuration models and helpers for activity timing."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

FailureMode = Literal["silent", "raise"]
ReportFormat = Literal["text", "xml"]


class ConfigError(ValueError):
    """The configuration file could not be read or validated."""


@dataclass(slots=True)
class TimingSettings:
    """Runtime switches consulted around every marker call."""

    enabled: bool = True
    failure_mode: FailureMode = "silent"
    report_format: ReportFormat = "text"
    report_dir: Optional[Path] = None

    @classmethod
    def from_file(cls, path: Path) -> "TimingSettings":
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc
        try:
            payload = SettingsPayload.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings in {path}: {exc}") from exc
        return payload.to_settings()

    def to_payload(self) -> dict:
        return {
            "enabled": self.enabled,
            "failure_mode": self.failure_mode,
            "report_format": self.report_format,
            "report_dir": str(self.report_dir) if self.report_dir else None,
        }


class SettingsPayload(BaseModel):
    enabled: bool = True
    failure_mode: FailureMode = "silent"
    report_format: ReportFormat = "text"
    report_dir: Optional[Path] = None

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> TimingSettings:
        return TimingSettings(
            enabled=self.enabled,
            failure_mode=self.failure_mode,
            report_format=self.report_format,
            report_dir=self.report_dir,
        )


class SettingsSource:
    """File-backed settings that are reloaded when the file changes."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._settings: Optional[TimingSettings] = None
        self._mtime: Optional[float] = None

    def current(self) -> TimingSettings:
        mtime = self._stat_mtime()
        if self._settings is not None and mtime == self._mtime:
            return self._settings

        if mtime is None:
            settings = TimingSettings()
        else:
            try:
                settings = TimingSettings.from_file(self.path)
            except ConfigError:
                if self._settings is None:
                    raise
                logger.warning(
                    "Ignoring invalid settings in %s; keeping previous values.",
                    self.path,
                    exc_info=True,
                )
                self._mtime = mtime
                return self._settings

        if self._settings is not None:
            logger.debug("Reloaded settings from %s", self.path)
        self._settings = settings
        self._mtime = mtime
        return settings

    def _stat_mtime(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None
