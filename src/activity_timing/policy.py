"""Enablement gate and failure-mode policy around the activity tree."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

from .clock import Clock
from .config import ReportFormat, SettingsSource, TimingSettings
from .errors import TimingError
from .marker import Marker
from .models import ActivityNode
from .paths import get_report_dir
from .reporting import render_structured, render_text

logger = logging.getLogger(__name__)

_SUFFIXES = {"text": ".txt", "xml": ".xml"}


class Timing:
    """Entry point that consults settings before touching the core."""

    def __init__(
        self,
        source: Union[SettingsSource, TimingSettings, None] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self._source = source if source is not None else TimingSettings()
        self._clock = clock

    @property
    def settings(self) -> TimingSettings:
        if isinstance(self._source, SettingsSource):
            return self._source.current()
        return self._source

    def is_enabled(self) -> bool:
        return self.settings.enabled

    def marker(self, name: str) -> "GuardedMarker":
        settings = self.settings
        if not settings.enabled:
            return GuardedMarker(None, settings)
        return GuardedMarker(Marker(name, clock=self._clock), settings)


class GuardedMarker:
    """Marker wrapper applying the configured failure mode to each call."""

    def __init__(self, marker: Optional[Marker], settings: TimingSettings) -> None:
        self._marker = marker
        self._settings = settings

    @property
    def active(self) -> bool:
        return self._marker is not None

    @property
    def root(self) -> Optional[ActivityNode]:
        return self._marker.root if self._marker else None

    def start(self, name: str) -> Optional[ActivityNode]:
        """Open ``name``; returns ``None`` when disabled or the call was rejected."""
        if self._marker is None:
            return None
        return _apply_policy(self._settings, lambda: self._marker.start(name))

    def end(self, name: Optional[str] = None) -> None:
        if self._marker is not None:
            _apply_policy(self._settings, lambda: self._marker.end(name))

    @contextmanager
    def activity(self, name: str) -> Iterator[None]:
        node = self.start(name)
        try:
            yield
        finally:
            if node is not None and node.is_open:
                self.end(name)

    def report(self, fmt: Optional[ReportFormat] = None) -> Optional[str]:
        if self._marker is None:
            return None
        fmt = _resolve_format(fmt, self._settings)
        render = render_structured if fmt == "xml" else render_text
        return _apply_policy(self._settings, lambda: render(self._marker.root))

    def write_report(
        self, target: Optional[Path] = None, fmt: Optional[ReportFormat] = None
    ) -> Optional[Path]:
        """Write the report to ``target`` or a timestamped file in the report dir."""
        fmt = _resolve_format(fmt, self._settings)
        content = self.report(fmt)
        if content is None:
            return None
        if target is None:
            report_dir = self._settings.report_dir or get_report_dir()
            report_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
            target = report_dir / f"{self._marker.name}-{stamp}{_SUFFIXES[fmt]}"
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.info("Wrote %s report to %s", fmt, target)
        return target


def _apply_policy(settings: TimingSettings, call):
    try:
        return call()
    except TimingError as exc:
        if settings.failure_mode == "raise":
            raise
        logger.warning("Ignoring timing error: %s", exc)
        return None


def _resolve_format(fmt: Optional[str], settings: TimingSettings) -> ReportFormat:
    fmt = fmt or settings.report_format
    if fmt not in _SUFFIXES:
        raise ValueError(f"Unknown report format: {fmt!r}")
    return fmt
