"""Nested activity timing with aggregated reports.

Usage::

    from activity_timing import create_marker, render_text

    marker = create_marker("App")
    marker.start("Query")
    ...
    marker.end("Query")
    print(render_text(marker.end()))
"""

from .aggregation import summarize
from .config import ConfigError, SettingsSource, TimingSettings
from .errors import (
    DuplicateOpenError,
    TimingError,
    TreeFinalizedError,
    TreeNotFinalizedError,
    UnclosedChildrenError,
    UnmatchedEndError,
)
from .marker import Marker, create_marker
from .models import ActivityNode, Summary
from .policy import GuardedMarker, Timing
from .reporting import render_structured, render_text, write_structured, write_text

__all__ = [
    "ActivityNode",
    "ConfigError",
    "DuplicateOpenError",
    "GuardedMarker",
    "Marker",
    "SettingsSource",
    "Summary",
    "Timing",
    "TimingError",
    "TimingSettings",
    "TreeFinalizedError",
    "TreeNotFinalizedError",
    "UnclosedChildrenError",
    "UnmatchedEndError",
    "create_marker",
    "render_structured",
    "render_text",
    "summarize",
    "write_structured",
    "write_text",
]
