"""Monotonic clock used to timestamp activities."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Return a monotonic timestamp in fractional milliseconds."""
    return time.perf_counter() * 1000.0
