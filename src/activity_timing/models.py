"""Domain models for recorded activities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True, eq=False)
class ActivityNode:
    """One timed occurrence of a named unit of work."""

    name: str
    start_time: float
    end_time: Optional[float] = None
    children: list["ActivityNode"] = field(default_factory=list)
    parent: Optional["ActivityNode"] = field(default=None, repr=False)

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def duration(self) -> float:
        """Elapsed milliseconds; raises ``ValueError`` while the activity is open."""
        if self.end_time is None:
            raise ValueError(f"Activity {self.name!r} is still open")
        return self.end_time - self.start_time

    @property
    def hidden_time(self) -> float:
        """Time not accounted for by direct children; may be negative."""
        return self.duration - sum(child.duration for child in self.children)


@dataclass(frozen=True, slots=True)
class Summary:
    """Statistics for all direct-child occurrences sharing one name."""

    name: str
    count: int
    total: float
    avg: float
    max: float
    min: float
