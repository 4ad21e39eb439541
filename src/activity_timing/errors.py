"""Usage errors raised by the activity tree."""

from __future__ import annotations

from typing import Optional


class TimingError(RuntimeError):
    """Base class for activity tree misuse."""

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        super().__init__(message)
        self.name = name


class UnmatchedEndError(TimingError):
    """``end(name)`` was called with no matching open activity."""


class UnclosedChildrenError(TimingError):
    """An activity was closed while some of its descendants were still open."""


class DuplicateOpenError(TimingError):
    """``start(name)`` was called while the current activity has the same name."""


class TreeFinalizedError(TimingError):
    """The root activity is closed and the tree no longer accepts changes."""


class TreeNotFinalizedError(TimingError):
    """A report was requested before the root activity was closed."""
