"""Tree builder that turns start/end calls into an activity tree.

A :class:`Marker` owns one root activity, started at construction, and a
stack of currently open activities. ``start`` pushes a new child of the
innermost open activity, ``end(name)`` pops it again, and ``end()`` closes the
root and freezes the tree.

A marker must only be driven from one thread at a time; it does no locking.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .clock import Clock, monotonic_ms
from .errors import (
    DuplicateOpenError,
    TreeFinalizedError,
    UnclosedChildrenError,
    UnmatchedEndError,
)
from .models import ActivityNode

logger = logging.getLogger(__name__)


class Marker:
    """Stateful handle used to demarcate nested activities."""

    def __init__(self, name: str, clock: Optional[Clock] = None) -> None:
        _check_name(name)
        self._clock: Clock = clock or monotonic_ms
        self._root = ActivityNode(name=name, start_time=self._clock())
        self._stack: list[ActivityNode] = [self._root]

    @property
    def name(self) -> str:
        return self._root.name

    @property
    def root(self) -> ActivityNode:
        return self._root

    @property
    def is_finalized(self) -> bool:
        return not self._root.is_open

    @property
    def open_names(self) -> list[str]:
        return [node.name for node in self._stack]

    def start(self, name: str) -> ActivityNode:
        """Open a child activity under the innermost open activity."""
        _check_name(name)
        self._ensure_open()
        current = self._stack[-1]
        if current.name == name:
            raise DuplicateOpenError(
                f"Activity {name!r} is already open in this scope", name
            )
        node = ActivityNode(name=name, start_time=self._clock(), parent=current)
        current.children.append(node)
        self._stack.append(node)
        return node

    def end(self, name: Optional[str] = None) -> ActivityNode:
        """Close the named activity, or the root when no name is given."""
        self._ensure_open()
        if name is None:
            return self._end_root()

        current = self._stack[-1]
        if len(self._stack) > 1 and current.name == name:
            current.end_time = self._clock()
            self._stack.pop()
            return current

        if any(node.name == name for node in self._stack[1:]):
            raise UnclosedChildrenError(
                f"Cannot end {name!r} while {current.name!r} is still open", name
            )
        raise UnmatchedEndError(f"No open activity named {name!r}", name)

    @contextmanager
    def activity(self, name: str) -> Iterator[ActivityNode]:
        """Time the enclosed block as a child activity called ``name``."""
        node = self.start(name)
        try:
            yield node
        finally:
            if self._stack and self._stack[-1] is node:
                self.end(name)

    def _end_root(self) -> ActivityNode:
        if len(self._stack) > 1:
            raise UnclosedChildrenError(
                f"Cannot end {self._root.name!r}; still open: "
                + ", ".join(repr(node.name) for node in self._stack[1:]),
                self._stack[-1].name,
            )
        self._root.end_time = self._clock()
        self._stack.clear()
        logger.debug(
            "Marker %r finalized after %.3f ms", self._root.name, self._root.duration
        )
        return self._root

    def _ensure_open(self) -> None:
        if self._root.end_time is not None:
            raise TreeFinalizedError(
                f"Marker {self._root.name!r} is finalized", self._root.name
            )


def create_marker(name: str, clock: Optional[Clock] = None) -> Marker:
    """Create a marker whose root activity starts timing immediately."""
    return Marker(name, clock=clock)


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError("activity name must be a non-empty string")
