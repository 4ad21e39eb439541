"""Grouping of sibling activities into summary statistics."""

from __future__ import annotations

from typing import Iterable

from .models import ActivityNode, Summary


def summarize(children: Iterable[ActivityNode]) -> list[Summary]:
    """Group ``children`` by name, in order of first occurrence."""
    groups: dict[str, list[float]] = {}
    for child in children:
        groups.setdefault(child.name, []).append(child.duration)

    summaries: list[Summary] = []
    for name, durations in groups.items():
        total = sum(durations)
        count = len(durations)
        summaries.append(
            Summary(
                name=name,
                count=count,
                total=total,
                avg=total / count,
                max=max(durations),
                min=min(durations),
            )
        )
    return summaries
