"""Rendering of finished activity trees as text or XML reports.

Both formats share :func:`walk`, which computes totals, hidden time and
summaries; the emitters only decide how those values are written out.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Callable, Protocol, TextIO
from xml.sax.saxutils import quoteattr

from .aggregation import summarize
from .errors import TreeNotFinalizedError
from .formatting import format_avg, format_ms
from .models import ActivityNode, Summary

Write = Callable[[str], object]

INDENT = "  "


class ReportEmitter(Protocol):
    def header(self, node: ActivityNode, depth: int) -> None: ...

    def summaries(self, summaries: list[Summary], depth: int) -> None: ...

    def open_subtrees(self, count: int, depth: int) -> None: ...

    def close_subtrees(self, count: int, depth: int) -> None: ...

    def footer(self, node: ActivityNode, depth: int) -> None: ...


def walk(root: ActivityNode, emitter: ReportEmitter) -> None:
    """Drive ``emitter`` over a finished tree."""
    if root.is_open:
        raise TreeNotFinalizedError(
            f"Activity {root.name!r} has not been ended", root.name
        )
    _walk(root, emitter, 0)


def _walk(node: ActivityNode, emitter: ReportEmitter, depth: int) -> None:
    emitter.header(node, depth)
    emitter.summaries(summarize(node.children), depth)
    subtrees = [child for child in node.children if child.has_children]
    emitter.open_subtrees(len(subtrees), depth)
    for child in subtrees:
        _walk(child, emitter, depth + 1)
    emitter.close_subtrees(len(subtrees), depth)
    emitter.footer(node, depth)


class TextEmitter:
    """Indented plain-text report, one line per activity or summary."""

    def __init__(self, write: Write) -> None:
        self._write = write

    def header(self, node: ActivityNode, depth: int) -> None:
        self._write(
            f"{INDENT * depth}{node.name} [total: {format_ms(node.duration)} ms; "
            f"hidden: {format_ms(node.hidden_time)} ms]\n"
        )

    def summaries(self, summaries: list[Summary], depth: int) -> None:
        pad = INDENT * (depth + 1)
        for s in summaries:
            self._write(
                f"{pad}+ {s.name} [count: {s.count}; total: {format_ms(s.total)} ms; "
                f"avg: {format_avg(s.avg)}; max: {format_ms(s.max)}; "
                f"min: {format_ms(s.min)}]\n"
            )

    def open_subtrees(self, count: int, depth: int) -> None:
        pass

    def close_subtrees(self, count: int, depth: int) -> None:
        pass

    def footer(self, node: ActivityNode, depth: int) -> None:
        pass


class StructuredEmitter:
    """XML report with summaries and sub-activities in sibling containers."""

    def __init__(self, write: Write) -> None:
        self._write = write

    def header(self, node: ActivityNode, depth: int) -> None:
        self._write(
            f"{INDENT * 2 * depth}<activity name={quoteattr(node.name)} "
            f'total="{format_ms(node.duration)}" '
            f'hidden="{format_ms(node.hidden_time)}">\n'
        )

    def summaries(self, summaries: list[Summary], depth: int) -> None:
        pad = INDENT * (2 * depth + 1)
        if not summaries:
            self._write(f'{pad}<summaries count="0"/>\n')
            return
        self._write(f'{pad}<summaries count="{len(summaries)}">\n')
        for s in summaries:
            self._write(
                f"{pad}{INDENT}<summary name={quoteattr(s.name)} count=\"{s.count}\" "
                f'total="{format_ms(s.total)}" max="{format_ms(s.max)}" '
                f'avg="{format_avg(s.avg)}" min="{format_ms(s.min)}"/>\n'
            )
        self._write(f"{pad}</summaries>\n")

    def open_subtrees(self, count: int, depth: int) -> None:
        pad = INDENT * (2 * depth + 1)
        if count:
            self._write(f'{pad}<activities count="{count}">\n')
        else:
            self._write(f'{pad}<activities count="0"/>\n')

    def close_subtrees(self, count: int, depth: int) -> None:
        if count:
            self._write(f"{INDENT * (2 * depth + 1)}</activities>\n")

    def footer(self, node: ActivityNode, depth: int) -> None:
        self._write(f"{INDENT * 2 * depth}</activity>\n")


def render_text(root: ActivityNode) -> str:
    buffer = io.StringIO()
    write_text(root, buffer)
    return buffer.getvalue()


def write_text(root: ActivityNode, sink: TextIO) -> None:
    walk(root, TextEmitter(sink.write))


def render_structured(root: ActivityNode) -> str:
    buffer = io.StringIO()
    walk(root, StructuredEmitter(buffer.write))
    return buffer.getvalue()


def write_structured(root: ActivityNode, sink: BinaryIO) -> None:
    """Stream the XML report to a byte sink without building it in memory."""
    walk(root, StructuredEmitter(lambda chunk: sink.write(chunk.encode("utf-8"))))
