from __future__ import annotations

import io

import pytest

from activity_timing import (
    ActivityNode,
    TreeNotFinalizedError,
    create_marker,
    render_structured,
    render_text,
    write_structured,
    write_text,
)
from activity_timing.formatting import format_avg, format_ms


@pytest.fixture
def two_queries(clock):
    marker = create_marker("App", clock=clock)
    marker.start("Q")
    clock.advance(10)
    marker.end("Q")
    marker.start("Q")
    clock.advance(30)
    marker.end("Q")
    return marker.end()


@pytest.fixture
def transactions(clock):
    marker = create_marker("App", clock=clock)
    for i in range(5):
        marker.start("Txn")
        if i == 2:
            for _ in range(2):
                marker.start("Query")
                clock.advance(1)
                marker.end("Query")
            clock.advance(1)
        else:
            clock.advance(2)
        marker.end("Txn")
    clock.advance(1)
    return marker.end()


def test_text_report_for_repeated_child(two_queries):
    assert render_text(two_queries) == (
        "App [total: 40.0 ms; hidden: 0.0 ms]\n"
        "  + Q [count: 2; total: 40.0 ms; avg: 20.000; max: 30.0; min: 10.0]\n"
    )


def test_structured_report_for_repeated_child(two_queries):
    assert render_structured(two_queries) == (
        '<activity name="App" total="40.0" hidden="0.0">\n'
        '  <summaries count="1">\n'
        '    <summary name="Q" count="2" total="40.0" max="30.0" avg="20.000" min="10.0"/>\n'
        "  </summaries>\n"
        '  <activities count="0"/>\n'
        "</activity>\n"
    )


def test_text_report_summarizes_and_expands(transactions):
    assert render_text(transactions) == (
        "App [total: 12.0 ms; hidden: 1.0 ms]\n"
        "  + Txn [count: 5; total: 11.0 ms; avg: 2.200; max: 3.0; min: 2.0]\n"
        "  Txn [total: 3.0 ms; hidden: 1.0 ms]\n"
        "    + Query [count: 2; total: 2.0 ms; avg: 1.000; max: 1.0; min: 1.0]\n"
    )


def test_structured_report_summarizes_and_expands(transactions):
    assert render_structured(transactions) == (
        '<activity name="App" total="12.0" hidden="1.0">\n'
        '  <summaries count="1">\n'
        '    <summary name="Txn" count="5" total="11.0" max="3.0" avg="2.200" min="2.0"/>\n'
        "  </summaries>\n"
        '  <activities count="1">\n'
        '    <activity name="Txn" total="3.0" hidden="1.0">\n'
        '      <summaries count="1">\n'
        '        <summary name="Query" count="2" total="2.0" max="1.0" avg="1.000" min="1.0"/>\n'
        "      </summaries>\n"
        '      <activities count="0"/>\n'
        "    </activity>\n"
        "  </activities>\n"
        "</activity>\n"
    )


def test_leaf_root(clock):
    marker = create_marker("Idle", clock=clock)
    clock.advance(3.5)
    root = marker.end()
    assert render_text(root) == "Idle [total: 3.5 ms; hidden: 3.5 ms]\n"
    assert render_structured(root) == (
        '<activity name="Idle" total="3.5" hidden="3.5">\n'
        '  <summaries count="0"/>\n'
        '  <activities count="0"/>\n'
        "</activity>\n"
    )


def test_rendering_is_repeatable(transactions):
    assert render_text(transactions) == render_text(transactions)
    assert render_structured(transactions) == render_structured(transactions)


def test_streaming_matches_rendered(transactions):
    sink = io.BytesIO()
    write_structured(transactions, sink)
    assert sink.getvalue() == render_structured(transactions).encode("utf-8")

    text_sink = io.StringIO()
    write_text(transactions, text_sink)
    assert text_sink.getvalue() == render_text(transactions)


def test_streaming_writes_incrementally(transactions):
    chunks: list[bytes] = []

    class Sink:
        def write(self, data: bytes) -> int:
            chunks.append(data)
            return len(data)

    write_structured(transactions, Sink())
    assert len(chunks) > 1
    assert all(isinstance(chunk, bytes) for chunk in chunks)


def test_unfinished_tree_is_rejected(clock):
    marker = create_marker("App", clock=clock)
    with pytest.raises(TreeNotFinalizedError):
        render_text(marker.root)
    with pytest.raises(TreeNotFinalizedError):
        render_structured(marker.root)
    with pytest.raises(TreeNotFinalizedError):
        write_structured(marker.root, io.BytesIO())


def test_negative_hidden_time_is_shown():
    parent = ActivityNode(name="P", start_time=0.0, end_time=10.0)
    parent.children.append(
        ActivityNode(name="C", start_time=0.0, end_time=10.3, parent=parent)
    )
    assert "hidden: -0.3 ms" in render_text(parent)
    assert 'hidden="-0.3"' in render_structured(parent)


def test_names_are_escaped_in_structured_report(clock):
    marker = create_marker("R&D <x>", clock=clock)
    root = marker.end()
    assert render_structured(root).startswith('<activity name="R&amp;D &lt;x&gt;"')


def test_large_values_are_grouped(clock):
    marker = create_marker("Batch", clock=clock)
    for duration in (1500.0, 2500.5):
        marker.start("Load")
        clock.advance(duration)
        marker.end("Load")
    root = marker.end()
    assert render_text(root) == (
        "Batch [total: 4,000.5 ms; hidden: 0.0 ms]\n"
        "  + Load [count: 2; total: 4,000.5 ms; avg: 2,000.250; max: 2,500.5; min: 1,500.0]\n"
    )


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, "0.0"), (999.94, "999.9"), (1000.0, "1,000.0"), (1234567.89, "1,234,567.9")],
)
def test_format_ms(value, expected):
    assert format_ms(value) == expected


def test_format_avg():
    assert format_avg(20.0) == "20.000"
    assert format_avg(1234.5) == "1,234.500"
