from __future__ import annotations

import io
import json
import threading
import time

from streamdash.core.models import Sample
from streamdash.core.stream_reader import parse_line, reader_loop, start_reader
from streamdash.data.stream_buffer import BufferConfig, StreamBuffer


def _build_line(timestamp: int, value: float, category: str = "A") -> str:
    return json.dumps({"timestamp": timestamp, "value": value, "category": category})


def test_reader_loop_appends_samples_in_order() -> None:
    buffer = StreamBuffer(BufferConfig(capacity=4))
    lines = [
        _build_line(1, 0.1),
        _build_line(2, 0.3, "B"),
    ]
    assert reader_loop(lines, buffer) == 2

    assert buffer.snapshot() == (
        Sample(timestamp=1, value=0.1, category="A"),
        Sample(timestamp=2, value=0.3, category="B"),
    )


def test_reader_loop_ignores_invalid_records() -> None:
    buffer = StreamBuffer(BufferConfig(capacity=2))
    lines = [
        "not-json",
        "",
        "[1, 2, 3]",
        json.dumps({"value": 1.0}),  # missing timestamp
        json.dumps({"timestamp": 0.1}),  # missing value
        json.dumps({"timestamp": 2, "value": "not-a-number"}),
        json.dumps({"timestamp": 3, "value": True}),
        _build_line(4, 2.5, "C"),
    ]
    assert reader_loop(lines, buffer) == 1

    assert buffer.snapshot() == (Sample(timestamp=4, value=2.5, category="C"),)


def test_parse_line_defaults_category() -> None:
    assert parse_line('{"timestamp": 10, "value": 3}') == Sample(timestamp=10, value=3.0, category="")
    assert parse_line("   ") is None


def test_reader_loop_honours_stop_event() -> None:
    buffer = StreamBuffer()
    stop = threading.Event()
    stop.set()
    assert reader_loop([_build_line(1, 1.0)], buffer, stop_event=stop) == 0
    assert len(buffer) == 0


def test_start_reader_background_thread() -> None:
    stream = io.StringIO("\n".join([_build_line(3, 1.5), _build_line(4, 2.5)]) + "\n")
    handle = start_reader(stream, buffer=StreamBuffer(BufferConfig(capacity=10)))

    # Allow background thread to process both lines
    timeout = time.time() + 1.0
    while time.time() < timeout:
        if len(handle.buffer) == 2:
            break
        time.sleep(0.01)

    handle.stop(join=True, timeout=1.0)

    assert [s.timestamp for s in handle.buffer.snapshot()] == [3, 4]
    assert not handle.is_alive()
