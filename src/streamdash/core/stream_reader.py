"""
Utilities for ingesting JSON-lines sample streams into a :class:`StreamBuffer`.

Each line is an object such as ``{"timestamp": 1700000000000, "value": 42.0,
"category": "A"}``. The reader runs happily on any line iterable: an open
file, ``sys.stdin``, or a list in tests.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional

from ..data.stream_buffer import StreamBuffer
from .models import ConfigurationError, Sample

logger = logging.getLogger(__name__)


def parse_line(line: str) -> Optional[Sample]:
    """Decode one JSON line into a :class:`Sample`, or ``None`` if unusable."""
    text = line.strip()
    if not text:
        return None
    try:
        record = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Dropping malformed JSON line: %s (%s)", text, exc)
        return None
    if not isinstance(record, Mapping):
        logger.debug("Skipping non-object JSON payload: %r", record)
        return None
    try:
        return Sample.from_mapping(record)
    except ConfigurationError as exc:
        logger.debug("Skipping record: %s", exc)
        return None


def reader_loop(
    stream: Iterable[str],
    buffer: StreamBuffer,
    *,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Read JSON lines from ``stream`` and append valid samples to ``buffer``.

    Intended to run in a background thread: it stops when the input is
    exhausted or when ``stop_event`` is set. Returns the number of samples
    appended.
    """
    appended = 0
    for raw_line in stream:
        if stop_event is not None and stop_event.is_set():
            break
        sample = parse_line(raw_line)
        if sample is None:
            continue
        buffer.append(sample)
        appended += 1
    return appended


@dataclass
class StreamReaderHandle:
    thread: threading.Thread
    stop_event: threading.Event
    buffer: StreamBuffer

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        self.stop_event.set()
        if join:
            self.thread.join(timeout)

    def is_alive(self) -> bool:
        return self.thread.is_alive()


def start_reader(
    stream: Iterable[str],
    *,
    buffer: Optional[StreamBuffer] = None,
    thread_name: Optional[str] = None,
) -> StreamReaderHandle:
    """
    Start a background thread that ingests JSON lines from *stream*.
    """

    target_buffer = buffer if buffer is not None else StreamBuffer()
    stop_event = threading.Event()

    def _target() -> None:
        try:
            count = reader_loop(stream, target_buffer, stop_event=stop_event)
        except Exception:
            logger.exception("Stream reader stopped on an unexpected error")
            return
        logger.info("Stream reader finished after %d samples", count)

    thread = threading.Thread(
        target=_target,
        name=thread_name or "StreamdashReader",
        daemon=True,
    )
    thread.start()
    return StreamReaderHandle(thread=thread, stop_event=stop_event, buffer=target_buffer)


def start_reader_on_stdin(*, buffer: Optional[StreamBuffer] = None) -> StreamReaderHandle:
    """
    Convenience wrapper that starts the reader on ``sys.stdin``.
    """
    import sys

    return start_reader(sys.stdin, buffer=buffer, thread_name="StreamdashReader(stdin)")


__all__ = [
    "StreamReaderHandle",
    "parse_line",
    "reader_loop",
    "start_reader",
    "start_reader_on_stdin",
]
