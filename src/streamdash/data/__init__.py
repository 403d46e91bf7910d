"""Streaming sample storage and producers.

:mod:`stream_buffer` owns the bounded sliding window every chart reads from;
:mod:`synthetic` produces demo data. Neither depends on Qt or rendering so
they can be reused in the GUI, ingestion threads, and offline scripts.
"""

from __future__ import annotations

__all__ = [
    "BufferConfig",
    "StreamBuffer",
    "SyntheticGenerator",
]

from .stream_buffer import BufferConfig, StreamBuffer
from .synthetic import SyntheticGenerator
