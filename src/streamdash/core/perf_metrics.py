"""Lightweight performance metrics for the render loop."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import logging
import os
import threading
from typing import Deque, Optional

import psutil

logger = logging.getLogger(__name__)

MAX_SAMPLES_PERF = 300
OPTIMAL_FPS = 55.0


@dataclass(frozen=True)
class PerformanceMetrics:
    fps: float
    memory_mb: float
    render_ms: float
    data_processing_ms: float
    frames: int

    def status(self) -> str:
        return "optimal" if self.fps >= OPTIMAL_FPS else "degraded"


@dataclass
class PerformanceMonitor:
    """
    Ring-buffer style tracking of recent frame timing.

    Frame times are milliseconds on whatever clock the scheduler ticks with.
    """

    frame_times: Deque[float] = field(default_factory=lambda: deque(maxlen=MAX_SAMPLES_PERF))
    render_durations: Deque[float] = field(default_factory=lambda: deque(maxlen=MAX_SAMPLES_PERF))
    data_processing_ms: float = 0.0
    frames: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _process: Optional[psutil.Process] = field(default=None, repr=False)

    def record_frame(self, frame_ms: float, render_ms: float) -> None:
        """Add a drawn frame's timestamp and how long its draw took."""
        with self._lock:
            self.frame_times.append(float(frame_ms))
            self.render_durations.append(float(render_ms))
            self.frames += 1

    def record_data_processing(self, elapsed_ms: float) -> None:
        with self._lock:
            self.data_processing_ms = float(elapsed_ms)

    def fps(self) -> float:
        with self._lock:
            if len(self.frame_times) < 2:
                return 0.0
            span_ms = self.frame_times[-1] - self.frame_times[0]
            count = len(self.frame_times) - 1
        if span_ms <= 0:
            return 0.0
        return 1000.0 * count / span_ms

    def avg_render_ms(self) -> float:
        with self._lock:
            if not self.render_durations:
                return 0.0
            return sum(self.render_durations) / len(self.render_durations)

    def memory_mb(self) -> float:
        """Resident set size of this process in MiB (0.0 if unavailable)."""
        try:
            if self._process is None:
                self._process = psutil.Process(os.getpid())
            return float(self._process.memory_info().rss) / 1_048_576.0
        except psutil.Error as exc:
            logger.warning("Failed to read process memory: %r", exc)
            return 0.0

    def snapshot(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            fps=self.fps(),
            memory_mb=self.memory_mb(),
            render_ms=self.avg_render_ms(),
            data_processing_ms=self.data_processing_ms,
            frames=self.frames,
        )

    def as_dict(self) -> dict[str, float]:
        """Snapshot as a flat mapping, handy for structured logging."""
        snap = self.snapshot()
        return {
            "fps": snap.fps,
            "memory_mb": snap.memory_mb,
            "render_ms": snap.render_ms,
            "data_processing_ms": snap.data_processing_ms,
        }

    def reset(self) -> None:
        with self._lock:
            self.frame_times.clear()
            self.render_durations.clear()
            self.data_processing_ms = 0.0
            self.frames = 0


__all__ = ["MAX_SAMPLES_PERF", "OPTIMAL_FPS", "PerformanceMetrics", "PerformanceMonitor"]
