from __future__ import annotations

import pytest

from streamdash.core.perf_metrics import MAX_SAMPLES_PERF, PerformanceMonitor


def test_fps_from_frame_timestamps() -> None:
    monitor = PerformanceMonitor()
    assert monitor.fps() == 0.0

    for i in range(31):
        monitor.record_frame(i * 20.0, 2.0)
    assert monitor.fps() == pytest.approx(50.0)
    assert monitor.avg_render_ms() == pytest.approx(2.0)

    snap = monitor.snapshot()
    assert snap.frames == 31
    assert snap.status() == "degraded"


def test_history_is_bounded() -> None:
    monitor = PerformanceMonitor()
    for i in range(MAX_SAMPLES_PERF * 3):
        monitor.record_frame(i * 16.0, float(i))
    assert len(monitor.frame_times) == MAX_SAMPLES_PERF
    assert len(monitor.render_durations) == MAX_SAMPLES_PERF
    assert monitor.frames == MAX_SAMPLES_PERF * 3
    assert monitor.snapshot().status() == "optimal"


def test_memory_and_dict_snapshot() -> None:
    monitor = PerformanceMonitor()
    monitor.record_data_processing(3.5)
    values = monitor.as_dict()
    assert set(values) == {"fps", "memory_mb", "render_ms", "data_processing_ms"}
    assert values["memory_mb"] > 0.0
    assert values["data_processing_ms"] == 3.5


def test_reset_clears_history() -> None:
    monitor = PerformanceMonitor()
    monitor.record_frame(0.0, 1.0)
    monitor.record_frame(10.0, 1.0)
    monitor.record_data_processing(4.0)
    monitor.reset()
    assert monitor.fps() == 0.0
    assert monitor.avg_render_ms() == 0.0
    assert monitor.frames == 0
    assert monitor.data_processing_ms == 0.0
