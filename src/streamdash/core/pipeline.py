"""Per-view processing pass: filter, aggregate, downsample, and map."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Optional, Sequence, Tuple

from ..analysis.aggregate import aggregate_by_time
from ..analysis.lttb import LINE_THRESHOLD, Downsampler
from ..analysis.series import filter_by_categories, filter_by_time_range
from ..data.stream_buffer import StreamBuffer
from .coordinates import CoordinateMapper, compute_bounds
from .models import ChartDimensions, FilterConfig, Sample, ScaleBounds
from .perf_metrics import PerformanceMonitor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """Everything a draw callback needs for one render pass."""

    series: Tuple[Sample, ...]
    mapper: CoordinateMapper
    bounds: ScaleBounds
    source_count: int


class FilterPipeline:
    """
    Compose category/time filtering and optional aggregation.

    Stateless apart from diagnostics: each call works on the snapshot it is
    given and returns a freshly allocated list.
    """

    def process(self, snapshot: Sequence[Sample], config: FilterConfig) -> list[Sample]:
        result = filter_by_categories(snapshot, config.categories)
        if config.time_range is not None:
            start, end = config.time_range
            result = filter_by_time_range(result, start, end)
        if config.aggregation_bucket_ms is not None:
            result = aggregate_by_time(result, config.aggregation_bucket_ms)
        return result


@dataclass
class FrameBuilder:
    """
    Turn a :class:`StreamBuffer` into publishable :class:`Frame` objects.

    Bounds are computed from the filtered series before downsampling so the
    axes stay stable while the point budget changes.
    """

    dimensions: ChartDimensions = field(default_factory=ChartDimensions)
    threshold: int = LINE_THRESHOLD
    monitor: Optional[PerformanceMonitor] = None
    pipeline: FilterPipeline = field(default_factory=FilterPipeline)
    downsampler: Downsampler = field(init=False)

    def __post_init__(self) -> None:
        self.downsampler = Downsampler(self.threshold)

    def build(self, buffer: StreamBuffer, config: FilterConfig) -> Frame:
        return self.build_from_snapshot(buffer.snapshot(), config)

    def build_from_snapshot(self, snapshot: Sequence[Sample], config: FilterConfig) -> Frame:
        started = time.perf_counter()
        processed = self.pipeline.process(snapshot, config)
        bounds = compute_bounds(processed)
        reduced = self.downsampler(processed)
        frame = Frame(
            series=tuple(reduced),
            mapper=CoordinateMapper.from_bounds(self.dimensions, bounds),
            bounds=bounds,
            source_count=len(processed),
        )
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if self.monitor is not None:
            self.monitor.record_data_processing(elapsed_ms)
        logger.debug(
            "frame built: %d of %d points in %.2f ms",
            len(frame.series),
            frame.source_count,
            elapsed_ms,
        )
        return frame


def prepare_frame(
    buffer: StreamBuffer,
    config: FilterConfig,
    dimensions: ChartDimensions | None = None,
    threshold: int = LINE_THRESHOLD,
) -> Frame:
    """One-shot convenience wrapper around :class:`FrameBuilder`."""
    builder = FrameBuilder(dimensions=dimensions or ChartDimensions(), threshold=threshold)
    return builder.build(buffer, config)


__all__ = ["FilterPipeline", "Frame", "FrameBuilder", "prepare_frame"]
