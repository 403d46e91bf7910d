"""Wire a buffer, per-view frame builders, and schedulers from configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
import time
from typing import Callable, Dict, Optional, Sequence

from ..analysis.series import calculate_statistics
from ..config import DashboardConfig
from ..data.stream_buffer import BufferConfig, StreamBuffer
from ..data.synthetic import SyntheticGenerator
from .models import FilterConfig, Sample
from .perf_metrics import PerformanceMonitor
from .pipeline import Frame, FrameBuilder
from .scheduler import DrawCallback, RenderScheduler, ThreadTickSource

logger = logging.getLogger(__name__)

DrawFactory = Callable[[str], DrawCallback]


def _noop_draw(series, mapper) -> None:
    return


@dataclass
class ChartView:
    """One chart: its frame builder, its scheduler, and its frame metrics."""

    name: str
    builder: FrameBuilder
    scheduler: RenderScheduler
    monitor: PerformanceMonitor

    def refresh(self, snapshot: Sequence[Sample], config: FilterConfig) -> Frame:
        frame = self.builder.build_from_snapshot(snapshot, config)
        self.scheduler.publish(frame)
        return frame


@dataclass
class DashboardSession:
    """
    Everything needed to run the dashboard for one data stream.

    The buffer is shared by all views; each view has its own point budget,
    scheduler, and monitor, so a slow view never holds back another.
    """

    config: DashboardConfig = field(default_factory=DashboardConfig)
    draw_factory: Optional[DrawFactory] = None
    seed: Optional[int] = None

    buffer: StreamBuffer = field(init=False)
    generator: SyntheticGenerator = field(init=False)
    views: Dict[str, ChartView] = field(init=False)
    filter: FilterConfig = field(init=False)
    _stop_event: threading.Event = field(init=False, repr=False, default_factory=threading.Event)

    def __post_init__(self) -> None:
        self.config = self.config.validated()
        self.buffer = StreamBuffer(
            BufferConfig(
                capacity=self.config.window_capacity,
                eviction_fraction=self.config.eviction_fraction,
            )
        )
        self.generator = SyntheticGenerator(seed=self.seed)
        self.filter = self.config.filter_config()
        dimensions = self.config.dimensions()
        self.views = {}
        for name, threshold in self.config.views.items():
            draw = self.draw_factory(name) if self.draw_factory is not None else _noop_draw
            monitor = PerformanceMonitor()
            self.views[name] = ChartView(
                name=name,
                builder=FrameBuilder(dimensions=dimensions, threshold=threshold, monitor=monitor),
                scheduler=RenderScheduler(
                    draw,
                    target_fps=self.config.target_fps,
                    monitor=monitor,
                    name=name,
                ),
                monitor=monitor,
            )

    def set_filter(self, config: FilterConfig) -> Dict[str, Frame]:
        self.filter = config
        return self.refresh()

    def refresh(self) -> Dict[str, Frame]:
        """Rebuild and publish every view's frame from one buffer snapshot."""
        snapshot = self.buffer.snapshot()
        return {name: view.refresh(snapshot, self.filter) for name, view in self.views.items()}

    def stress(self, count: int) -> Dict[str, Frame]:
        """Replace the window with ``count`` synthetic history points."""
        self.buffer.reset(self.generator.history(count))
        logger.info(
            "Stress load: generated %d points, window holds %d",
            count,
            len(self.buffer),
        )
        return self.refresh()

    def ingest_synthetic(self) -> Sample:
        latest = self.buffer.latest()
        sample = self.generator.next_point(None if latest is None else latest.value)
        self.buffer.append(sample)
        return sample

    def metrics(self) -> Dict[str, dict[str, float]]:
        return {name: view.monitor.as_dict() for name, view in self.views.items()}

    def run_headless(self, duration_s: float, *, log_interval_s: float = 1.0) -> Dict[str, dict[str, float]]:
        """
        Stream synthetic points and render every view for ``duration_s``.

        Producer and refresh run on this thread; each view ticks on its own
        :class:`ThreadTickSource`. :meth:`stop` from another thread ends the
        run early. Returns the final per-view metrics.
        """
        self._stop_event.clear()
        sources = [ThreadTickSource(view.scheduler) for view in self.views.values()]
        for source in sources:
            source.start()
        interval_s = self.config.stream_interval_ms / 1000.0
        started = time.monotonic()
        next_log = started + log_interval_s
        logger.info(
            "Running %d view(s) for %.1f s at %.0f fps, stream every %d ms",
            len(self.views),
            duration_s,
            self.config.target_fps,
            self.config.stream_interval_ms,
        )
        try:
            self.refresh()
            while time.monotonic() - started < duration_s and not self._stop_event.wait(interval_s):
                self.ingest_synthetic()
                self.refresh()
                now = time.monotonic()
                if now >= next_log:
                    self._log_metrics(now - started)
                    next_log = now + log_interval_s
        finally:
            for source in sources:
                source.stop(join=True, timeout=1.0)
        stats = calculate_statistics(self.buffer.snapshot())
        logger.info(
            "Window: %d points, min=%.2f max=%.2f mean=%.2f",
            stats.count,
            stats.min,
            stats.max,
            stats.mean,
        )
        metrics = self.metrics()
        for name, values in metrics.items():
            logger.info("Finished %s: %s", name, ", ".join(f"{k}={v:.2f}" for k, v in values.items()))
        return metrics

    def stop(self) -> None:
        """Ask a running :meth:`run_headless` to finish after its current step."""
        self._stop_event.set()

    def _log_metrics(self, elapsed_s: float) -> None:
        for name, view in self.views.items():
            snap = view.monitor.snapshot()
            logger.info(
                "t=%5.1fs view=%s points=%d/%d fps=%5.1f render=%5.2fms processing=%5.2fms mem=%6.1fMB %s",
                elapsed_s,
                name,
                view.builder.downsampler.last_output_size,
                len(self.buffer),
                snap.fps,
                snap.render_ms,
                snap.data_processing_ms,
                snap.memory_mb,
                snap.status(),
            )


__all__ = ["ChartView", "DashboardSession", "DrawFactory"]
