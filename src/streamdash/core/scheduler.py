"""Frame-budgeted render scheduling.

A :class:`RenderScheduler` receives timestamps from some tick source (a
background thread, a Qt timer, a test loop) and decides whether each tick
draws. Ticks arriving faster than the frame interval are dropped; an
accepted tick always draws the most recently published frame, never a
backlog. After drawing, the reference time is rebased to
``now - (elapsed % interval)`` so the cadence does not drift.
"""

from __future__ import annotations

from enum import Enum
import logging
import threading
import time
from typing import Callable, Optional, Sequence

from .coordinates import CoordinateMapper
from .models import ConfigurationError, Sample, coerce_number
from .perf_metrics import PerformanceMonitor
from .pipeline import Frame

logger = logging.getLogger(__name__)

DEFAULT_TARGET_FPS = 60.0
# Absorbs float rounding when ticks land exactly on the frame interval.
FRAME_EPSILON_MS = 1e-6

DrawCallback = Callable[[Sequence[Sample], CoordinateMapper], None]
Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class RenderScheduler:
    """
    Throttle draw calls to ``target_fps`` using externally supplied ticks.

    ``publish`` and ``tick`` may be called from different threads. Drawing
    happens under the scheduler lock and re-checks the state, so once
    :meth:`stop` returns no further draw begins.
    """

    def __init__(
        self,
        draw: DrawCallback,
        *,
        target_fps: float = DEFAULT_TARGET_FPS,
        monitor: Optional[PerformanceMonitor] = None,
        clock: Clock = monotonic_ms,
        name: str = "chart",
    ) -> None:
        fps = coerce_number(target_fps)
        if fps is None or fps <= 0:
            raise ConfigurationError(f"target_fps must be > 0, got {target_fps!r}")
        self._draw = draw
        self._frame_interval_ms = 1000.0 / fps
        self._monitor = monitor
        self._clock = clock
        self.name = name

        self._lock = threading.RLock()
        self._frame_lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._frame: Optional[Frame] = None
        self._last_frame_ms: Optional[float] = None

        self.ticks = 0
        self.frames_drawn = 0
        self.frames_skipped = 0

    @property
    def frame_interval_ms(self) -> float:
        return self._frame_interval_ms

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    # ------------------------------------------------------------ frame cell
    def publish(self, frame: Frame) -> None:
        """Replace the frame drawn on the next accepted tick."""
        with self._frame_lock:
            self._frame = frame

    def latest_frame(self) -> Optional[Frame]:
        with self._frame_lock:
            return self._frame

    # ------------------------------------------------------------- lifecycle
    def start(self) -> None:
        with self._lock:
            if self._state is SchedulerState.STOPPED:
                raise RuntimeError(f"scheduler {self.name!r} has been stopped")
            if self._state is SchedulerState.RUNNING:
                return
            self._state = SchedulerState.RUNNING
            self._last_frame_ms = None
        logger.debug("scheduler %s started at %.1f fps", self.name, 1000.0 / self._frame_interval_ms)

    def stop(self) -> None:
        """Stop permanently; waits for an in-flight draw on another thread."""
        with self._lock:
            if self._state is SchedulerState.STOPPED:
                return
            self._state = SchedulerState.STOPPED
        logger.debug(
            "scheduler %s stopped (ticks=%d drawn=%d skipped=%d)",
            self.name,
            self.ticks,
            self.frames_drawn,
            self.frames_skipped,
        )

    # ------------------------------------------------------------------ tick
    def tick(self, now_ms: Optional[float] = None) -> bool:
        """
        Handle one scheduling tick at ``now_ms``.

        Returns ``True`` when the draw callback ran.
        """
        if now_ms is None:
            now_ms = self._clock()
        with self._lock:
            if self._state is not SchedulerState.RUNNING:
                return False
            self.ticks += 1

            interval = self._frame_interval_ms
            if self._last_frame_ms is None:
                elapsed = interval
            else:
                elapsed = now_ms - self._last_frame_ms
                if elapsed + FRAME_EPSILON_MS < interval:
                    self.frames_skipped += 1
                    return False

            frame = self.latest_frame()
            if frame is None:
                self.frames_skipped += 1
                return False

            remainder = elapsed % interval
            if interval - remainder <= FRAME_EPSILON_MS:
                remainder = 0.0
            self._last_frame_ms = now_ms - remainder

            started = time.perf_counter()
            try:
                self._draw(frame.series, frame.mapper)
            except Exception:
                logger.exception("draw callback failed for %s", self.name)
                raise
            finally:
                self.frames_drawn += 1
                if self._monitor is not None:
                    self._monitor.record_frame(now_ms, (time.perf_counter() - started) * 1000.0)
            return True


class ThreadTickSource:
    """
    Background thread feeding monotonic timestamps into a scheduler.

    The thread sleeps on an :class:`threading.Event`, so :meth:`stop`
    interrupts the wait immediately.
    """

    def __init__(
        self,
        scheduler: RenderScheduler,
        interval_ms: Optional[float] = None,
        *,
        clock: Clock = monotonic_ms,
        thread_name: Optional[str] = None,
    ) -> None:
        if interval_ms is None:
            interval_ms = scheduler.frame_interval_ms / 2.0
        if interval_ms <= 0:
            raise ConfigurationError(f"interval_ms must be > 0, got {interval_ms!r}")
        self._scheduler = scheduler
        self._interval_s = float(interval_ms) / 1000.0
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=thread_name or f"StreamdashTicks({scheduler.name})",
            daemon=True,
        )

    def start(self) -> None:
        self._scheduler.start()
        self._thread.start()

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        self._scheduler.stop()
        if join and self._thread.is_alive():
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval_s):
            try:
                self._scheduler.tick(self._clock())
            except Exception:
                # The scheduler already logged the draw failure.
                self.stop()


__all__ = [
    "Clock",
    "DEFAULT_TARGET_FPS",
    "DrawCallback",
    "RenderScheduler",
    "SchedulerState",
    "ThreadTickSource",
    "monotonic_ms",
]
