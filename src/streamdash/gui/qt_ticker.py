"""Drive a :class:`RenderScheduler` from the Qt event loop."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Qt

from ..core.scheduler import Clock, RenderScheduler, monotonic_ms

logger = logging.getLogger(__name__)


class QtTickSource(QObject):
    """
    Precise ``QTimer`` that ticks a scheduler on the GUI thread.

    The timer fires faster than the frame interval; the scheduler decides
    which ticks draw.
    """

    def __init__(
        self,
        scheduler: RenderScheduler,
        interval_ms: Optional[int] = None,
        parent: Optional[QObject] = None,
        *,
        clock: Clock = monotonic_ms,
    ) -> None:
        super().__init__(parent)
        self._scheduler = scheduler
        self._clock = clock
        if interval_ms is None:
            interval_ms = max(1, int(scheduler.frame_interval_ms // 2))
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._on_tick)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def start(self) -> None:
        self._scheduler.start()
        self._timer.start()
        logger.debug("Qt tick source for %s started every %d ms", self._scheduler.name, self.interval_ms)

    def stop(self) -> None:
        self._timer.stop()
        self._scheduler.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_tick(self) -> None:
        try:
            self._scheduler.tick(self._clock())
        except Exception:
            # The scheduler already logged the draw failure; stop rather than
            # raise into the Qt event loop.
            self.stop()
