"""Central sliding-window buffer for recent streaming samples."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import threading
from typing import Iterable, List, Optional, Tuple

from ..core.models import ConfigurationError, Sample, ensure_sample

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_CAPACITY = 10_000
DEFAULT_EVICTION_FRACTION = 0.1


@dataclass
class BufferConfig:
    """Configuration for :class:`StreamBuffer`."""

    capacity: int = DEFAULT_WINDOW_CAPACITY
    eviction_fraction: float = DEFAULT_EVICTION_FRACTION

    def __post_init__(self) -> None:
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity <= 0:
            raise ConfigurationError(f"capacity must be a positive integer, got {self.capacity!r}")
        fraction = float(self.eviction_fraction)
        if not (0.0 < fraction <= 1.0):
            raise ConfigurationError(
                f"eviction_fraction must be within (0, 1], got {self.eviction_fraction!r}"
            )

    def eviction_batch(self) -> int:
        """
        Return how many samples are dropped from the head on overflow.

        Evicting a fixed slice in one go keeps append amortized O(1) at the
        cost of the window briefly holding fewer than ``capacity`` samples.
        """
        return max(1, int(math.floor(self.capacity * self.eviction_fraction)))


class StreamBuffer:
    """
    Bounded, time-ordered window of :class:`Sample` instances.

    The buffer is the single owner of the window. One ingestion path writes,
    any number of readers call :meth:`snapshot` and process the returned
    tuple without holding the lock.
    """

    def __init__(self, config: BufferConfig | None = None) -> None:
        self._config = config or BufferConfig()
        self._window: List[Sample] = []
        self._lock = threading.RLock()
        self._appended_total = 0
        self._evicted_total = 0

    @property
    def capacity(self) -> int:
        return self._config.capacity

    @property
    def appended_total(self) -> int:
        """Number of samples accepted since construction or the last reset."""
        return self._appended_total

    @property
    def evicted_total(self) -> int:
        return self._evicted_total

    # ------------------------------------------------------------------ ingest
    def append(self, sample: Sample) -> None:
        """Append one sample at the tail, evicting a head batch on overflow."""
        ensure_sample(sample)
        with self._lock:
            self._window.append(sample)
            self._appended_total += 1
            if len(self._window) > self._config.capacity:
                self._evict(self._config.eviction_batch())

    def append_batch(self, samples: Iterable[Sample]) -> None:
        """
        Append many samples with a single splice.

        The surviving window is the same as calling :meth:`append` for each
        sample in order: overflow is trimmed in whole eviction batches.
        """
        batch = [ensure_sample(sample) for sample in samples]
        if not batch:
            return
        with self._lock:
            self._window.extend(batch)
            self._appended_total += len(batch)
            overflow = len(self._window) - self._config.capacity
            if overflow > 0:
                step = self._config.eviction_batch()
                drop = step * int(math.ceil(overflow / step))
                self._evict(min(drop, len(self._window)))

    def reset(self, samples: Iterable[Sample] = ()) -> None:
        """Replace the window wholesale, keeping only the newest ``capacity`` samples."""
        fresh = [ensure_sample(sample) for sample in samples]
        capacity = self._config.capacity
        if len(fresh) > capacity:
            logger.debug("reset truncated %d samples to the newest %d", len(fresh), capacity)
            fresh = fresh[-capacity:]
        with self._lock:
            self._window = fresh
            self._appended_total = len(fresh)
            self._evicted_total = 0

    def clear(self) -> None:
        self.reset(())

    # ------------------------------------------------------------------- query
    def snapshot(self) -> Tuple[Sample, ...]:
        """Return a read-only copy of the window, stable for a whole processing pass."""
        with self._lock:
            return tuple(self._window)

    def latest(self) -> Optional[Sample]:
        """Return the newest sample, or ``None`` if the buffer is empty."""
        with self._lock:
            if not self._window:
                return None
            return self._window[-1]

    def categories(self) -> List[str]:
        """Return the sorted set of category labels currently in the window."""
        with self._lock:
            return sorted({sample.category for sample in self._window})

    def __len__(self) -> int:
        with self._lock:
            return len(self._window)

    # ----------------------------------------------------------------- helpers
    def _evict(self, count: int) -> None:
        # Caller holds the lock.
        del self._window[:count]
        self._evicted_total += count
        logger.debug(
            "evicted %d oldest samples (window=%d/%d)",
            count,
            len(self._window),
            self._config.capacity,
        )


__all__ = [
    "BufferConfig",
    "DEFAULT_EVICTION_FRACTION",
    "DEFAULT_WINDOW_CAPACITY",
    "StreamBuffer",
]
