"""Synthetic sample producer for demos, stress tests, and benchmarks."""

from __future__ import annotations

from dataclasses import dataclass, field
import time
from typing import List, Optional, Sequence

import numpy as np

from ..core.models import Sample

DEFAULT_CATEGORIES: tuple[str, ...] = ("A", "B", "C", "D", "E")
HISTORY_SPACING_MS = 100
VALUE_MIN = 0.0
VALUE_MAX = 100.0


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class SyntheticGenerator:
    """
    Seedable random-walk generator clipped to ``[0, 100]``.

    ``history`` produces a backfilled series ending at ``now``; ``next_point``
    and ``batch`` continue the walk from a previous value.
    """

    seed: Optional[int] = None
    categories: Sequence[str] = DEFAULT_CATEGORIES
    _rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = np.random.default_rng(self.seed)
        self.categories = tuple(self.categories) or DEFAULT_CATEGORIES

    def history(self, count: int, end_ms: Optional[int] = None) -> List[Sample]:
        """Return ``count`` samples spaced 100 ms apart with a sine trend plus noise."""
        if count <= 0:
            return []
        end = now_ms() if end_ms is None else int(end_ms)
        idx = np.arange(count)
        timestamps = end - (count - idx) * HISTORY_SPACING_MS
        trend = np.sin(idx / 100.0) * 30.0
        noise = (self._rng.random(count) - 0.5) * 20.0
        values = np.clip(50.0 + trend + noise, VALUE_MIN, VALUE_MAX)
        labels = self.categories
        return [
            Sample(timestamp=int(ts), value=float(v), category=labels[i % len(labels)])
            for i, (ts, v) in enumerate(zip(timestamps, values))
        ]

    def next_point(self, last_value: Optional[float] = None, timestamp_ms: Optional[int] = None) -> Sample:
        """Step the random walk by up to ±5 from ``last_value`` (default 50)."""
        base = 50.0 if last_value is None else float(last_value)
        change = (float(self._rng.random()) - 0.5) * 10.0
        value = min(VALUE_MAX, max(VALUE_MIN, base + change))
        category = self.categories[int(self._rng.integers(len(self.categories)))]
        ts = now_ms() if timestamp_ms is None else int(timestamp_ms)
        return Sample(timestamp=ts, value=value, category=category)

    def batch(
        self,
        count: int,
        last_value: Optional[float] = None,
        start_ms: Optional[int] = None,
        spacing_ms: int = 0,
    ) -> List[Sample]:
        """Continue the walk for ``count`` points, optionally with explicit spacing."""
        points: List[Sample] = []
        current = last_value
        start = now_ms() if start_ms is None else int(start_ms)
        for i in range(max(0, count)):
            point = self.next_point(current, start + i * spacing_ms)
            points.append(point)
            current = point.value
        return points


__all__ = ["DEFAULT_CATEGORIES", "HISTORY_SPACING_MS", "SyntheticGenerator", "now_ms"]
