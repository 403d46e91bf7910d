"""Largest-Triangle-Three-Buckets (LTTB) downsampling.

LTTB keeps the first and last point of a series and picks one point per
interior bucket: the one forming the largest triangle with the previously
selected point and the average of the following bucket. The result is a
subsequence of the input (no synthesized values) that keeps peaks and
troughs a naive every-nth decimation would miss.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from numbers import Integral
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..core.models import ConfigurationError, real_number

logger = logging.getLogger(__name__)

# Per-consumer point budgets used by the dashboard views.
LINE_THRESHOLD = 600
SCATTER_THRESHOLD = 2000


def _numeric_field(item: Any, name: str) -> Optional[float]:
    if isinstance(item, Mapping):
        raw = item.get(name)
    else:
        raw = getattr(item, name, None)
    return real_number(raw)


def clean_series(series: Sequence[Any]) -> Tuple[List[Any], np.ndarray, np.ndarray, int]:
    """
    Drop elements without a numeric ``timestamp`` and ``value``.

    Returns
    -------
    kept:
        The surviving elements, in input order (the original objects).
    xs, ys:
        ``float64`` arrays of their timestamps and values.
    dropped:
        How many elements were discarded.
    """
    kept: List[Any] = []
    xs: List[float] = []
    ys: List[float] = []
    for item in series:
        if item is None:
            continue
        x = _numeric_field(item, "timestamp")
        y = _numeric_field(item, "value")
        if x is None or y is None:
            continue
        kept.append(item)
        xs.append(x)
        ys.append(y)
    dropped = len(series) - len(kept)
    return kept, np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64), dropped


def _validate_threshold(threshold: Any) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, Integral):
        raise ConfigurationError(f"threshold must be an integer, got {threshold!r}")
    return int(threshold)


def lttb_indices(xs: np.ndarray, ys: np.ndarray, threshold: int) -> np.ndarray:
    """
    Return the indices LTTB selects from ``(xs, ys)``.

    Expects ``len(xs) > threshold > 2``. Both the averaging window and the
    search window are clamped to ``[1, n - 1)``; an empty averaging window
    falls back to the last point.
    """
    n = int(xs.size)
    buckets = threshold - 2
    width = (n - 2) / buckets
    last = n - 1

    selected = np.empty(threshold, dtype=np.int64)
    selected[0] = 0
    selected[-1] = last
    a = 0

    for i in range(buckets):
        avg_start = max(1, min(int(math.floor((i + 1) * width)) + 1, last))
        avg_end = max(avg_start, min(int(math.floor((i + 2) * width)) + 1, last))
        if avg_end > avg_start:
            avg_x = float(xs[avg_start:avg_end].mean())
            avg_y = float(ys[avg_start:avg_end].mean())
        else:
            avg_x = float(xs[last])
            avg_y = float(ys[last])

        start = max(1, min(int(math.floor(i * width)) + 1, last - 1))
        stop = max(start + 1, min(int(math.floor((i + 1) * width)) + 1, last))

        xa = float(xs[a])
        ya = float(ys[a])
        cand_x = xs[start:stop]
        cand_y = ys[start:stop]
        areas = 0.5 * np.abs((xa - avg_x) * (cand_y - ya) - (xa - cand_x) * (avg_y - ya))
        # argmax returns the first maximum, so ties go to the earliest index.
        a = start + int(np.argmax(areas))
        selected[i + 1] = a

    return selected


def downsample_lttb(series: Sequence[Any], threshold: int) -> List[Any]:
    """
    Reduce ``series`` to ``threshold`` visually representative points.

    Parameters
    ----------
    series:
        Ordered :class:`~streamdash.core.models.Sample` objects, or mappings
        with ``timestamp``/``value`` keys.
    threshold:
        Target number of output points.

    Returns
    -------
    list
        A new list. When ``threshold >= n``, ``threshold <= 2`` or ``n <= 2``
        this is a copy of the cleaned input; otherwise exactly ``threshold``
        elements taken from the input in order, including the first and last.
    """
    kept, _, _, _ = _downsample(series, threshold)
    return kept


def _downsample(series: Sequence[Any], threshold: int) -> Tuple[List[Any], int, int, int]:
    threshold = _validate_threshold(threshold)
    if len(series) == 0:
        return [], 0, 0, 0
    kept, xs, ys, dropped = clean_series(series)
    n = len(kept)
    if threshold >= n or threshold <= 2 or n <= 2:
        return list(kept), dropped, n, n
    indices = lttb_indices(xs, ys, threshold)
    return [kept[int(idx)] for idx in indices], dropped, n, threshold


@dataclass
class Downsampler:
    """
    Stateful wrapper around :func:`downsample_lttb` for one chart view.

    Keeps counters of how many malformed elements were discarded so the
    drop rate can be surfaced in diagnostics.
    """

    threshold: int = LINE_THRESHOLD
    dropped_total: int = field(init=False, default=0)
    last_dropped: int = field(init=False, default=0)
    last_input_size: int = field(init=False, default=0)
    last_output_size: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.threshold = _validate_threshold(self.threshold)

    def __call__(self, series: Sequence[Any]) -> List[Any]:
        result, dropped, cleaned, emitted = _downsample(series, self.threshold)
        self.last_dropped = dropped
        self.dropped_total += dropped
        self.last_input_size = cleaned
        self.last_output_size = emitted
        if dropped:
            logger.debug("LTTB dropped %d malformed points of %d", dropped, len(series))
        return result

    def reset(self) -> None:
        self.dropped_total = 0
        self.last_dropped = 0
        self.last_input_size = 0
        self.last_output_size = 0


__all__ = [
    "Downsampler",
    "LINE_THRESHOLD",
    "SCATTER_THRESHOLD",
    "clean_series",
    "downsample_lttb",
    "lttb_indices",
]
