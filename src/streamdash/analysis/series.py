"""Filtering, decimation, and summary helpers for sample series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, List, Sequence

import numpy as np

from ..core.models import Category, Sample


@dataclass(frozen=True)
class DataStatistics:
    min: float
    max: float
    mean: float
    count: int


def filter_by_categories(series: Sequence[Sample], categories: Collection[Category]) -> List[Sample]:
    """Keep samples whose category is in ``categories``; empty means keep all."""
    if not categories:
        return list(series)
    wanted = frozenset(categories)
    return [sample for sample in series if sample.category in wanted]


def filter_by_time_range(series: Sequence[Sample], start_ms: int, end_ms: int) -> List[Sample]:
    """Keep samples with ``start_ms <= timestamp <= end_ms``."""
    if end_ms < start_ms:
        start_ms, end_ms = end_ms, start_ms
    return [sample for sample in series if start_ms <= sample.timestamp <= end_ms]


def decimate(series: Sequence[Sample], factor: int) -> List[Sample]:
    """
    Keep every ``factor``-th sample, always including the last one.

    Cheaper than LTTB but blind to peaks; useful as a baseline.
    """
    if factor <= 1:
        return list(series)
    result = list(series[::factor])
    if series and result[-1] is not series[-1]:
        result.append(series[-1])
    return result


def calculate_statistics(series: Sequence[Sample]) -> DataStatistics:
    """Return min/max/mean/count of the sample values (zeros for an empty series)."""
    if len(series) == 0:
        return DataStatistics(min=0.0, max=0.0, mean=0.0, count=0)
    values = np.fromiter((s.value for s in series), dtype=np.float64, count=len(series))
    return DataStatistics(
        min=float(np.min(values)),
        max=float(np.max(values)),
        mean=float(np.mean(values)),
        count=int(values.size),
    )


__all__ = [
    "DataStatistics",
    "calculate_statistics",
    "decimate",
    "filter_by_categories",
    "filter_by_time_range",
]
