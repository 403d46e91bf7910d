"""Time-bucket aggregation of sample series."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Dict, Iterable, List

from ..core.models import Category, ConfigurationError, Sample, real_number


@dataclass
class Bucket:
    """Running sum for one fixed-width time bucket."""

    bucket_key: int
    sum: float = 0.0
    count: int = 0
    representative_category: Category = ""

    def add(self, value: float) -> None:
        self.sum += value
        self.count += 1

    def mean(self) -> float:
        return self.sum / self.count

    def to_sample(self) -> Sample:
        return Sample(
            timestamp=self.bucket_key,
            value=self.mean(),
            category=self.representative_category,
        )


def _validate_width(bucket_width_ms: int | float) -> float:
    width = real_number(bucket_width_ms)
    if width is None or width <= 0:
        raise ConfigurationError(
            f"bucket_width_ms must be a positive number, got {bucket_width_ms!r}"
        )
    return width


def bucket_key(timestamp: int | float, bucket_width_ms: int | float) -> int:
    """Return the start of the bucket containing ``timestamp``."""
    width = _validate_width(bucket_width_ms)
    return int(math.floor(timestamp / width) * width)


def bucket_series(series: Iterable[Sample], bucket_width_ms: int | float) -> List[Bucket]:
    """
    Group ``series`` into buckets, in order of first appearance.

    The representative category of a bucket is the category of the first
    sample observed in it, so a given input order always yields the same
    labels even when a bucket mixes categories.
    """
    width = _validate_width(bucket_width_ms)
    buckets: Dict[int, Bucket] = {}
    for sample in series:
        key = int(math.floor(sample.timestamp / width) * width)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = Bucket(bucket_key=key, representative_category=sample.category)
            buckets[key] = bucket
        bucket.add(float(sample.value))
    return list(buckets.values())


def aggregate_by_time(series: Iterable[Sample], bucket_width_ms: int | float) -> List[Sample]:
    """
    Reduce ``series`` to one mean sample per ``bucket_width_ms`` bucket.

    Parameters
    ----------
    series:
        Samples in any order.
    bucket_width_ms:
        Bucket width in milliseconds. Must be > 0.

    Returns
    -------
    list[Sample]
        One sample per non-empty bucket, sorted by bucket start time.
    """
    buckets = bucket_series(series, bucket_width_ms)
    return sorted((bucket.to_sample() for bucket in buckets), key=lambda s: s.timestamp)


__all__ = ["Bucket", "aggregate_by_time", "bucket_key", "bucket_series"]
