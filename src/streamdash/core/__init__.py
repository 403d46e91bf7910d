"""Core streaming pipeline: models, scales, processing passes, and scheduling.

This package sits between ingestion and drawing: it turns buffer snapshots
into downsampled, mapped frames and paces how often each chart draws them.
Heavier modules (:mod:`pipeline`, :mod:`scheduler`, :mod:`session`,
:mod:`stream_reader`) are imported explicitly by callers.
"""

from .coordinates import CoordinateMapper, compute_bounds
from .models import (
    AGGREGATION_BUCKETS_MS,
    ChartDimensions,
    ConfigurationError,
    FilterConfig,
    Padding,
    Sample,
    ScaleBounds,
)
from .perf_metrics import PerformanceMetrics, PerformanceMonitor

__all__ = [
    "AGGREGATION_BUCKETS_MS",
    "ChartDimensions",
    "ConfigurationError",
    "CoordinateMapper",
    "FilterConfig",
    "Padding",
    "PerformanceMetrics",
    "PerformanceMonitor",
    "Sample",
    "ScaleBounds",
    "compute_bounds",
]
