"""Series reduction utilities (aggregation, LTTB, filters, statistics).

Modules in this package operate on plain sequences of
:class:`~streamdash.core.models.Sample` and NumPy arrays. They stay free of
threading, Qt, and I/O so they can be reused in command-line scripts,
automated tests, or GUI views alike.
"""

from .aggregate import Bucket, aggregate_by_time, bucket_series
from .lttb import LINE_THRESHOLD, SCATTER_THRESHOLD, Downsampler, clean_series, downsample_lttb
from .series import (
    DataStatistics,
    calculate_statistics,
    decimate,
    filter_by_categories,
    filter_by_time_range,
)

__all__ = [
    "Bucket",
    "DataStatistics",
    "Downsampler",
    "LINE_THRESHOLD",
    "SCATTER_THRESHOLD",
    "aggregate_by_time",
    "bucket_series",
    "calculate_statistics",
    "clean_series",
    "decimate",
    "downsample_lttb",
    "filter_by_categories",
    "filter_by_time_range",
]
