"""Shared dataclasses for samples, filters, and chart geometry."""

from __future__ import annotations

import math
from numbers import Real
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Tuple

Category = str
TimeRange = Tuple[int, int]

# Named aggregation presets offered by the filter panel.
AGGREGATION_BUCKETS_MS: dict[str, Optional[int]] = {
    "none": None,
    "1min": 60_000,
    "5min": 300_000,
    "1hour": 3_600_000,
}


class ConfigurationError(ValueError):
    """Raised when a caller supplies parameters the pipeline cannot honour."""


def coerce_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(number):
        return None
    return number


def real_number(value: Any) -> Optional[float]:
    """Like :func:`coerce_number` but only for real numbers; strings are not parsed."""
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True, slots=True)
class Sample:
    """One timestamped, categorized observation (timestamp in milliseconds)."""

    timestamp: int
    value: float
    category: Category = ""

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "Sample":
        """
        Build a sample from a loosely typed mapping (JSON record, dict row).

        Raises
        ------
        ConfigurationError
            If ``timestamp`` or ``value`` is missing or not numeric.
        """
        ts = coerce_number(record.get("timestamp"))
        if ts is None:
            raise ConfigurationError(f"Sample is missing a numeric timestamp: {record!r}")
        value = coerce_number(record.get("value"))
        if value is None:
            raise ConfigurationError(f"Sample is missing a numeric value: {record!r}")
        category = record.get("category")
        return cls(
            timestamp=int(ts),
            value=value,
            category="" if category is None else str(category),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "value": self.value, "category": self.category}


def ensure_sample(sample: Any) -> Sample:
    """Validate ``sample`` at an ingestion boundary."""
    if not isinstance(sample, Sample):
        raise ConfigurationError(
            f"Expected Sample, got {type(sample).__name__}"
        )
    if real_number(sample.timestamp) is None or real_number(sample.value) is None:
        raise ConfigurationError(f"Sample has non-numeric fields: {sample!r}")
    return sample


@dataclass(frozen=True)
class ScaleBounds:
    value_min: float
    value_max: float
    time_min: float
    time_max: float


@dataclass(frozen=True)
class Padding:
    top: float = 20.0
    right: float = 20.0
    bottom: float = 40.0
    left: float = 60.0


@dataclass(frozen=True)
class ChartDimensions:
    """Canvas size in pixels plus the padding around the plot rectangle."""

    width: float = 700.0
    height: float = 350.0
    padding: Padding = field(default_factory=Padding)

    @property
    def plot_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def plot_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom


@dataclass(frozen=True)
class FilterConfig:
    """
    Consumer-owned view filter, passed by value into the pipeline.

    ``categories`` empty means "all categories". ``aggregation_bucket_ms`` of
    ``None`` disables time-bucket aggregation. ``time_range`` is an inclusive
    ``(start_ms, end_ms)`` window or ``None`` for no time restriction.
    """

    categories: frozenset[Category] = frozenset()
    aggregation_bucket_ms: Optional[int] = None
    time_range: Optional[TimeRange] = None

    def __post_init__(self) -> None:
        # Accept any iterable of labels but store an immutable set.
        if not isinstance(self.categories, frozenset):
            object.__setattr__(self, "categories", frozenset(str(c) for c in self.categories))
        width = self.aggregation_bucket_ms
        if width is not None:
            number = real_number(width)
            if number is None or number <= 0:
                raise ConfigurationError(
                    f"aggregation_bucket_ms must be a positive number, got {width!r}"
                )
        if self.time_range is not None:
            start, end = self.time_range
            if start > end:
                object.__setattr__(self, "time_range", (end, start))

    @classmethod
    def from_preset(
        cls,
        aggregation: str = "none",
        categories: Iterable[Category] = (),
        time_range: Optional[TimeRange] = None,
    ) -> "FilterConfig":
        key = str(aggregation or "none").strip().lower()
        if key not in AGGREGATION_BUCKETS_MS:
            raise ConfigurationError(
                f"Unknown aggregation {aggregation!r}; expected one of {sorted(AGGREGATION_BUCKETS_MS)}"
            )
        return cls(
            categories=frozenset(str(c) for c in categories),
            aggregation_bucket_ms=AGGREGATION_BUCKETS_MS[key],
            time_range=time_range,
        )


__all__ = [
    "AGGREGATION_BUCKETS_MS",
    "Category",
    "ChartDimensions",
    "ConfigurationError",
    "FilterConfig",
    "Padding",
    "Sample",
    "ScaleBounds",
    "TimeRange",
    "coerce_number",
    "ensure_sample",
    "real_number",
]
