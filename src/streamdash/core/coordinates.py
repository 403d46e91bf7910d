"""Linear mapping between data space (time, value) and pixel space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike

from .models import ChartDimensions, ConfigurationError, Sample, ScaleBounds

# Value axis headroom applied by compute_bounds, as a fraction of the span.
VALUE_PADDING_RATIO = 0.1
EMPTY_BOUNDS = ScaleBounds(value_min=0.0, value_max=100.0, time_min=0.0, time_max=1.0)


def compute_bounds(series: Sequence[Sample], value_padding_ratio: float = VALUE_PADDING_RATIO) -> ScaleBounds:
    """
    Scan ``series`` once for its time and value extent.

    The value range is widened by ``value_padding_ratio`` of its span on both
    sides. An empty series yields :data:`EMPTY_BOUNDS`.
    """
    if len(series) == 0:
        return EMPTY_BOUNDS
    value_min = float("inf")
    value_max = float("-inf")
    time_min = float("inf")
    time_max = float("-inf")
    for sample in series:
        value = sample.value
        ts = sample.timestamp
        if value < value_min:
            value_min = value
        if value > value_max:
            value_max = value
        if ts < time_min:
            time_min = ts
        if ts > time_max:
            time_max = ts
    pad = (value_max - value_min) * value_padding_ratio
    return ScaleBounds(
        value_min=float(value_min - pad),
        value_max=float(value_max + pad),
        time_min=float(time_min),
        time_max=float(time_max),
    )


@dataclass(frozen=True)
class CoordinateMapper:
    """
    Pure, invertible linear scales into the padded plot rectangle.

    Time grows left to right from ``padding.left``; value grows bottom to top
    from ``height - padding.bottom``. A zero-width range maps every input to
    the middle of its axis and inverts back to the range's single value.
    """

    dimensions: ChartDimensions
    value_min: float
    value_max: float
    time_min: float
    time_max: float

    def __post_init__(self) -> None:
        if self.dimensions.plot_width <= 0 or self.dimensions.plot_height <= 0:
            raise ConfigurationError(
                "plot area must be positive after padding, got "
                f"{self.dimensions.plot_width}x{self.dimensions.plot_height}"
            )

    @classmethod
    def from_bounds(cls, dimensions: ChartDimensions, bounds: ScaleBounds) -> "CoordinateMapper":
        return cls(
            dimensions=dimensions,
            value_min=bounds.value_min,
            value_max=bounds.value_max,
            time_min=bounds.time_min,
            time_max=bounds.time_max,
        )

    @classmethod
    def from_series(cls, dimensions: ChartDimensions, series: Sequence[Sample]) -> "CoordinateMapper":
        return cls.from_bounds(dimensions, compute_bounds(series))

    @property
    def bounds(self) -> ScaleBounds:
        return ScaleBounds(self.value_min, self.value_max, self.time_min, self.time_max)

    @property
    def _time_span(self) -> float:
        return self.time_max - self.time_min

    @property
    def _value_span(self) -> float:
        return self.value_max - self.value_min

    def time_to_x(self, timestamp: float) -> float:
        span = self._time_span
        normalized = 0.5 if span == 0 else (timestamp - self.time_min) / span
        return self.dimensions.padding.left + normalized * self.dimensions.plot_width

    def value_to_y(self, value: float) -> float:
        span = self._value_span
        normalized = 0.5 if span == 0 else (value - self.value_min) / span
        return self.dimensions.height - self.dimensions.padding.bottom - normalized * self.dimensions.plot_height

    def x_to_time(self, x: float) -> float:
        normalized = (x - self.dimensions.padding.left) / self.dimensions.plot_width
        return self.time_min + normalized * self._time_span

    def y_to_value(self, y: float) -> float:
        normalized = (self.dimensions.height - self.dimensions.padding.bottom - y) / self.dimensions.plot_height
        return self.value_min + normalized * self._value_span

    def map_arrays(self, times: ArrayLike, values: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized :meth:`time_to_x` / :meth:`value_to_y`."""
        t = np.asarray(times, dtype=np.float64)
        v = np.asarray(values, dtype=np.float64)
        dims = self.dimensions
        if self._time_span == 0:
            tx = np.full(t.shape, 0.5)
        else:
            tx = (t - self.time_min) / self._time_span
        if self._value_span == 0:
            vy = np.full(v.shape, 0.5)
        else:
            vy = (v - self.value_min) / self._value_span
        xs = dims.padding.left + tx * dims.plot_width
        ys = dims.height - dims.padding.bottom - vy * dims.plot_height
        return xs, ys

    def map_series(self, series: Sequence[Sample]) -> Tuple[np.ndarray, np.ndarray]:
        """Return pixel ``(xs, ys)`` arrays for every sample in ``series``."""
        count = len(series)
        times = np.fromiter((s.timestamp for s in series), dtype=np.float64, count=count)
        values = np.fromiter((s.value for s in series), dtype=np.float64, count=count)
        return self.map_arrays(times, values)


__all__ = ["CoordinateMapper", "EMPTY_BOUNDS", "VALUE_PADDING_RATIO", "compute_bounds"]
