"""Runtime configuration for the buffer, views, and render loop."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
import math
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Tuple

import yaml

from ..analysis.lttb import LINE_THRESHOLD, SCATTER_THRESHOLD
from ..core.models import (
    AGGREGATION_BUCKETS_MS,
    ChartDimensions,
    ConfigurationError,
    FilterConfig,
    Padding,
)
from ..data.stream_buffer import DEFAULT_EVICTION_FRACTION, DEFAULT_WINDOW_CAPACITY


def _default_views() -> Dict[str, int]:
    return {"line": LINE_THRESHOLD, "scatter": SCATTER_THRESHOLD}


@dataclass
class DashboardConfig:
    """
    Tuning knobs for how samples are retained, reduced, and drawn.

    The defaults keep 10k samples, stream a point every 100 ms, and render
    a 600-point line view plus a 2000-point scatter view at 60 fps.
    """

    window_capacity: int = DEFAULT_WINDOW_CAPACITY
    eviction_fraction: float = DEFAULT_EVICTION_FRACTION
    target_fps: float = 60.0
    stream_interval_ms: int = 100

    aggregation: str = "none"
    categories: Tuple[str, ...] = ()

    views: Dict[str, int] = field(default_factory=_default_views)

    chart_width: float = 700.0
    chart_height: float = 350.0
    padding: Tuple[float, float, float, float] = (20.0, 20.0, 40.0, 60.0)

    def validated(self) -> "DashboardConfig":
        """Return a normalized copy, raising :class:`ConfigurationError` on bad values."""
        capacity = _as_int(self.window_capacity, "window_capacity")
        if capacity <= 0:
            raise ConfigurationError(f"window_capacity must be > 0, got {capacity}")

        fraction = _as_float(self.eviction_fraction, "eviction_fraction")
        if not (0.0 < fraction <= 1.0):
            raise ConfigurationError(f"eviction_fraction must be within (0, 1], got {fraction}")

        fps = _as_float(self.target_fps, "target_fps")
        if fps <= 0:
            raise ConfigurationError(f"target_fps must be > 0, got {fps}")

        interval = _as_int(self.stream_interval_ms, "stream_interval_ms")
        if interval <= 0:
            raise ConfigurationError(f"stream_interval_ms must be > 0, got {interval}")

        aggregation = str(self.aggregation or "none").strip().lower()
        if aggregation not in AGGREGATION_BUCKETS_MS:
            raise ConfigurationError(
                f"aggregation must be one of {sorted(AGGREGATION_BUCKETS_MS)}, got {self.aggregation!r}"
            )

        if not isinstance(self.views, Mapping) or not self.views:
            raise ConfigurationError("views must be a non-empty mapping of name -> threshold")
        views = {str(name): _as_int(threshold, f"views.{name}") for name, threshold in self.views.items()}
        for name, threshold in views.items():
            if threshold <= 0:
                raise ConfigurationError(f"views.{name} must be > 0, got {threshold}")

        padding = tuple(_as_float(p, "padding") for p in self.padding)
        if len(padding) != 4:
            raise ConfigurationError(f"padding must have 4 entries (top, right, bottom, left), got {len(padding)}")

        return DashboardConfig(
            window_capacity=capacity,
            eviction_fraction=fraction,
            target_fps=fps,
            stream_interval_ms=interval,
            aggregation=aggregation,
            categories=tuple(str(c) for c in self.categories),
            views=views,
            chart_width=_as_float(self.chart_width, "chart_width"),
            chart_height=_as_float(self.chart_height, "chart_height"),
            padding=padding,
        )

    def filter_config(self) -> FilterConfig:
        return FilterConfig.from_preset(self.aggregation, self.categories)

    def dimensions(self) -> ChartDimensions:
        top, right, bottom, left = self.padding
        return ChartDimensions(
            width=self.chart_width,
            height=self.chart_height,
            padding=Padding(top=top, right=right, bottom=bottom, left=left),
        )


def _as_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return number


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    number = _as_float(value, name)
    if not number.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return int(number)


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`DashboardConfig`."""
    return {f.name for f in fields(DashboardConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``dashboard`` block and coerce list values."""
    merged: MutableMapping[str, Any] = {}
    for key, value in data.items():
        if key == "dashboard" and isinstance(value, Mapping):
            merged.update(value)
        else:
            merged[key] = value
    for key in ("categories", "padding"):
        if isinstance(merged.get(key), list):
            merged[key] = tuple(merged[key])
    return merged


def config_from_mapping(data: Mapping[str, Any] | None) -> DashboardConfig:
    """Build :class:`DashboardConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return DashboardConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return DashboardConfig(**payload).validated()


def load_config(path: str | Path | None) -> DashboardConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`DashboardConfig`.
    """
    if path is None:
        return DashboardConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return DashboardConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Could not parse {cfg_path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


def save_config(path: str | Path, config: DashboardConfig) -> None:
    """Write ``config`` as YAML under a ``dashboard`` key."""
    cfg_path = Path(path)
    if cfg_path.parent and not cfg_path.parent.exists():
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "dashboard": {
            "window_capacity": config.window_capacity,
            "eviction_fraction": config.eviction_fraction,
            "target_fps": config.target_fps,
            "stream_interval_ms": config.stream_interval_ms,
            "aggregation": config.aggregation,
            "categories": list(config.categories),
            "views": dict(config.views),
            "chart_width": config.chart_width,
            "chart_height": config.chart_height,
            "padding": list(config.padding),
        }
    }
    with cfg_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)


__all__ = ["DashboardConfig", "config_from_mapping", "load_config", "save_config"]
