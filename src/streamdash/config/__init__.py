"""Configuration objects and helpers for streamdash.

:mod:`runtime` loads a YAML file (``dashboard.yaml`` by convention) into a
typed :class:`DashboardConfig` that sizes the sample window, picks the
per-view point budgets, and sets the target frame rate.
"""

from .runtime import DashboardConfig, config_from_mapping, load_config, save_config

__all__ = ["DashboardConfig", "config_from_mapping", "load_config", "save_config"]
