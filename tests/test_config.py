from __future__ import annotations

from pathlib import Path

import pytest

from streamdash.config import DashboardConfig, config_from_mapping, load_config, save_config
from streamdash.core.models import ConfigurationError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "nope.yaml")
    assert cfg == DashboardConfig()
    assert load_config(None) == DashboardConfig()


def test_load_dashboard_block_and_ignore_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "dashboard.yaml"
    path.write_text(
        "\n".join(
            [
                "dashboard:",
                "  window_capacity: 2000",
                "  target_fps: 30",
                "  aggregation: 5min",
                "  categories: [A, C]",
                "  views:",
                "    line: 300",
                "  padding: [10, 10, 20, 30]",
                "plugins:",
                "  - something",
            ]
        ),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.window_capacity == 2000
    assert cfg.target_fps == 30.0
    assert cfg.aggregation == "5min"
    assert cfg.categories == ("A", "C")
    assert cfg.views == {"line": 300}
    assert cfg.padding == (10.0, 10.0, 20.0, 30.0)

    flt = cfg.filter_config()
    assert flt.aggregation_bucket_ms == 300_000
    assert flt.categories == frozenset({"A", "C"})
    dims = cfg.dimensions()
    assert dims.padding.left == 30.0
    assert dims.plot_width == 700.0 - 40.0


def test_flat_mapping_is_accepted() -> None:
    cfg = config_from_mapping({"eviction_fraction": 0.25, "stream_interval_ms": 50.0})
    assert cfg.eviction_fraction == 0.25
    assert cfg.stream_interval_ms == 50
    assert isinstance(cfg.stream_interval_ms, int)


@pytest.mark.parametrize(
    "data",
    [
        {"window_capacity": 0},
        {"window_capacity": 10.5},
        {"window_capacity": True},
        {"eviction_fraction": 0},
        {"eviction_fraction": 2},
        {"target_fps": -1},
        {"target_fps": "fast"},
        {"stream_interval_ms": 0},
        {"aggregation": "2min"},
        {"views": {}},
        {"views": {"line": 0}},
        {"padding": [1, 2, 3]},
    ],
)
def test_invalid_values_raise(data) -> None:
    with pytest.raises(ConfigurationError):
        config_from_mapping(data)


def test_malformed_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("dashboard: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)

    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_save_then_load_preserves_values(tmp_path: Path) -> None:
    original = config_from_mapping(
        {"window_capacity": 500, "aggregation": "1hour", "categories": ["B"], "views": {"a": 10, "b": 20}}
    )
    path = tmp_path / "nested" / "dashboard.yaml"
    save_config(path, original)
    assert path.exists()
    assert load_config(path) == original
