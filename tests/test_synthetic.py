from __future__ import annotations

import numpy as np

from streamdash.data.synthetic import DEFAULT_CATEGORIES, HISTORY_SPACING_MS, SyntheticGenerator


def test_history_is_seeded_spaced_and_clipped() -> None:
    a = SyntheticGenerator(seed=7).history(1_000, end_ms=1_000_000)
    b = SyntheticGenerator(seed=7).history(1_000, end_ms=1_000_000)
    assert a == b

    timestamps = np.array([s.timestamp for s in a])
    assert np.all(np.diff(timestamps) == HISTORY_SPACING_MS)
    assert timestamps[-1] == 1_000_000 - HISTORY_SPACING_MS
    values = np.array([s.value for s in a])
    assert values.min() >= 0.0
    assert values.max() <= 100.0
    assert [s.category for s in a[:6]] == ["A", "B", "C", "D", "E", "A"]


def test_history_of_nothing() -> None:
    assert SyntheticGenerator(seed=1).history(0) == []


def test_walk_steps_are_bounded() -> None:
    gen = SyntheticGenerator(seed=3)
    points = gen.batch(500, last_value=99.0, start_ms=0, spacing_ms=100)
    assert [p.timestamp for p in points] == list(range(0, 50_000, 100))
    previous = 99.0
    for p in points:
        assert abs(p.value - previous) <= 5.0
        assert 0.0 <= p.value <= 100.0
        assert p.category in DEFAULT_CATEGORIES
        previous = p.value


def test_custom_categories() -> None:
    gen = SyntheticGenerator(seed=0, categories=["x", "y"])
    assert {gen.next_point(timestamp_ms=1).category for _ in range(50)} <= {"x", "y"}
