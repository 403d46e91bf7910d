from __future__ import annotations

import pytest

from streamdash.analysis.aggregate import aggregate_by_time, bucket_key, bucket_series
from streamdash.core.models import ConfigurationError, Sample


def test_two_buckets_from_three_points() -> None:
    series = [
        Sample(timestamp=0, value=10.0, category="A"),
        Sample(timestamp=50, value=20.0, category="B"),
        Sample(timestamp=1000, value=5.0, category="C"),
    ]
    out = aggregate_by_time(series, 1000)
    assert out == [
        Sample(timestamp=0, value=15.0, category="A"),
        Sample(timestamp=1000, value=5.0, category="C"),
    ]


def test_empty_input_gives_empty_output() -> None:
    assert aggregate_by_time([], 60_000) == []


def test_single_bucket_gives_single_point() -> None:
    series = [Sample(timestamp=t, value=float(t), category="A") for t in range(10)]
    out = aggregate_by_time(series, 1000)
    assert len(out) == 1
    assert out[0].timestamp == 0
    assert out[0].value == pytest.approx(4.5)


def test_output_sorted_even_when_input_is_not() -> None:
    series = [
        Sample(timestamp=3500, value=1.0),
        Sample(timestamp=100, value=2.0),
        Sample(timestamp=2200, value=3.0),
        Sample(timestamp=3900, value=5.0),
    ]
    out = aggregate_by_time(series, 1000)
    assert [s.timestamp for s in out] == [0, 2000, 3000]
    assert out[-1].value == pytest.approx(3.0)


def test_category_is_first_seen_in_bucket() -> None:
    series = [
        Sample(timestamp=10, value=1.0, category="Z"),
        Sample(timestamp=20, value=1.0, category="A"),
        Sample(timestamp=5, value=1.0, category="M"),
    ]
    out = aggregate_by_time(series, 100)
    assert out[0].category == "Z"


def test_bucket_counts_sum_to_input_length() -> None:
    series = [Sample(timestamp=t * 37, value=float(t % 7), category="A") for t in range(500)]
    buckets = bucket_series(series, 1000)
    assert sum(b.count for b in buckets) == len(series)
    out = aggregate_by_time(series, 1000)
    assert len(out) == len(buckets)
    assert [s.timestamp for s in out] == sorted(s.timestamp for s in out)


def test_negative_timestamps_floor_toward_minus_infinity() -> None:
    assert bucket_key(-1, 1000) == -1000
    assert bucket_key(-1000, 1000) == -1000
    assert bucket_key(999, 1000) == 0


@pytest.mark.parametrize("width", [0, -60_000, None, "1min", "60000", float("nan")])
def test_invalid_bucket_width_is_a_configuration_error(width) -> None:
    with pytest.raises(ConfigurationError):
        aggregate_by_time([Sample(timestamp=0, value=1.0)], width)
