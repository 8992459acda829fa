from __future__ import annotations

import numpy as np
import pytest

from double_slit.screen import HitAccumulator


def test_histogram_bins_by_floor() -> None:
    acc = HitAccumulator(bin_size=4.0, recent_capacity=10)
    for y in (150.0, 151.9, 152.0, 60.0, 63.99):
        acc.record(y)
    assert acc.histogram() == {60.0: 2, 148.0: 2, 152.0: 1}
    assert acc.total == 5
    assert acc.max_count() == 2


def test_recent_is_bounded_but_counts_are_not() -> None:
    acc = HitAccumulator(bin_size=4.0, recent_capacity=200)
    ys = np.linspace(60.0, 290.0, 500)
    for y in ys:
        acc.record(y)
    recent = acc.recent()
    assert len(recent) == 200
    assert [h.y for h in recent] == pytest.approx(list(ys[-200:]))
    assert acc.total == 500
    assert sum(acc.histogram().values()) == acc.total


def test_histogram_arrays_are_sorted() -> None:
    acc = HitAccumulator(bin_size=4.0)
    for y in (200.0, 100.0, 150.0, 100.5):
        acc.record(y)
    bins, counts = acc.histogram_arrays()
    assert list(bins) == [100.0, 148.0, 200.0]
    assert list(counts) == [2, 1, 1]


def test_clear_and_empty_state() -> None:
    acc = HitAccumulator()
    assert acc.max_count() == 1
    acc.record(120.0)
    acc.clear()
    assert acc.total == 0
    assert acc.recent() == ()
    assert acc.histogram() == {}
    bins, counts = acc.histogram_arrays()
    assert bins.size == 0 and counts.size == 0


def test_rejects_non_positive_bin_size() -> None:
    with pytest.raises(ValueError):
        HitAccumulator(bin_size=0.0)
