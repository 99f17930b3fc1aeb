"""
Unit tests for rendering.axes.

Run with: python -m pytest tests/test_axes.py
"""

import pytest

from data_ops.axis_ranges import AxisRangeCache
from data_ops.store import CurveSampleStore
from rendering.axes import build_axis_layout, single_axis


def _cache_with(**ranges):
    """Create a cache pre-populated with (min, max) per curve."""
    cache = AxisRangeCache()
    for curve, (lo, hi) in ranges.items():
        store = CurveSampleStore.from_records([
            {"depth": 0, "values": {curve: lo}},
            {"depth": 1, "values": {curve: hi}},
        ])
        cache.get_or_compute(curve, store)
    return cache


class TestBuildAxisLayout:
    @pytest.mark.parametrize("selection", [
        ["GR"],
        ["GR", "RHOB"],
        ["GR", "RHOB", "NPHI"],
    ])
    def test_grid_only_on_primary(self, selection):
        axes = build_axis_layout(selection, AxisRangeCache())
        assert axes[0].show_grid is True
        assert all(ax.show_grid is False for ax in axes[1:])

    def test_order_and_titles(self):
        axes = build_axis_layout(["NPHI", "GR", "RHOB"], AxisRangeCache())
        assert [ax.title for ax in axes] == ["NPHI", "GR", "RHOB"]
        assert [ax.index for ax in axes] == [0, 1, 2]

    def test_sides_alternate(self):
        axes = build_axis_layout(["A", "B", "C"], AxisRangeCache())
        assert [ax.side for ax in axes] == ["left", "right", "left"]

    def test_secondary_axes_overlay_primary(self):
        axes = build_axis_layout(["A", "B", "C"], AxisRangeCache())
        assert axes[0].overlaying is None
        assert axes[0].is_primary
        assert [ax.overlaying for ax in axes[1:]] == [0, 0]

    def test_cached_range_locks_axis(self):
        axes = build_axis_layout(["GR"], _cache_with(GR=(5, 15)))
        assert axes[0].range == (5.0, 15.0)
        assert axes[0].fixed is True

    def test_uncached_axis_autoscales(self):
        axes = build_axis_layout(["GR", "RHOB"], _cache_with(GR=(5, 15)))
        assert axes[1].range is None
        assert axes[1].fixed is False

    def test_empty_selection(self):
        assert build_axis_layout([], AxisRangeCache()) == []

    def test_layout_does_not_touch_cache(self):
        cache = AxisRangeCache()
        build_axis_layout(["GR"], cache)
        assert len(cache) == 0


def test_single_axis():
    (ax,) = single_axis("Cleaned Values")
    assert ax.title == "Cleaned Values"
    assert ax.show_grid is True
    assert ax.range is None
    assert ax.fixed is False
