"""
Unit tests for the Plotly renderer.

No network — fast and self-contained.
"""

import plotly.graph_objects as go
import pytest

from data_ops.axis_ranges import AxisRangeCache
from data_ops.interpretation import InterpretationResult
from data_ops.store import CurveSampleStore
from rendering.plot_spec import build_cleaned_chart, build_log_chart
from rendering.plotly_renderer import (
    SPIKE_COLORS,
    ColorState,
    axis_key,
    axis_ref,
    export_figure,
    render_chart,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _make_store(n: int = 20, curves=("GR", "RHOB", "NPHI")) -> CurveSampleStore:
    """Create a synthetic store with one reading per curve at each depth."""
    rows = []
    for i in range(n):
        rows.append({
            "depth": 1000 + i * 0.5,
            "values": {c: float(i + j * 100) for j, c in enumerate(curves)},
        })
    return CurveSampleStore.from_records(rows)


def _spikes(**per_curve):
    return InterpretationResult.from_dict(
        {"stats": {c: {"spikeDepths": list(d)} for c, d in per_curve.items()}}
    )


def _render(selection=("GR", "RHOB", "NPHI"), interpretation=None, cache=None):
    spec = build_log_chart(_make_store(), list(selection), cache or AxisRangeCache(), interpretation)
    return render_chart(spec)


# ---------------------------------------------------------------------------
# Axis ids
# ---------------------------------------------------------------------------

class TestAxisIds:
    def test_keys(self):
        assert [axis_key(i) for i in range(3)] == ["yaxis", "yaxis2", "yaxis3"]

    def test_refs(self):
        assert [axis_ref(i) for i in range(3)] == ["y", "y2", "y3"]


# ---------------------------------------------------------------------------
# render_chart
# ---------------------------------------------------------------------------

class TestRenderChart:
    def test_returns_fresh_figure(self):
        fig = _render()
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 3
        assert _render() is not fig

    def test_traces_bound_to_their_axes(self):
        fig = _render()
        assert [t.yaxis for t in fig.data] == ["y", "y2", "y3"]
        assert [t.name for t in fig.data] == ["GR", "RHOB", "NPHI"]

    def test_overlay_axes(self):
        fig = _render()
        assert fig.layout.yaxis.overlaying is None
        assert fig.layout.yaxis2.overlaying == "y"
        assert fig.layout.yaxis3.overlaying == "y"
        assert fig.layout.yaxis.side == "left"
        assert fig.layout.yaxis2.side == "right"
        assert fig.layout.yaxis3.side == "left"

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_grid_only_on_primary(self, n):
        fig = _render(selection=("GR", "RHOB", "NPHI")[:n])
        assert fig.layout.yaxis.showgrid is True
        for i in range(1, n):
            assert fig.layout[axis_key(i)].showgrid is False

    def test_cached_ranges_are_fixed(self):
        fig = _render(selection=("GR",))
        assert tuple(fig.layout.yaxis.range) == (0.0, 19.0)
        assert fig.layout.yaxis.fixedrange is True
        assert fig.layout.yaxis.autorange is False

    def test_range_survives_new_batch(self):
        cache = AxisRangeCache()
        render_chart(build_log_chart(_make_store(n=5), ["GR"], cache))
        fig = render_chart(build_log_chart(_make_store(n=50), ["GR"], cache))
        assert tuple(fig.layout.yaxis.range) == (0.0, 4.0)

    def test_lines_do_not_connect_gaps(self):
        fig = _render(selection=("GR",))
        assert fig.data[0].mode == "lines"
        assert fig.data[0].connectgaps is False

    def test_layout_metadata(self):
        fig = _render()
        assert fig.layout.title.text == "Well Log Curves vs Depth"
        assert fig.layout.xaxis.title.text == "Depth"
        assert fig.layout.paper_bgcolor == "#1e1e1e"
        assert fig.layout.height == 700
        assert fig.layout.legend.orientation == "h"


class TestColors:
    def test_spike_markers_distinct_per_curve(self):
        fig = _render(
            selection=("GR", "RHOB"),
            interpretation=_spikes(GR=[1000.0, 1001.0], RHOB=[1002.0]),
        )
        markers = [t for t in fig.data if t.mode == "markers"]
        assert [t.name for t in markers] == ["GR Spikes", "RHOB Spikes"]
        assert markers[0].marker.color != markers[1].marker.color
        assert markers[0].marker.color in SPIKE_COLORS
        assert markers[0].yaxis == "y"
        assert markers[1].yaxis == "y2"

    def test_spike_colors_distinct_after_many_curves(self):
        """Curves seen earlier in the session never force a shared marker colour."""
        names = ["A", "B", "C", "D", "E"]
        store = CurveSampleStore.from_records([
            {"depth": 1000 + i, "values": {n: float(i + j) for j, n in enumerate(names)}}
            for i in range(3)
        ])
        interp = _spikes(**{n: [1001.0] for n in names})
        cache = AxisRangeCache()
        state = ColorState()
        for selection in (["A", "B", "C"], ["D"], ["A", "E"]):
            fig = render_chart(build_log_chart(store, selection, cache, interp), state)
            colors = [t.marker.color for t in fig.data if t.mode == "markers"]
            assert len(colors) == len(selection)
            assert len(set(colors)) == len(selection)

    def test_line_colors_stable_across_rebuilds(self):
        state = ColorState()
        cache = AxisRangeCache()
        store = _make_store()
        first = render_chart(build_log_chart(store, ["GR", "RHOB"], cache), state)
        second = render_chart(build_log_chart(store, ["RHOB", "GR"], cache), state)
        first_colors = {t.name: t.line.color for t in first.data}
        second_colors = {t.name: t.line.color for t in second.data}
        assert first_colors == second_colors

    def test_color_state_cycles(self):
        state = ColorState(["#000", "#111"])
        assert [state.next_color(x) for x in "abc"] == ["#000", "#111", "#000"]
        assert state.next_color("a") == "#000"


class TestCleanedChart:
    def test_single_autoscaled_axis(self):
        interp = InterpretationResult.from_dict(
            {"cleanedCurves": {"GR": {"depths": [1, 2, 3], "values": [10, 20, 30]}}}
        )
        fig = render_chart(build_cleaned_chart(interp))
        assert len(fig.data) == 1
        assert fig.data[0].name == "GR (Cleaned)"
        assert fig.layout.yaxis.title.text == "Cleaned Values"
        assert fig.layout.yaxis.autorange is True
        assert fig.layout.yaxis.fixedrange is None
        assert fig.layout.height == 500


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

class TestExport:
    def test_export_html(self, tmp_path):
        fig = _render()
        result = export_figure(fig, str(tmp_path / "chart.html"))
        assert result["status"] == "success"
        assert result["size_bytes"] > 0
        assert (tmp_path / "chart.html").exists()

    def test_export_adds_extension(self, tmp_path):
        fig = _render()
        result = export_figure(fig, str(tmp_path / "chart"), format="html")
        assert result["status"] == "success"
        assert result["filepath"].endswith("chart.html")

    def test_export_empty_figure(self, tmp_path):
        result = export_figure(go.Figure(), str(tmp_path / "empty.html"))
        assert result["status"] == "error"
        assert "No traces" in result["message"]

    def test_unsupported_format(self, tmp_path):
        result = export_figure(_render(), str(tmp_path / "chart.svg"))
        assert result["status"] == "error"
        assert "svg" in result["message"]
