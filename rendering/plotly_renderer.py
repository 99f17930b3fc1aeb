"""
Plotly adapter for ChartSpec.

This is the only module that knows Plotly's figure and axis shapes:
- render_chart() — builds a fresh go.Figure from a ChartSpec
- export_figure() — writes a figure to HTML, PNG or PDF

Axis index 0 maps to ``yaxis``/``y``; index i maps to ``yaxis{i+1}``/``y{i+1}``.
"""

from __future__ import annotations

from pathlib import Path

import plotly.graph_objects as go

from rendering.plot_spec import ChartSpec
from rendering.traces import MARKER, TraceDefinition

# Threshold: above this many points per trace, use Scattergl (WebGL)
_GL_THRESHOLD = 100_000

# Line colours (golden-ratio HSL spacing, pre-computed hex)
_DEFAULT_COLORS = [
    "#cc6633",
    "#55cc33",
    "#3384cc",
    "#a833cc",
    "#33cc98",
    "#cc3340",
    "#33cccc",
    "#ccbe33",
]

# Spike marker colours, kept apart from the line palette
SPIKE_COLORS = [
    "#ff0000",
    "#ffd700",
    "#ff00ff",
    "#00ffff",
]

_SPIKE_SIZE = 8
_LINE_WIDTH = 2
_GRID_COLOR = "#333"


# ---------------------------------------------------------------------------
# ColorState: stable colouring across full rebuilds
# ---------------------------------------------------------------------------

class ColorState:
    """Tracks curve-to-color assignments so a curve keeps its colour across renders."""

    def __init__(self, palette: list[str] | None = None):
        self.palette = list(palette or _DEFAULT_COLORS)
        self.label_colors: dict[str, str] = {}
        self.color_index: int = 0

    def next_color(self, label: str) -> str:
        """Return a stable colour for *label*, assigning a new one if unseen."""
        if label in self.label_colors:
            return self.label_colors[label]
        color = self.palette[self.color_index % len(self.palette)]
        self.color_index += 1
        self.label_colors[label] = color
        return color


def axis_key(index: int) -> str:
    """Layout key for a value axis: ``yaxis``, ``yaxis2``, ..."""
    return "yaxis" if index == 0 else f"yaxis{index + 1}"


def axis_ref(index: int) -> str:
    """Trace reference for a value axis: ``y``, ``y2``, ..."""
    return "y" if index == 0 else f"y{index + 1}"


def _scatter_cls(n_points: int):
    """Return go.Scattergl for large datasets, go.Scatter otherwise."""
    return go.Scattergl if n_points > _GL_THRESHOLD else go.Scatter


def _base_axis_style() -> dict:
    return dict(
        showline=True,
        linewidth=2,
        linecolor="#ffffff",
        mirror=True,
        gridcolor=_GRID_COLOR,
        zeroline=False,
        tickfont=dict(size=12),
    )


def spike_color(axis_index: int) -> str:
    """Marker colour for spikes on value axis *axis_index*; distinct per axis within a chart."""
    return SPIKE_COLORS[axis_index % len(SPIKE_COLORS)]


def _trace_to_plotly(trace: TraceDefinition, line_colors: ColorState):
    Scatter = _scatter_cls(len(trace.x))
    common = dict(x=trace.x, y=trace.y, name=trace.label, yaxis=axis_ref(trace.axis_ref))
    if trace.kind == MARKER:
        return Scatter(
            **common,
            mode="markers",
            marker=dict(color=spike_color(trace.axis_ref), size=_SPIKE_SIZE),
        )
    return Scatter(
        **common,
        mode="lines",
        connectgaps=False,
        line=dict(width=_LINE_WIDTH, color=line_colors.next_color(trace.label)),
    )


def render_chart(
    spec: ChartSpec,
    color_state: ColorState | None = None,
) -> go.Figure:
    """Build a fresh go.Figure from a ChartSpec.

    Args:
        spec: Chart specification from rendering.plot_spec.
        color_state: Optional ColorState for stable line colours across rebuilds.

    Returns:
        A new figure; nothing is patched in place.
    """
    if color_state is None:
        color_state = ColorState()

    fig = go.Figure()
    for trace in spec.traces:
        fig.add_trace(_trace_to_plotly(trace, color_state))

    layout: dict = dict(
        title=dict(text=spec.title, font=dict(size=18)),
        paper_bgcolor=spec.background,
        plot_bgcolor=spec.background,
        font=dict(color=spec.font_color),
        xaxis=dict(title=dict(text=spec.x_title), showgrid=True, **_base_axis_style()),
        legend=dict(spec.legend),
        height=spec.height,
        margin=dict(spec.margin),
    )

    for ax in spec.axes:
        axis_layout = dict(
            title=dict(text=ax.title),
            showgrid=ax.show_grid,
            side=ax.side,
            **_base_axis_style(),
        )
        if not ax.is_primary:
            axis_layout["overlaying"] = axis_ref(ax.overlaying or 0)
        if ax.range is not None:
            axis_layout.update(autorange=False, range=list(ax.range))
        else:
            axis_layout["autorange"] = True
        if ax.fixed:
            axis_layout["fixedrange"] = True
        layout[axis_key(ax.index)] = axis_layout

    fig.update_layout(**layout)
    return fig


def export_figure(fig: go.Figure, filepath: str, format: str | None = None) -> dict:
    """Write a figure to HTML, PNG or PDF.

    The format defaults to the file extension (``.html`` when there is none).
    PNG and PDF need kaleido.

    Returns:
        Result dict with status, filepath, and size_bytes.
    """
    path = Path(filepath)
    if format is None:
        format = path.suffix.lstrip(".").lower() or "html"
    if format not in ("html", "png", "pdf"):
        return {"status": "error", "message": f"Unsupported export format '{format}'"}
    if path.suffix.lower() != f".{format}":
        path = path.with_name(path.name + f".{format}")

    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    if len(fig.data) == 0:
        return {"status": "error", "message": "No traces to export."}

    try:
        if format == "html":
            fig.write_html(str(path), include_plotlyjs="cdn")
        else:
            fig.write_image(str(path), format=format)
    except Exception as e:
        return {"status": "error", "message": f"{format.upper()} export failed: {e}"}

    if path.exists() and path.stat().st_size > 0:
        return {
            "status": "success",
            "filepath": str(path),
            "size_bytes": path.stat().st_size,
        }
    return {"status": "error", "message": f"{format.upper()} file not created or is empty: {path}"}
