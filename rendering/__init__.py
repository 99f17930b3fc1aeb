"""Curve-to-chart transformation and the Plotly rendering adapter.

traces, axes and plot_spec are renderer-neutral; only plotly_renderer
imports plotly.
"""

from .traces import TraceDefinition, assemble, assemble_cleaned
from .axes import AxisConfig, build_axis_layout
from .plot_spec import (
    ChartSpec,
    InvalidSpec,
    build_plot_spec,
    build_log_chart,
    build_cleaned_chart,
)

__all__ = [
    "TraceDefinition",
    "assemble",
    "assemble_cleaned",
    "AxisConfig",
    "build_axis_layout",
    "ChartSpec",
    "InvalidSpec",
    "build_plot_spec",
    "build_log_chart",
    "build_cleaned_chart",
]
