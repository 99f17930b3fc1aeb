"""
Trace assembly: curve samples + interpretation -> renderer-neutral traces.

Nothing here imports plotly. Axis references are plain integers (0 is the
primary axis); rendering/plotly_renderer.py maps them onto Plotly axis ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from data_ops.store import CurveSampleStore

if TYPE_CHECKING:
    from data_ops.interpretation import InterpretationResult

LINE = "line"
MARKER = "marker"


@dataclass
class TraceDefinition:
    """One renderable series.

    Attributes:
        x: Depths.
        y: Values; None marks a gap.
        kind: ``"line"`` or ``"marker"``.
        label: Legend name.
        axis_ref: Index of the value axis this trace is drawn against.
        curve: Source curve name (used for colour assignment).
    """

    x: list[float]
    y: list[Optional[float]]
    kind: str
    label: str
    axis_ref: int
    curve: str = ""


def _gaps_as_none(values) -> list[Optional[float]]:
    return [float(v) if np.isfinite(v) else None for v in values]


def assemble(
    samples: CurveSampleStore,
    selection: Sequence[str],
    interpretation: Optional[InterpretationResult] = None,
) -> list[TraceDefinition]:
    """Build the main chart's traces, in selection order.

    Each selected curve gets a line trace over every stored sample, followed by
    a marker trace when the interpretation flags spike depths for it. Spike
    depths match sample depths exactly.
    """
    traces: list[TraceDefinition] = []
    if not selection:
        return traces

    depths = samples.depths()
    for index, curve in enumerate(selection):
        traces.append(TraceDefinition(
            x=list(depths),
            y=_gaps_as_none(samples.curve_values(curve)),
            kind=LINE,
            label=curve,
            axis_ref=index,
            curve=curve,
        ))

        spike_depths = interpretation.spike_depths(curve) if interpretation else frozenset()
        if not spike_depths:
            continue

        hits = samples.rows_at_depths(spike_depths)
        if curve in hits.columns:
            hit_values = hits[curve].to_numpy(dtype="float64")
        else:
            hit_values = np.full(len(hits), np.nan)
        traces.append(TraceDefinition(
            x=hits.index.tolist(),
            y=_gaps_as_none(hit_values),
            kind=MARKER,
            label=f"{curve} Spikes",
            axis_ref=index,
            curve=curve,
        ))

    return traces


def assemble_cleaned(interpretation: Optional[InterpretationResult]) -> list[TraceDefinition]:
    """One line trace per cleaned curve, in the interpretation's own order.

    Entries lacking depths or values are skipped; cleaned curves do not depend
    on the current selection.
    """
    if interpretation is None:
        return []
    traces = []
    for name, cleaned in interpretation.cleaned_curves.items():
        if not cleaned.is_plottable:
            continue
        traces.append(TraceDefinition(
            x=list(cleaned.depths),
            y=list(cleaned.values),
            kind=LINE,
            label=f"{name} (Cleaned)",
            axis_ref=0,
            curve=name,
        ))
    return traces
