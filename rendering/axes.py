"""
Per-curve value axes for the multi-track log chart.

Axis 0 owns the grid and sits on the left; every further axis overlays it
with its own scale, alternating sides. A curve with a cached range gets a
locked, non-interactive axis; otherwise the axis auto-scales.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from data_ops.axis_ranges import AxisRangeCache

DEPTH_AXIS_TITLE = "Depth"


@dataclass
class AxisConfig:
    index: int
    title: str
    side: str = "left"
    overlaying: Optional[int] = None
    show_grid: bool = True
    range: Optional[tuple[float, float]] = None
    fixed: bool = False

    @property
    def is_primary(self) -> bool:
        return self.index == 0


def build_axis_layout(selection: Sequence[str], axis_ranges: AxisRangeCache) -> list[AxisConfig]:
    """Return one AxisConfig per selected curve, in selection order."""
    axes = []
    for index, curve in enumerate(selection):
        cached = axis_ranges.get(curve)
        axes.append(AxisConfig(
            index=index,
            title=curve,
            side="left" if index % 2 == 0 else "right",
            overlaying=None if index == 0 else 0,
            show_grid=index == 0,
            range=cached.as_tuple() if cached is not None else None,
            fixed=cached is not None,
        ))
    return axes


def single_axis(title: str) -> list[AxisConfig]:
    """A lone auto-scaled, interactive primary axis."""
    return [AxisConfig(index=0, title=title)]
