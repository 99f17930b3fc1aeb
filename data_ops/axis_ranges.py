"""
Per-curve fixed value ranges.

The first batch that carries numeric values for a curve decides that curve's
axis bounds for the rest of the viewer session. Later batches never widen or
narrow a cached range; this keeps track scales steady while the operator
reloads data or toggles curves.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from data_ops.store import CurveSampleStore

logger = logging.getLogger("welllog-viewer")


@dataclass(frozen=True)
class AxisRange:
    """Cached ``[min, max]`` bounds for one curve."""

    curve_name: str
    min: float
    max: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


class AxisRangeCache:
    """Session-owned map of curve name -> AxisRange. Entries are never overwritten."""

    def __init__(self):
        self._ranges: dict[str, AxisRange] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, curve_name: str, batch: CurveSampleStore) -> Optional[AxisRange]:
        """Return the cached range for *curve_name*, computing it from *batch* on a miss.

        On a hit the batch is ignored. On a miss with no numeric values nothing
        is cached and None is returned, so a later batch can still succeed.
        """
        with self._lock:
            cached = self._ranges.get(curve_name)
            if cached is not None:
                return cached

            values = batch.numeric_values(curve_name)
            if values.size == 0:
                logger.debug(f"[AxisRange] No numeric values for '{curve_name}', auto-scaling")
                return None

            axis_range = AxisRange(
                curve_name=curve_name,
                min=float(values.min()),
                max=float(values.max()),
            )
            self._ranges[curve_name] = axis_range
            logger.debug(
                f"[AxisRange] Locked '{curve_name}' to [{axis_range.min}, {axis_range.max}] "
                f"from {values.size} values"
            )
            return axis_range

    def update_from(self, batch: CurveSampleStore, curve_names: Iterable[str]) -> dict[str, AxisRange]:
        """Run get_or_compute for each curve; return the ranges now available."""
        result = {}
        for name in curve_names:
            axis_range = self.get_or_compute(name, batch)
            if axis_range is not None:
                result[name] = axis_range
        return result

    def get(self, curve_name: str) -> Optional[AxisRange]:
        with self._lock:
            return self._ranges.get(curve_name)

    def clear(self) -> None:
        """Drop every cached range (called when the selected well changes)."""
        with self._lock:
            self._ranges.clear()

    def to_dict(self) -> dict[str, list[float]]:
        with self._lock:
            return {name: [r.min, r.max] for name, r in self._ranges.items()}

    def __contains__(self, curve_name: str) -> bool:
        with self._lock:
            return curve_name in self._ranges

    def __len__(self) -> int:
        with self._lock:
            return len(self._ranges)
