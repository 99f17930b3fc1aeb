"""
In-memory curve sample store.

CurveSample holds a single depth station as delivered by the well service.
CurveSampleStore holds the currently loaded batch as a pandas DataFrame
(float ``depth`` index + one float column per curve, NaN where the source
had no numeric reading).
"""

import logging
import math
import numbers
import threading
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd

logger = logging.getLogger("welllog-viewer")

DEPTH_INDEX = "depth"


def coerce_number(value) -> Optional[float]:
    """Return *value* as a finite float, or None if it is absent or non-numeric.

    Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    try:
        f = float(value)
    except OverflowError:
        return None
    if not math.isfinite(f):
        return None
    return f


@dataclass
class WellInfo:
    """A well as listed by the well service.

    Attributes:
        id: Service-side well identifier.
        name: Display name (may be empty).
        start_depth: Top of the logged interval (0 if unknown).
        stop_depth: Bottom of the logged interval (0 if unknown).
    """

    id: str
    name: str = ""
    start_depth: float = 0.0
    stop_depth: float = 0.0

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @classmethod
    def from_dict(cls, d: dict) -> "WellInfo":
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name") or ""),
            start_depth=coerce_number(d.get("start_depth")) or 0.0,
            stop_depth=coerce_number(d.get("stop_depth")) or 0.0,
        )


@dataclass(frozen=True)
class CurveDescriptor:
    """A curve available for a well."""

    name: str

    @classmethod
    def from_dict(cls, d: dict) -> Optional["CurveDescriptor"]:
        name = d.get("name") if isinstance(d, dict) else None
        if not name:
            return None
        return cls(name=str(name))


@dataclass
class CurveSample:
    """One depth station.

    ``values`` may omit any curve; entries that are present but non-numeric
    are kept as None so they render as gaps.
    """

    depth: float
    values: dict[str, Optional[float]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict) -> Optional["CurveSample"]:
        """Parse a ``{depth, values}`` row, or return None if it has no usable depth."""
        if not isinstance(d, dict):
            return None
        depth = coerce_number(d.get("depth"))
        if depth is None:
            return None
        raw = d.get("values")
        if not isinstance(raw, dict):
            raw = {}
        return cls(depth=depth, values={str(k): coerce_number(v) for k, v in raw.items()})


def parse_sample_batch(payload) -> list[CurveSample]:
    """Convert a well-service data payload into CurveSamples, keeping row order.

    Rows without a numeric depth are dropped. Duplicate depths are kept.

    Raises:
        ValueError: If the payload is not a list.
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of samples, got {type(payload).__name__}")
    samples: list[CurveSample] = []
    dropped = 0
    for row in payload:
        sample = CurveSample.from_dict(row)
        if sample is None:
            dropped += 1
            continue
        samples.append(sample)
    if dropped:
        logger.debug(f"[Store] Dropped {dropped} sample rows without a numeric depth")
    return samples


def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame(index=pd.Index([], dtype="float64", name=DEPTH_INDEX))


def _samples_to_frame(samples: list[CurveSample]) -> pd.DataFrame:
    if not samples:
        return _empty_frame()
    index = pd.Index([s.depth for s in samples], dtype="float64", name=DEPTH_INDEX)
    df = pd.DataFrame([s.values for s in samples], index=index)
    return df.astype("float64")


class CurveSampleStore:
    """Holds the currently loaded depth-indexed samples for one viewer session."""

    def __init__(self, samples: Optional[list[CurveSample]] = None):
        self._frame = _empty_frame()
        self._lock = threading.RLock()
        if samples:
            self.put_batch(samples)

    @classmethod
    def from_records(cls, records: list[dict]) -> "CurveSampleStore":
        """Build a store straight from a ``[{depth, values}, ...]`` payload."""
        return cls(parse_sample_batch(records))

    def put_batch(self, samples: list[CurveSample]) -> None:
        """Replace the stored samples with *samples* (store order = batch order)."""
        frame = _samples_to_frame(samples)
        with self._lock:
            self._frame = frame
        logger.debug(f"[Store] Loaded {len(frame)} samples, curves={list(frame.columns)}")

    def depths(self) -> list[float]:
        with self._lock:
            return self._frame.index.tolist()

    def curve_names(self) -> list[str]:
        with self._lock:
            return [str(c) for c in self._frame.columns]

    def curve_values(self, curve: str) -> np.ndarray:
        """Float array aligned with ``depths()``; NaN where the curve has no reading."""
        with self._lock:
            if curve not in self._frame.columns:
                return np.full(len(self._frame), np.nan)
            return self._frame[curve].to_numpy(dtype="float64")

    def numeric_values(self, curve: str) -> np.ndarray:
        """Only the finite values of *curve*, in store order."""
        vals = self.curve_values(curve)
        return vals[np.isfinite(vals)]

    def rows_at_depths(self, depths) -> pd.DataFrame:
        """Rows whose depth is exactly a member of *depths*, in store order."""
        with self._lock:
            mask = self._frame.index.isin(list(depths))
            return self._frame[mask]

    def clear(self) -> None:
        with self._lock:
            self._frame = _empty_frame()

    def summary(self) -> dict:
        """Return a compact summary dict for logs and the UI."""
        with self._lock:
            n = len(self._frame)
            return {
                "num_points": n,
                "curves": self.curve_names(),
                "depth_min": float(self._frame.index.min()) if n > 0 else None,
                "depth_max": float(self._frame.index.max()) if n > 0 else None,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._frame)
