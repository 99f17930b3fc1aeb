"""
AI interpretation results as consumed by the viewer.

The interpretation service computes statistics, spike depths and cleaned
curves; this module only parses its JSON payload. ``stats``,
``cleanedCurves`` and ``summary`` are each optional, and so is every field
inside them.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from data_ops.store import coerce_number

logger = logging.getLogger("welllog-viewer")

NO_SUMMARY_TEXT = "No interpretation available."


@dataclass
class CurveStats:
    """Per-curve statistics plus the depths flagged as spikes."""

    median: Optional[float] = None
    mean: Optional[float] = None
    std_dev: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    spike_depths: frozenset = frozenset()

    @classmethod
    def from_dict(cls, d: dict) -> "CurveStats":
        if not isinstance(d, dict):
            return cls()
        raw_spikes = d.get("spikeDepths") or []
        if not isinstance(raw_spikes, (list, tuple, set, frozenset)):
            raw_spikes = []
        spikes = frozenset(
            v for v in (coerce_number(s) for s in raw_spikes) if v is not None
        )
        return cls(
            median=coerce_number(d.get("median")),
            mean=coerce_number(d.get("mean")),
            std_dev=coerce_number(d.get("stdDev")),
            min=coerce_number(d.get("min")),
            max=coerce_number(d.get("max")),
            spike_depths=spikes,
        )


@dataclass
class CleanedCurve:
    """A denoised curve with its own depth axis (index-aligned ``depths``/``values``)."""

    depths: Optional[list[float]] = None
    values: Optional[list[Optional[float]]] = None

    @property
    def is_plottable(self) -> bool:
        return bool(self.depths) and bool(self.values)

    @classmethod
    def from_dict(cls, d: dict) -> "CleanedCurve":
        if not isinstance(d, dict):
            return cls()
        depths = d.get("depths")
        values = d.get("values")
        return cls(
            depths=[coerce_number(v) for v in depths] if isinstance(depths, list) else None,
            values=[coerce_number(v) for v in values] if isinstance(values, list) else None,
        )


@dataclass
class InterpretationResult:
    """Parsed interpretation payload. Replaced wholesale on every successful call."""

    stats: dict[str, CurveStats] = field(default_factory=dict)
    cleaned_curves: dict[str, CleanedCurve] = field(default_factory=dict)
    summary: Optional[str] = None

    def spike_depths(self, curve: str) -> frozenset:
        stats = self.stats.get(curve)
        return stats.spike_depths if stats is not None else frozenset()

    @property
    def summary_text(self) -> str:
        return self.summary or NO_SUMMARY_TEXT

    @classmethod
    def from_dict(cls, payload) -> "InterpretationResult":
        """Parse the service payload, tolerating any missing section.

        Raises:
            ValueError: If the payload is not a JSON object.
        """
        if not isinstance(payload, dict):
            raise ValueError(
                f"Expected an interpretation object, got {type(payload).__name__}"
            )

        raw_stats = payload.get("stats")
        stats = {}
        if isinstance(raw_stats, dict):
            stats = {str(name): CurveStats.from_dict(s) for name, s in raw_stats.items()}

        raw_cleaned = payload.get("cleanedCurves")
        cleaned = {}
        if isinstance(raw_cleaned, dict):
            cleaned = {str(name): CleanedCurve.from_dict(c) for name, c in raw_cleaned.items()}

        summary = payload.get("summary")
        if summary is not None and not isinstance(summary, str):
            summary = str(summary)

        missing = [k for k in ("stats", "cleanedCurves", "summary") if k not in payload]
        if missing:
            logger.debug(f"[Interpretation] Partial result, missing: {', '.join(missing)}")

        return cls(stats=stats, cleaned_curves=cleaned, summary=summary or None)
