"""
Viewer session — all mutable state behind one browser tab or CLI run.

A ViewerSession owns the sample store, the axis range cache, the current
interpretation and the chat transcript for the selected well. Selecting a
different well discards all of it.

External calls go through ``begin()``/``finish()``: at most one call of each
kind is outstanding, and every call carries a RequestTicket recording the
well, selection and well generation it was issued for. A response whose
ticket no longer matches the session is dropped.
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import plotly.graph_objects as go

from data_ops import fetch
from data_ops.axis_ranges import AxisRangeCache
from data_ops.interpretation import InterpretationResult
from data_ops.store import CurveDescriptor, CurveSample, CurveSampleStore, WellInfo
from rendering.plot_spec import ChartSpec, build_cleaned_chart, build_log_chart
from rendering.plotly_renderer import ColorState, render_chart
from viewer.logging import log_request
from viewer.selection import CurveSelection, selectable_curves

logger = logging.getLogger("welllog-viewer")

# Request kinds
CURVES = "curves"
DATA = "data"
INTERPRET = "interpret"
CHAT = "chat"
UPLOAD = "upload"
DELETE = "delete"

# Kinds whose response is only valid for the selection it was issued with
_SELECTION_BOUND = frozenset({DATA, INTERPRET})

CHAT_FAILED_TEXT = "Chat processing failed."
NO_REPLY_TEXT = "No response"


@dataclass(frozen=True)
class RequestTicket:
    """Identifies one outstanding external call and the state it was issued for."""

    kind: str
    request_id: int
    well_id: str
    generation: int
    curves: tuple[str, ...] = ()
    from_depth: float = 0.0
    to_depth: float = 0.0


def _new_session_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:8]


class ViewerSession:
    """State and workflow for one operator browsing one well at a time."""

    def __init__(self, session_id: Optional[str] = None, max_curves: Optional[int] = None):
        self.session_id = session_id or _new_session_id()
        self.wells: list[WellInfo] = []
        self.well_id = ""
        self.available_curves: list[str] = []
        self.selection = CurveSelection(max_curves=max_curves)
        self.from_depth = 0.0
        self.to_depth = 0.0
        self.samples = CurveSampleStore()
        self.axis_ranges = AxisRangeCache()
        self.interpretation: Optional[InterpretationResult] = None
        self.chat_history: list[dict] = []
        self.color_state = ColorState()

        self._generation = 0
        self._request_seq = 0
        self._pending: dict[str, RequestTicket] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Request bookkeeping
    # ------------------------------------------------------------------

    def begin(self, kind: str, supersede: bool = False) -> Optional[RequestTicket]:
        """Issue a ticket for *kind*, or None if a call of that kind is still pending.

        With ``supersede=True`` a pending call of the same kind is replaced
        instead; its response will fail ``is_current()`` once state has moved on.
        """
        with self._lock:
            if kind in self._pending and not supersede:
                logger.debug(f"[Session] {kind} already pending, ignoring new request")
                return None
            self._request_seq += 1
            ticket = RequestTicket(
                kind=kind,
                request_id=self._request_seq,
                well_id=self.well_id,
                generation=self._generation,
                curves=tuple(self.selection),
                from_depth=self.from_depth,
                to_depth=self.to_depth,
            )
            self._pending[kind] = ticket
            return ticket

    def finish(self, ticket: RequestTicket) -> None:
        """Release the pending slot held by *ticket*."""
        with self._lock:
            if self._pending.get(ticket.kind) == ticket:
                del self._pending[ticket.kind]

    def is_pending(self, kind: str) -> bool:
        with self._lock:
            return kind in self._pending

    def is_current(self, ticket: RequestTicket) -> bool:
        """True if the session still looks the way it did when *ticket* was issued."""
        with self._lock:
            if ticket.generation != self._generation or ticket.well_id != self.well_id:
                return False
            if ticket.kind in _SELECTION_BOUND and ticket.curves != tuple(self.selection):
                return False
            return True

    def _drop_stale(self, ticket: RequestTicket) -> bool:
        if self.is_current(ticket):
            return False
        logger.debug(
            f"[Session] Dropping stale {ticket.kind} response #{ticket.request_id} "
            f"(well={ticket.well_id}, curves={list(ticket.curves)})"
        )
        return True

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def set_wells(self, wells: list[WellInfo]) -> None:
        with self._lock:
            self.wells = list(wells)

    def well(self, well_id: str) -> Optional[WellInfo]:
        for w in self.wells:
            if w.id == well_id:
                return w
        return None

    def reset_well(self, well_id: str = "") -> None:
        """Switch to *well_id* (or to no well), discarding all per-well state."""
        with self._lock:
            self._generation += 1
            self.well_id = well_id
            self.available_curves = []
            self.selection.clear()
            self.samples = CurveSampleStore()
            self.axis_ranges = AxisRangeCache()
            self.interpretation = None
            info = self.well(well_id) if well_id else None
            self.from_depth = info.start_depth if info else 0.0
            self.to_depth = info.stop_depth if info else 0.0

    def set_depth_range(self, from_depth: float, to_depth: float) -> None:
        with self._lock:
            self.from_depth = float(from_depth)
            self.to_depth = float(to_depth)

    def sync_selection(self, checked: list[str]) -> list[str]:
        with self._lock:
            return self.selection.sync(c for c in checked if c in self.available_curves)

    def apply_curves(self, ticket: RequestTicket, curves: list[CurveDescriptor]) -> bool:
        with self._lock:
            if self._drop_stale(ticket):
                return False
            self.available_curves = selectable_curves(curves)
            self.selection.clear()
            if self.available_curves:
                self.selection.add(self.available_curves[0])
            return True

    def apply_samples(self, ticket: RequestTicket, samples: list[CurveSample]) -> bool:
        """Replace the stored batch and lock ranges for newly seen curves."""
        with self._lock:
            if self._drop_stale(ticket):
                return False
            self.samples.put_batch(samples)
            self.axis_ranges.update_from(self.samples, ticket.curves)
            logger.debug(f"[Session] Axis ranges: {self.axis_ranges.to_dict()}")
            return True

    def apply_interpretation(self, ticket: RequestTicket, result: InterpretationResult) -> bool:
        with self._lock:
            if self._drop_stale(ticket):
                return False
            self.interpretation = result
            return True

    def add_chat_message(self, role: str, content: str) -> None:
        with self._lock:
            self.chat_history.append({"role": role, "content": content})

    # ------------------------------------------------------------------
    # Workflows (one external call each; errors propagate to the caller)
    # ------------------------------------------------------------------

    @property
    def can_load_data(self) -> bool:
        return bool(self.well_id) and len(self.selection) > 0

    @property
    def can_interpret(self) -> bool:
        return self.can_load_data and len(self.samples) > 0

    def load_wells(self) -> list[WellInfo]:
        log_request("wells", "", session_id=self.session_id)
        wells = fetch.list_wells()
        self.set_wells(wells)
        return wells

    def select_well(self, well_id: str) -> bool:
        """Switch wells and load the new well's curve inventory.

        Returns False if the curve response went stale before it arrived.
        """
        self.reset_well(well_id)
        if not well_id:
            return True
        ticket = self.begin(CURVES, supersede=True)
        try:
            log_request(CURVES, well_id, session_id=self.session_id)
            curves = fetch.list_curves(well_id)
            return self.apply_curves(ticket, curves)
        finally:
            self.finish(ticket)

    def load_data(self) -> bool:
        """Fetch samples for the current well, depth range and selection."""
        if not self.can_load_data:
            return False
        ticket = self.begin(DATA)
        if ticket is None:
            return False
        try:
            log_request(
                DATA, ticket.well_id,
                f"{ticket.from_depth}-{ticket.to_depth} {list(ticket.curves)}",
                session_id=self.session_id,
            )
            samples = fetch.fetch_curve_data(
                ticket.well_id, ticket.from_depth, ticket.to_depth, list(ticket.curves),
            )
            return self.apply_samples(ticket, samples)
        finally:
            self.finish(ticket)

    def interpret(self) -> bool:
        """Request an AI interpretation for the loaded interval."""
        if not self.can_interpret:
            return False
        ticket = self.begin(INTERPRET)
        if ticket is None:
            return False
        try:
            log_request(INTERPRET, ticket.well_id, str(list(ticket.curves)), session_id=self.session_id)
            result = fetch.request_interpretation(
                ticket.well_id, ticket.from_depth, ticket.to_depth, list(ticket.curves),
            )
            return self.apply_interpretation(ticket, result)
        finally:
            self.finish(ticket)

    def chat(self, message: str) -> Optional[str]:
        """Send a chat turn about the current well and record both sides.

        Returns the reply text, or None if nothing was sent or the reply went stale.
        """
        message = message.strip()
        if not message or not self.well_id:
            return None
        ticket = self.begin(CHAT)
        if ticket is None:
            return None
        try:
            self.add_chat_message("user", message)
            log_request(CHAT, ticket.well_id, session_id=self.session_id)
            reply = fetch.send_chat(ticket.well_id, message) or NO_REPLY_TEXT
            if self._drop_stale(ticket):
                return None
            self.add_chat_message("assistant", reply)
            return reply
        finally:
            self.finish(ticket)

    def upload(self, path: str | Path) -> list[WellInfo]:
        """Upload a LAS file, then refresh the well list."""
        ticket = self.begin(UPLOAD)
        if ticket is None:
            return self.wells
        try:
            log_request(UPLOAD, "", Path(path).name, session_id=self.session_id)
            fetch.upload_las(path)
        finally:
            self.finish(ticket)
        return self.load_wells()

    def delete_well(self, well_id: str) -> list[WellInfo]:
        """Delete a well; if it was the selected one, clear all per-well state."""
        ticket = self.begin(DELETE)
        if ticket is None:
            return self.wells
        try:
            log_request(DELETE, well_id, session_id=self.session_id)
            fetch.delete_well(well_id)
        finally:
            self.finish(ticket)
        if well_id == self.well_id:
            self.reset_well("")
        return self.load_wells()

    # ------------------------------------------------------------------
    # Charts (rebuilt in full on every call)
    # ------------------------------------------------------------------

    def log_chart(self) -> Optional[ChartSpec]:
        with self._lock:
            return build_log_chart(
                self.samples, self.selection.names, self.axis_ranges, self.interpretation,
            )

    def cleaned_chart(self) -> Optional[ChartSpec]:
        with self._lock:
            return build_cleaned_chart(self.interpretation)

    def log_figure(self) -> Optional[go.Figure]:
        spec = self.log_chart()
        if spec is None:
            return None
        return render_chart(spec, self.color_state)

    def cleaned_figure(self) -> Optional[go.Figure]:
        spec = self.cleaned_chart()
        if spec is None:
            return None
        return render_chart(spec, self.color_state)
