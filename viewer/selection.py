"""Curve selection: which curves are offered and which are on the chart."""

from typing import Iterable, Iterator, Optional

import config
from data_ops.store import CurveDescriptor


def selectable_curves(
    curves: Iterable[CurveDescriptor],
    excluded: Optional[Iterable[str]] = None,
) -> list[str]:
    """Curve names the operator may pick, in inventory order.

    ``Depth`` and ``Time`` are index channels, not curves, and are dropped by default.
    """
    skip = set(config.EXCLUDED_CURVES if excluded is None else excluded)
    names = []
    for c in curves:
        if c.name in skip or c.name in names:
            continue
        names.append(c.name)
    return names


class CurveSelection:
    """Ordered set of selected curve names, capped at ``max_curves``.

    Order decides trace order, axis order and axis side. Adding beyond the cap
    is ignored.
    """

    def __init__(self, names: Iterable[str] = (), max_curves: Optional[int] = None):
        self.max_curves = max_curves or config.MAX_CURVES
        self._names: list[str] = []
        for name in names:
            self.add(name)

    def add(self, name: str) -> bool:
        """Append *name*; returns False when it is already selected or the cap is reached."""
        if name in self._names or self.is_full:
            return False
        self._names.append(name)
        return True

    def remove(self, name: str) -> bool:
        if name not in self._names:
            return False
        self._names.remove(name)
        return True

    def sync(self, checked: Iterable[str]) -> list[str]:
        """Reconcile with a widget's checked values.

        Curves still checked keep their position; newly checked curves are
        appended in the order given, up to the cap. Returns the resulting names.
        """
        checked = list(checked)
        self._names = [n for n in self._names if n in checked]
        for name in checked:
            self.add(name)
        return self.names

    def clear(self) -> None:
        self._names.clear()

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def is_full(self) -> bool:
        return len(self._names) >= self.max_curves

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __repr__(self) -> str:
        return f"CurveSelection({self._names!r})"
