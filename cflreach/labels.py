"""
cflreach.labels
===============

The closed edge-label alphabet of the points-to graph.

Two families exist:

Base relations
    Emitted by the upstream graph builder: ``Addr`` / ``AddrBar``
    (address-of and its inverse), ``Copy`` / ``CopyBar`` (assignment and
    its inverse), ``Store`` and ``Load``.
Derived relations
    Produced only by the solver: ``PT`` / ``PTBar`` (points-to and its
    inverse), ``PV`` (value stored into an object) and ``VP`` (value
    loaded from an object).

``X`` and ``XBar`` are distinct labels describing the two directions of
the same fact.

Public API
----------
    EdgeLabel       - the label enum
    Edge            - ``(src, dst, label)`` named tuple
    BASE_LABELS     - labels the builder may emit
    DERIVED_LABELS  - labels only the solver emits
"""

from __future__ import annotations

import enum
from typing import Dict, FrozenSet, Hashable, NamedTuple, Optional

from cflreach.errors import UnknownLabelError


class EdgeLabel(enum.Enum):
    """Relation kind carried by an edge."""

    Addr    = "Addr"
    AddrBar = "AddrBar"
    Copy    = "Copy"
    CopyBar = "CopyBar"
    Store   = "Store"
    Load    = "Load"
    PT      = "PT"
    PTBar   = "PTBar"
    PV      = "PV"
    VP      = "VP"

    @classmethod
    def parse(cls, name: str) -> "EdgeLabel":
        """Resolve a label from its name (case-sensitive)."""
        try:
            return cls(name)
        except ValueError:
            raise UnknownLabelError(name) from None

    @property
    def inverse(self) -> Optional["EdgeLabel"]:
        """The label of the opposite-direction edge, if this label has one."""
        return _INVERSES.get(self)

    @property
    def is_base(self) -> bool:
        return self in BASE_LABELS

    @property
    def is_derived(self) -> bool:
        return self in DERIVED_LABELS

    def __str__(self) -> str:
        return self.value


_INVERSES: Dict[EdgeLabel, EdgeLabel] = {
    EdgeLabel.Addr: EdgeLabel.AddrBar,
    EdgeLabel.AddrBar: EdgeLabel.Addr,
    EdgeLabel.Copy: EdgeLabel.CopyBar,
    EdgeLabel.CopyBar: EdgeLabel.Copy,
    EdgeLabel.PT: EdgeLabel.PTBar,
    EdgeLabel.PTBar: EdgeLabel.PT,
}

BASE_LABELS: FrozenSet[EdgeLabel] = frozenset({
    EdgeLabel.Addr,
    EdgeLabel.AddrBar,
    EdgeLabel.Copy,
    EdgeLabel.CopyBar,
    EdgeLabel.Store,
    EdgeLabel.Load,
})

DERIVED_LABELS: FrozenSet[EdgeLabel] = frozenset(EdgeLabel) - BASE_LABELS


class Edge(NamedTuple):
    """A labeled directed edge ``src --label--> dst``."""

    src: Hashable
    dst: Hashable
    label: EdgeLabel

    def reversed(self) -> Optional["Edge"]:
        """The inverse edge, or ``None`` when the label has no inverse."""
        inv = self.label.inverse
        if inv is None:
            return None
        return Edge(self.dst, self.src, inv)

    def __str__(self) -> str:
        return f"{self.src} --{self.label.value}--> {self.dst}"
