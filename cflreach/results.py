"""
cflreach.results
================

Query facade over a solved graph.

After :meth:`CFLRSolver.solve` the graph holds the closure.  Downstream
consumers read it through :class:`PointsToResult` rather than poking at
adjacency maps:

>>> result = PointsToResult(graph)
>>> result.points_to(p)           # frozenset of pointees
>>> result.may_alias(p, q)        # bool
>>> result.alias_set(p)           # set of nodes sharing a pointee
>>> list(result.value_flows())    # derived Copy edges
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Hashable, Iterator, List, Mapping, Optional, Set

from cflreach.graph import LabeledGraph
from cflreach.labels import Edge, EdgeLabel


class PointsToResult:
    """Read-only view of the points-to relations in a solved graph."""

    def __init__(self, graph: LabeledGraph) -> None:
        self.graph = graph

    def points_to(self, node: Hashable) -> FrozenSet[Hashable]:
        """Objects *node* may point to."""
        return self.graph.out_neighbors(node, EdgeLabel.PT)

    def pointed_by(self, obj: Hashable) -> FrozenSet[Hashable]:
        """Nodes that may point to *obj*."""
        return self.graph.out_neighbors(obj, EdgeLabel.PTBar)

    def may_alias(self, a: Hashable, b: Hashable) -> bool:
        """Can *a* and *b* point to the same object?"""
        pts_a = self.points_to(a)
        if not pts_a:
            return False
        return not pts_a.isdisjoint(self.points_to(b))

    def must_alias(self, a: Hashable, b: Hashable) -> bool:
        """Do *a* and *b* both point to exactly the same single object?"""
        pts_a = self.points_to(a)
        return len(pts_a) == 1 and pts_a == self.points_to(b)

    def alias_set(self, node: Hashable) -> Set[Hashable]:
        """Every other node sharing at least one pointee with *node*."""
        result: Set[Hashable] = set()
        for obj in self.points_to(node):
            result.update(self.pointed_by(obj))
        result.discard(node)
        return result

    def points_to_map(self) -> Dict[Hashable, FrozenSet[Hashable]]:
        """``node -> pointees`` for every node with a non-empty set."""
        result: Dict[Hashable, FrozenSet[Hashable]] = {}
        for node, by_label in self.graph.successor_map.items():
            targets = by_label.get(EdgeLabel.PT)
            if targets:
                result[node] = frozenset(targets)
        return result

    def value_flows(self) -> Iterator[Edge]:
        """``Copy`` edges, including those induced by store/load pairs."""
        return self.graph.edges(EdgeLabel.Copy)

    def __repr__(self) -> str:
        return f"PointsToResult(pointers={len(self.points_to_map())})"


def check_inverse_closure(
    graph: LabeledGraph,
    inverses: Optional[Mapping[EdgeLabel, EdgeLabel]] = None,
) -> List[Edge]:
    """Return the inverse edges missing from *graph*.

    With the default *inverses* (``PT -> PTBar``, ``Copy -> CopyBar``) an
    empty list means the inverse-closure invariant holds.
    """
    if inverses is None:
        inverses = {EdgeLabel.PT: EdgeLabel.PTBar, EdgeLabel.Copy: EdgeLabel.CopyBar}
    missing: List[Edge] = []
    for label, inv in inverses.items():
        for u, v, _ in graph.edges(label):
            if not graph.has_edge(v, u, inv):
                missing.append(Edge(v, u, inv))
    return missing
