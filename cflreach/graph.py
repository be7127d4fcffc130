"""
cflreach.graph
==============

Edge-labeled directed multigraph with label-indexed adjacency.

The graph keeps two nested maps, one per orientation::

    successor_map[u][label]   -> { v | (u, v, label) in E }
    predecessor_map[v][label] -> { u | (u, v, label) in E }

Membership tests are O(1) and neighbor enumeration is O(degree).  Between
a pair of nodes there may be several edges as long as their labels differ;
the same ``(src, dst, label)`` triple is stored at most once.

Nodes are opaque hashable identifiers (normally non-negative integers
handed out by the graph builder).  The graph never invents nodes: a node
exists as soon as an edge touches it.

Public API
----------
    LabeledGraph    - the graph

Typical usage::

    from cflreach.graph import LabeledGraph
    from cflreach.labels import EdgeLabel

    g = LabeledGraph()
    g.add_base_relation(a, p, EdgeLabel.Addr)   # also adds p --AddrBar--> a
    g.add_base_relation(p, q, EdgeLabel.Copy)   # also adds q --CopyBar--> p
    for label, targets in g.successors(p).items():
        print(label, sorted(targets))
"""

from __future__ import annotations

from collections import defaultdict
from typing import (
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Set,
)

from cflreach.labels import Edge, EdgeLabel

Node = Hashable
AdjacencyMap = Dict[Node, Dict[EdgeLabel, Set[Node]]]

_EMPTY: Mapping[EdgeLabel, Set[Node]] = {}
_NO_NODES: FrozenSet[Node] = frozenset()


def _new_adjacency() -> AdjacencyMap:
    return defaultdict(lambda: defaultdict(set))


class LabeledGraph:
    """Directed graph whose edges carry an :class:`EdgeLabel`.

    Attributes
    ----------
    successor_map : dict
        ``node -> label -> set of destination nodes``.
    predecessor_map : dict
        ``node -> label -> set of source nodes``.
    """

    __slots__ = ("successor_map", "predecessor_map", "_edge_count")

    def __init__(self, edges: Optional[Iterable[Edge]] = None) -> None:
        self.successor_map: AdjacencyMap = _new_adjacency()
        self.predecessor_map: AdjacencyMap = _new_adjacency()
        self._edge_count = 0
        if edges is not None:
            for src, dst, label in edges:
                self.add_edge(src, dst, label)

    @classmethod
    def from_edges(cls, edges: Iterable[Edge]) -> "LabeledGraph":
        """Build a graph from ``(src, dst, label)`` triples."""
        return cls(edges)

    # ----- membership -------------------------------------------------------

    def has_edge(self, u: Node, v: Node, label: EdgeLabel) -> bool:
        """Is ``u --label--> v`` in the graph?"""
        by_label = self.successor_map.get(u)
        if by_label is None:
            return False
        targets = by_label.get(label)
        return targets is not None and v in targets

    def __contains__(self, edge: object) -> bool:
        if not isinstance(edge, tuple) or len(edge) != 3:
            return False
        return self.has_edge(*edge)

    # ----- mutation ---------------------------------------------------------

    def add_edge(self, u: Node, v: Node, label: EdgeLabel) -> bool:
        """Insert ``u --label--> v``.

        Adding an edge that is already present is a no-op.

        Returns
        -------
        bool
            ``True`` if the edge was new.
        """
        targets = self.successor_map[u][label]
        if v in targets:
            return False
        targets.add(v)
        self.predecessor_map[v][label].add(u)
        self._edge_count += 1
        return True

    def add_base_relation(self, u: Node, v: Node, label: EdgeLabel) -> int:
        """Insert a base edge together with its inverse, if it has one.

        This is how the graph builder emits ``Addr``/``AddrBar`` and
        ``Copy``/``CopyBar`` pairs.  Returns the number of new edges.
        """
        added = int(self.add_edge(u, v, label))
        inv = label.inverse
        if inv is not None:
            added += int(self.add_edge(v, u, inv))
        return added

    # ----- adjacency --------------------------------------------------------

    def successors(self, u: Node) -> Mapping[EdgeLabel, Set[Node]]:
        """Outgoing edges of *u*, grouped by label."""
        return self.successor_map.get(u, _EMPTY)

    def predecessors(self, v: Node) -> Mapping[EdgeLabel, Set[Node]]:
        """Incoming edges of *v*, grouped by label."""
        return self.predecessor_map.get(v, _EMPTY)

    def out_neighbors(self, u: Node, label: EdgeLabel) -> FrozenSet[Node]:
        """Destinations of *label* edges leaving *u* (a snapshot)."""
        targets = self.successors(u).get(label)
        return frozenset(targets) if targets else _NO_NODES

    def in_neighbors(self, v: Node, label: EdgeLabel) -> FrozenSet[Node]:
        """Sources of *label* edges entering *v* (a snapshot)."""
        sources = self.predecessors(v).get(label)
        return frozenset(sources) if sources else _NO_NODES

    # ----- iteration --------------------------------------------------------

    def edges(self, label: Optional[EdgeLabel] = None) -> Iterator[Edge]:
        """Iterate over all edges, optionally restricted to one label."""
        for u, by_label in self.successor_map.items():
            for lbl, targets in by_label.items():
                if label is not None and lbl is not label:
                    continue
                for v in targets:
                    yield Edge(u, v, lbl)

    def __iter__(self) -> Iterator[Edge]:
        return self.edges()

    def edge_set(self) -> FrozenSet[Edge]:
        """Immutable snapshot of the current edge set."""
        return frozenset(self.edges())

    @property
    def nodes(self) -> Set[Node]:
        """Every node touched by at least one edge."""
        result = {u for u, by_label in self.successor_map.items() if any(by_label.values())}
        result.update(v for v, by_label in self.predecessor_map.items() if any(by_label.values()))
        return result

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def __len__(self) -> int:
        return self._edge_count

    def label_counts(self) -> Dict[EdgeLabel, int]:
        """Number of edges per label."""
        counts: Dict[EdgeLabel, int] = defaultdict(int)
        for by_label in self.successor_map.values():
            for lbl, targets in by_label.items():
                if targets:
                    counts[lbl] += len(targets)
        return dict(counts)

    def copy(self) -> "LabeledGraph":
        """Independent copy of this graph."""
        return LabeledGraph(self.edges())

    def __repr__(self) -> str:
        return f"LabeledGraph(nodes={len(self.nodes)}, edges={self._edge_count})"
