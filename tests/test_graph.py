# tests/test_graph.py
"""
Tests for the labeled graph and the edge-label alphabet.
"""

import pytest

from cflreach.errors import UnknownLabelError
from cflreach.graph import LabeledGraph
from cflreach.labels import BASE_LABELS, DERIVED_LABELS, Edge, EdgeLabel

L = EdgeLabel


class TestEdgeLabel:

    def test_parse_by_name(self):
        assert EdgeLabel.parse("PTBar") is L.PTBar
        assert EdgeLabel.parse("Copy") is L.Copy

    def test_parse_is_case_sensitive(self):
        with pytest.raises(UnknownLabelError):
            EdgeLabel.parse("pt")

    def test_unknown_label_is_value_error(self):
        with pytest.raises(ValueError):
            EdgeLabel.parse("Deref")

    def test_inverse_pairs(self):
        assert L.PT.inverse is L.PTBar
        assert L.PTBar.inverse is L.PT
        assert L.Copy.inverse is L.CopyBar
        assert L.Addr.inverse is L.AddrBar
        assert L.Store.inverse is None
        assert L.PV.inverse is None

    def test_families_partition_alphabet(self):
        assert BASE_LABELS | DERIVED_LABELS == frozenset(EdgeLabel)
        assert not BASE_LABELS & DERIVED_LABELS
        assert L.Load.is_base
        assert L.VP.is_derived

    def test_edge_reversed(self):
        assert Edge(1, 2, L.PT).reversed() == Edge(2, 1, L.PTBar)
        assert Edge(1, 2, L.Load).reversed() is None

    def test_edge_str(self):
        assert str(Edge(1, 2, L.Copy)) == "1 --Copy--> 2"


class TestMembership:

    def test_empty_graph(self):
        g = LabeledGraph()
        assert len(g) == 0
        assert not g.has_edge(1, 2, L.PT)

    def test_has_edge_is_exact(self):
        g = LabeledGraph()
        g.add_edge(1, 2, L.PT)
        assert g.has_edge(1, 2, L.PT)
        assert not g.has_edge(2, 1, L.PT)
        assert not g.has_edge(1, 2, L.PTBar)

    def test_contains(self):
        g = LabeledGraph()
        g.add_edge(1, 2, L.Store)
        assert Edge(1, 2, L.Store) in g
        assert (1, 2, L.Store) in g
        assert (1, 2) not in g
        assert "edge" not in g

    def test_has_edge_does_not_create_entries(self):
        g = LabeledGraph()
        g.add_edge(1, 2, L.PT)
        g.has_edge(7, 8, L.PT)
        g.has_edge(1, 9, L.Load)
        assert 7 not in g.successor_map
        assert L.Load not in g.successor_map[1]


class TestInsertion:

    def test_add_edge_returns_true_when_new(self):
        g = LabeledGraph()
        assert g.add_edge(1, 2, L.Copy) is True
        assert len(g) == 1

    def test_add_edge_is_idempotent(self):
        g = LabeledGraph()
        g.add_edge(1, 2, L.Copy)
        assert g.add_edge(1, 2, L.Copy) is False
        assert len(g) == 1

    def test_parallel_edges_with_distinct_labels(self):
        g = LabeledGraph()
        g.add_edge(1, 2, L.Copy)
        g.add_edge(1, 2, L.PT)
        assert len(g) == 2
        assert set(g.successors(1)) == {L.Copy, L.PT}

    def test_base_relation_adds_inverse(self):
        g = LabeledGraph()
        assert g.add_base_relation(3, 1, L.Addr) == 2
        assert g.has_edge(3, 1, L.Addr)
        assert g.has_edge(1, 3, L.AddrBar)

    def test_base_relation_without_inverse(self):
        g = LabeledGraph()
        assert g.add_base_relation(1, 2, L.Store) == 1
        assert len(g) == 1

    def test_base_relation_counts_only_new_edges(self):
        g = LabeledGraph()
        g.add_edge(2, 1, L.CopyBar)
        assert g.add_base_relation(1, 2, L.Copy) == 1
        assert len(g) == 2

    def test_from_edges(self):
        g = LabeledGraph.from_edges([(1, 2, L.Store), Edge(2, 3, L.PT), (1, 2, L.Store)])
        assert len(g) == 2
        assert g.has_edge(2, 3, L.PT)


class TestAdjacency:

    @pytest.fixture
    def graph(self):
        g = LabeledGraph()
        g.add_edge(1, 2, L.PT)
        g.add_edge(1, 3, L.PT)
        g.add_edge(1, 4, L.Store)
        g.add_edge(5, 2, L.PT)
        return g

    def test_successors_grouped_by_label(self, graph):
        succs = graph.successors(1)
        assert succs[L.PT] == {2, 3}
        assert succs[L.Store] == {4}

    def test_predecessors_grouped_by_label(self, graph):
        preds = graph.predecessors(2)
        assert preds[L.PT] == {1, 5}
        assert L.Store not in preds

    def test_unknown_node_has_no_neighbors(self, graph):
        assert dict(graph.successors(99)) == {}
        assert dict(graph.predecessors(99)) == {}
        assert 99 not in graph.successor_map

    def test_neighbor_snapshots(self, graph):
        snap = graph.out_neighbors(1, L.PT)
        graph.add_edge(1, 6, L.PT)
        assert snap == frozenset({2, 3})
        assert graph.out_neighbors(1, L.PT) == frozenset({2, 3, 6})
        assert graph.in_neighbors(2, L.PT) == frozenset({1, 5})
        assert graph.in_neighbors(2, L.Load) == frozenset()

    def test_edges_iteration(self, graph):
        assert set(graph) == {
            Edge(1, 2, L.PT), Edge(1, 3, L.PT),
            Edge(1, 4, L.Store), Edge(5, 2, L.PT),
        }
        assert set(graph.edges(L.Store)) == {Edge(1, 4, L.Store)}
        assert list(graph.edges(L.Load)) == []

    def test_nodes(self, graph):
        assert graph.nodes == {1, 2, 3, 4, 5}

    def test_label_counts(self, graph):
        assert graph.label_counts() == {L.PT: 3, L.Store: 1}

    def test_copy_is_independent(self, graph):
        clone = graph.copy()
        clone.add_edge(9, 9, L.Load)
        assert clone.edge_set() == graph.edge_set() | {Edge(9, 9, L.Load)}
        assert not graph.has_edge(9, 9, L.Load)

    def test_repr(self, graph):
        assert repr(graph) == "LabeledGraph(nodes=5, edges=4)"
