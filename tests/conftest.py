# tests/conftest.py
"""
Shared fixtures for the cflreach test-suite.
"""

import random

import pytest

from cflreach.graph import LabeledGraph
from cflreach.labels import EdgeLabel


# Node ids used by the hand-written scenarios
P, Q, A = 1, 2, 3
V, O, R = 10, 12, 13


@pytest.fixture
def copy_chain_graph():
    """``p = &a; q = p``: Addr(a, p) and Copy(p, q) with their inverses."""
    g = LabeledGraph()
    g.add_base_relation(A, P, EdgeLabel.Addr)
    g.add_base_relation(P, Q, EdgeLabel.Copy)
    return g


@pytest.fixture
def store_graph():
    """``*p = v`` with ``p`` already pointing to ``o``."""
    g = LabeledGraph()
    g.add_edge(V, P, EdgeLabel.Store)
    g.add_edge(P, O, EdgeLabel.PT)
    return g


def random_base_graph(seed, nodes=12, edges=40):
    """A reproducible seed graph built only from base relations."""
    rng = random.Random(seed)
    g = LabeledGraph()
    kinds = [EdgeLabel.Addr, EdgeLabel.Copy, EdgeLabel.Store, EdgeLabel.Load]
    for _ in range(edges):
        u = rng.randrange(nodes)
        v = rng.randrange(nodes)
        g.add_base_relation(u, v, rng.choice(kinds))
    return g


@pytest.fixture(params=[0, 1, 2, 3, 4])
def random_graph(request):
    return random_base_graph(request.param)


@pytest.fixture
def make_random_graph():
    return random_base_graph
