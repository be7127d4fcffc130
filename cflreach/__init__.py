"""
cflreach: CFL-Reachability Points-to Solver
============================================

This package computes the context-free-language reachability closure of an
edge-labeled directed graph.  Fed with a graph whose edges encode
elementary program relations (address-of, copy, store, load) it derives
points-to and value-flow relations by applying grammar productions until
no new edge can be added.

Modules
-------
labels
    The edge-label alphabet and the ``Edge`` triple.
errors
    Exception hierarchy.
graph
    Label-indexed directed graph with forward and backward adjacency.
worklist
    Pending-edge queue (FIFO / LIFO).
grammar
    Production rules and the default points-to grammar.
config
    Solver configuration.
solver
    The worklist fixpoint engine.
results
    Points-to and alias queries over a solved graph.
grammar_parser
    Textual grammar format, parsed with ``parsimonious``.

Quick start
-----------
>>> from cflreach import LabeledGraph, EdgeLabel, PointsToResult, solve
>>> g = LabeledGraph()
>>> g.add_base_relation(3, 1, EdgeLabel.Addr)    # p = &a
2
>>> g.add_base_relation(1, 2, EdgeLabel.Copy)    # q = p
2
>>> solve(g).converged
True
>>> sorted(PointsToResult(g).points_to(2))
[3]
"""

import logging

from cflreach.errors import (
    CFLRError,
    EmptyQueueError,
    ErrorCode,
    GrammarError,
    GrammarSyntaxError,
    ResourceExhaustedError,
    UnknownLabelError,
)
from cflreach.labels import BASE_LABELS, DERIVED_LABELS, Edge, EdgeLabel
from cflreach.graph import LabeledGraph
from cflreach.worklist import WorkList, WorklistStrategy
from cflreach.grammar import POINTS_TO_GRAMMAR, Grammar, Production, production
from cflreach.grammar_parser import (
    POINTS_TO_GRAMMAR_TEXT,
    format_grammar,
    load_grammar,
    parse_grammar,
)
from cflreach.config import SolverConfig
from cflreach.results import PointsToResult, check_inverse_closure
from cflreach.solver import CFLRSolver, SolveResult, solve

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # errors
    "ErrorCode",
    "CFLRError",
    "EmptyQueueError",
    "ResourceExhaustedError",
    "GrammarError",
    "GrammarSyntaxError",
    "UnknownLabelError",
    # graph model
    "EdgeLabel",
    "Edge",
    "BASE_LABELS",
    "DERIVED_LABELS",
    "LabeledGraph",
    # grammar
    "Production",
    "Grammar",
    "POINTS_TO_GRAMMAR",
    "production",
    "parse_grammar",
    "load_grammar",
    "format_grammar",
    "POINTS_TO_GRAMMAR_TEXT",
    # solving
    "WorkList",
    "WorklistStrategy",
    "SolverConfig",
    "CFLRSolver",
    "SolveResult",
    "solve",
    "PointsToResult",
    "check_inverse_closure",
]
