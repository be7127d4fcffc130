"""
cflreach.solver
===============

Worklist solver computing the CFL-reachability closure of a labeled graph.

Theory
------
Given a grammar in the normal form of :mod:`cflreach.grammar`, the closure
is the least edge set that contains the seed edges and is closed under
every production.  The solver computes it with the classic worklist
algorithm:

1.  **Seed**: push every edge already in the graph.
2.  **Loop**: pop an edge ``(u, v, L)`` and

    - fire every unary production ``A ::= L`` as ``A(u, v)``;
    - *right match*: for every ``A ::= L R`` and every ``w`` with
      ``R(v, w)``, derive ``A(u, w)``;
    - *left match*: for every ``A ::= P L`` and every ``w`` with
      ``P(w, u)``, derive ``A(w, v)``.

    Both matches are tried on every pop since a binary production can be
    completed by whichever of its two operands arrives last.
3.  **Stop** when the worklist is empty.

Every derived edge goes through :meth:`CFLRSolver.add_edge`, which inserts
it only if it is new, enqueues it, and inserts the maintained inverse
(``PT`` -> ``PTBar``, ``Copy`` -> ``CopyBar``) the same way.  The inverse
closure therefore holds at every point of the run, not only at the end.

Termination: nodes and labels are fixed, so there are at most
``|N|^2 * |labels|`` edges; each edge is enqueued at most once.

Public API
----------
    CFLRSolver      - the engine
    SolveResult     - statistics of a run
    solve           - convenience function

Usage example
-------------
::

    from cflreach import LabeledGraph, EdgeLabel, solve

    g = LabeledGraph()
    g.add_base_relation(a, p, EdgeLabel.Addr)
    g.add_base_relation(p, q, EdgeLabel.Copy)
    result = solve(g)
    print(result.derived_counts)
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from cflreach.config import SolverConfig
from cflreach.errors import ErrorCode, ResourceExhaustedError
from cflreach.grammar import POINTS_TO_GRAMMAR, Grammar
from cflreach.graph import LabeledGraph
from cflreach.labels import Edge, EdgeLabel
from cflreach.results import check_inverse_closure
from cflreach.worklist import WorkList, WorklistStrategy

logger = logging.getLogger(__name__)


# ===========================================================================
# SOLVE RESULT
# ===========================================================================

@dataclass
class SolveResult:
    """Statistics of one solver run.

    Attributes
    ----------
    iterations : int
        Number of edges popped from the worklist.
    initial_edges : int
        Edge count before the run.
    final_edges : int
        Edge count after the run.
    derived_counts : dict
        Number of new edges per label inserted during the run.
    elapsed_seconds : float
        Wall-clock time.
    strategy : WorklistStrategy
        Worklist order used.
    converged : bool
        ``True`` once the worklist drained.
    """
    iterations: int = 0
    initial_edges: int = 0
    final_edges: int = 0
    derived_counts: Dict[EdgeLabel, int] = field(default_factory=dict)
    elapsed_seconds: float = 0.0
    strategy: WorklistStrategy = WorklistStrategy.FIFO
    converged: bool = False

    @property
    def edges_added(self) -> int:
        return self.final_edges - self.initial_edges


# ===========================================================================
# SOLVER
# ===========================================================================

class CFLRSolver:
    """Fixpoint engine for CFL-reachability over a :class:`LabeledGraph`.

    The solver takes ownership of *graph* for the duration of a run and
    mutates it in place; after :meth:`solve` returns the graph holds the
    closure.

    Parameters
    ----------
    graph : LabeledGraph
        Seed graph built by the caller.
    grammar : Grammar
        Production rules; defaults to :data:`POINTS_TO_GRAMMAR`.
    config : SolverConfig, optional
        Worklist order, edge budget and seed handling.
    """

    def __init__(
        self,
        graph: LabeledGraph,
        grammar: Grammar = POINTS_TO_GRAMMAR,
        config: Optional[SolverConfig] = None,
    ) -> None:
        self.graph = graph
        self.grammar = grammar
        self.config = config if config is not None else SolverConfig()
        self.worklist = WorkList(self.config.strategy)
        self._derived: Counter = Counter()

    # ----- edge insertion ---------------------------------------------------

    def add_edge(self, u: Hashable, v: Hashable, label: EdgeLabel) -> int:
        """Insert ``u --label--> v`` if new, enqueue it, and keep its inverse.

        This is the only way edges enter the graph once solving has begun.
        The edge and its maintained inverse are charged against the edge
        budget together, so a failed insertion leaves neither behind.

        Returns
        -------
        int
            Number of edges actually inserted (0, 1 or 2).
        """
        if self.graph.has_edge(u, v, label):
            return 0
        inv = self.grammar.inverse_of(label)
        with_inverse = (
            inv is not None
            and (v, u, inv) != (u, v, label)
            and not self.graph.has_edge(v, u, inv)
        )
        self._reserve(1 + with_inverse, Edge(u, v, label))
        self._insert(u, v, label)
        if with_inverse:
            self._insert(v, u, inv)
            return 2
        return 1

    def _reserve(self, needed: int, edge: Edge) -> None:
        limit = self.config.max_edges
        if limit is not None and len(self.graph) + needed > limit:
            raise ResourceExhaustedError(
                f"edge budget of {limit} exhausted while deriving {edge}",
                edge_count=len(self.graph),
                limit=limit,
            )

    def _insert(self, u: Hashable, v: Hashable, label: EdgeLabel) -> None:
        self.graph.add_edge(u, v, label)
        self.worklist.push(Edge(u, v, label))
        self._derived[label] += 1

    # ----- initialization ---------------------------------------------------

    def seed(self) -> int:
        """Push every edge currently in the graph onto the worklist.

        Returns the number of edges pushed.
        """
        if self.config.repair_seed:
            self._repair_seed()
        elif self.config.validate_seed:
            missing = self.missing_inverses()
            if missing:
                logger.warning(
                    "Seed graph lacks %d maintained inverse edge(s), e.g. %s; "
                    "the closure may be incomplete (set repair_seed to backfill)",
                    len(missing), missing[0],
                )
        count = 0
        for edge in self.graph.edges():
            self.worklist.push(edge)
            count += 1
        return count

    def missing_inverses(self) -> List[Edge]:
        """Edges whose maintained inverse is absent from the graph."""
        return check_inverse_closure(self.graph, self.grammar.inverses)

    def _repair_seed(self) -> None:
        missing = self.missing_inverses()
        for u, v, label in missing:
            self.graph.add_edge(u, v, label)
        if missing:
            logger.info("Backfilled %d inverse edge(s) in the seed graph", len(missing))

    # ----- main loop --------------------------------------------------------

    def solve(self) -> SolveResult:
        """Seed the worklist from the graph and run to fixpoint."""
        self.seed()
        return self.run()

    def run(self) -> SolveResult:
        """Drain the worklist, applying productions until nothing is new.

        Can be called after manual :meth:`add_edge` calls on an already
        solved graph to extend the closure incrementally.
        """
        t0 = time.monotonic()
        initial = len(self.graph)
        self._derived = Counter()
        iterations = 0
        interval = self.config.log_interval

        logger.info(
            "Solving: %d edge(s), %d pending, strategy=%s",
            initial, len(self.worklist), self.worklist.strategy.value,
        )

        try:
            while not self.worklist.empty():
                edge = self.worklist.pop()
                iterations += 1
                self._process(edge)
                if interval and iterations % interval == 0:
                    logger.debug(
                        "%d pops, %d edges, %d pending",
                        iterations, len(self.graph), len(self.worklist),
                    )
        except MemoryError as exc:
            if isinstance(exc, ResourceExhaustedError):
                raise
            raise ResourceExhaustedError(
                "out of memory while computing the closure",
                edge_count=len(self.graph),
                code=ErrorCode.OUT_OF_MEMORY,
            ) from exc

        result = SolveResult(
            iterations=iterations,
            initial_edges=initial,
            final_edges=len(self.graph),
            derived_counts=dict(self._derived),
            elapsed_seconds=time.monotonic() - t0,
            strategy=self.worklist.strategy,
            converged=True,
        )
        logger.info(
            "Fixpoint reached after %d pops: %d new edge(s), %d total (%.3fs)",
            result.iterations, result.edges_added, result.final_edges,
            result.elapsed_seconds,
        )
        return result

    def _process(self, edge: Edge) -> None:
        u, v, label = edge
        grammar = self.grammar
        graph = self.graph

        for head in grammar.unary_for(label):
            self.add_edge(u, v, head)

        # Right match: u --label--> v --right--> w
        for right, head in grammar.binary_by_left(label):
            for w in graph.out_neighbors(v, right):
                self.add_edge(u, w, head)

        # Left match: w --left--> u --label--> v
        for left, head in grammar.binary_by_right(label):
            for w in graph.in_neighbors(u, left):
                self.add_edge(w, v, head)


def solve(
    graph: LabeledGraph,
    grammar: Grammar = POINTS_TO_GRAMMAR,
    config: Optional[SolverConfig] = None,
    **options,
) -> SolveResult:
    """Compute the closure of *graph* in place.

    Keyword *options* are :class:`SolverConfig` fields and are only
    accepted when *config* is not given.
    """
    if config is None:
        config = SolverConfig.from_mapping(options)
    elif options:
        raise TypeError("pass either a SolverConfig or keyword options, not both")
    return CFLRSolver(graph, grammar, config).solve()
