"""
cflreach.grammar
================

Production rules for CFL-reachability and the default points-to grammar.

A grammar in this package is in a restricted normal form: every
production has a head label and a body of one label (*unary*) or two
labels (*binary*)::

    PT ::= AddrBar            (unary)
    PT ::= CopyBar PT         (binary: left = CopyBar, right = PT)

A binary production ``A ::= B C`` derives ``A(u, w)`` from ``B(u, v)``
and ``C(v, w)``.  The solver looks productions up by body label, so the
:class:`Grammar` keeps three indexes:

- unary productions by their single body label,
- binary productions by their left label (the popped edge is the left
  operand and the partner is found among the destination's successors),
- binary productions by their right label (the popped edge is the right
  operand and the partner is found among the source's predecessors).

A grammar also names its *maintained inverses*: labels whose inverse edge
the solver inserts alongside every derived edge, so that rules can match
through either endpoint.

Default grammar (``POINTS_TO_GRAMMAR``)
---------------------------------------
::

    PT   ::= AddrBar           address-of, inverted, yields points-to
    PT   ::= CopyBar PT        copy propagates the points-to target
    PV   ::= Store PT          stored value reaches the pointee object
    VP   ::= PTBar Load        pointee object reaches the loaded value
    Copy ::= PV VP             store/load pair induces a value flow

    maintained inverses: PT -> PTBar, Copy -> CopyBar
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from cflreach.errors import GrammarError
from cflreach.labels import EdgeLabel


@dataclass(frozen=True)
class Production:
    """``head ::= body``, with a body of one or two labels."""

    head: EdgeLabel
    body: Tuple[EdgeLabel, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", tuple(self.body))
        if len(self.body) not in (1, 2):
            raise GrammarError(
                f"production for {self.head.value} has {len(self.body)} body "
                f"labels; only unary and binary productions are supported"
            )

    @property
    def is_unary(self) -> bool:
        return len(self.body) == 1

    @property
    def left(self) -> EdgeLabel:
        return self.body[0]

    @property
    def right(self) -> Optional[EdgeLabel]:
        return self.body[1] if len(self.body) == 2 else None

    def __str__(self) -> str:
        return f"{self.head.value} ::= " + " ".join(lbl.value for lbl in self.body)


class Grammar:
    """An indexed set of productions plus the maintained-inverse policy.

    Parameters
    ----------
    productions : iterable of Production
        The rules.  Duplicates are dropped.
    inverses : mapping, optional
        ``label -> inverse label`` for every label whose inverse edge the
        solver must keep in step.
    """

    def __init__(
        self,
        productions: Iterable[Production],
        inverses: Optional[Mapping[EdgeLabel, EdgeLabel]] = None,
    ) -> None:
        self.productions: Tuple[Production, ...] = tuple(dict.fromkeys(productions))
        self.inverses: Dict[EdgeLabel, EdgeLabel] = dict(inverses or {})

        self._unary: Dict[EdgeLabel, List[EdgeLabel]] = defaultdict(list)
        self._by_left: Dict[EdgeLabel, List[Tuple[EdgeLabel, EdgeLabel]]] = defaultdict(list)
        self._by_right: Dict[EdgeLabel, List[Tuple[EdgeLabel, EdgeLabel]]] = defaultdict(list)

        for prod in self.productions:
            if prod.is_unary:
                self._unary[prod.left].append(prod.head)
            else:
                self._by_left[prod.left].append((prod.right, prod.head))
                self._by_right[prod.right].append((prod.left, prod.head))

    # ----- lookups used by the solver ---------------------------------------

    def unary_for(self, label: EdgeLabel) -> List[EdgeLabel]:
        """Heads of unary productions whose body is *label*."""
        return self._unary.get(label, [])

    def binary_by_left(self, label: EdgeLabel) -> List[Tuple[EdgeLabel, EdgeLabel]]:
        """``(right, head)`` pairs of binary productions with left label *label*."""
        return self._by_left.get(label, [])

    def binary_by_right(self, label: EdgeLabel) -> List[Tuple[EdgeLabel, EdgeLabel]]:
        """``(left, head)`` pairs of binary productions with right label *label*."""
        return self._by_right.get(label, [])

    def inverse_of(self, label: EdgeLabel) -> Optional[EdgeLabel]:
        """The inverse the solver maintains for *label*, if any."""
        return self.inverses.get(label)

    # ----- introspection ----------------------------------------------------

    @property
    def labels(self) -> FrozenSet[EdgeLabel]:
        """Every label mentioned by a production or an inverse pair."""
        found = set(self.inverses) | set(self.inverses.values())
        for prod in self.productions:
            found.add(prod.head)
            found.update(prod.body)
        return frozenset(found)

    @property
    def heads(self) -> FrozenSet[EdgeLabel]:
        """Labels the grammar can derive, including maintained inverses."""
        derived = {prod.head for prod in self.productions}
        inverses = {self.inverses[lbl] for lbl in derived if lbl in self.inverses}
        return frozenset(derived | inverses)

    def __iter__(self) -> Iterator[Production]:
        return iter(self.productions)

    def __len__(self) -> int:
        return len(self.productions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grammar):
            return NotImplemented
        return (
            set(self.productions) == set(other.productions)
            and self.inverses == other.inverses
        )

    def __hash__(self) -> int:
        return hash((frozenset(self.productions), frozenset(self.inverses.items())))

    def __repr__(self) -> str:
        return f"Grammar(productions={len(self.productions)}, inverses={len(self.inverses)})"


def production(head: EdgeLabel, *body: EdgeLabel) -> Production:
    """Shorthand: ``production(PT, CopyBar, PT)``."""
    return Production(head, tuple(body))


_L = EdgeLabel

POINTS_TO_GRAMMAR = Grammar(
    [
        production(_L.PT, _L.AddrBar),
        production(_L.PT, _L.CopyBar, _L.PT),
        production(_L.PV, _L.Store, _L.PT),
        production(_L.VP, _L.PTBar, _L.Load),
        production(_L.Copy, _L.PV, _L.VP),
    ],
    inverses={
        _L.PT: _L.PTBar,
        _L.Copy: _L.CopyBar,
    },
)
