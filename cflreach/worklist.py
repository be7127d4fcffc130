"""
cflreach.worklist
=================

Pending-edge queue driving the solver loop.

The queue itself does not deduplicate: the solver only pushes an edge at
the moment it is inserted into the graph, so every edge is enqueued at
most once.  The popping order is chosen by :class:`WorklistStrategy`;
because the production rules are confluent, the final closure does not
depend on it.

``FIFO``
    Breadth-first processing.  This is the default.
``LIFO``
    Depth-first processing.
"""

from __future__ import annotations

import enum
from collections import deque
from typing import Deque, Iterable, Iterator, Union

from cflreach.errors import EmptyQueueError
from cflreach.labels import Edge


class WorklistStrategy(enum.Enum):
    """Order in which pending edges are popped."""
    FIFO = "fifo"
    LIFO = "lifo"

    @classmethod
    def coerce(cls, value: Union[str, "WorklistStrategy"]) -> "WorklistStrategy":
        """Accept either a strategy or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(
                f"unknown worklist strategy {value!r} (expected one of: {names})"
            ) from None


class WorkList:
    """Queue of edges awaiting rule matching.

    Attributes
    ----------
    strategy : WorklistStrategy
        Popping order.
    pushed : int
        Total number of pushes since construction.
    popped : int
        Total number of pops since construction.
    """

    __slots__ = ("strategy", "pushed", "popped", "_items")

    def __init__(
        self,
        strategy: WorklistStrategy = WorklistStrategy.FIFO,
        edges: Iterable[Edge] = (),
    ) -> None:
        self.strategy = WorklistStrategy.coerce(strategy)
        self.pushed = 0
        self.popped = 0
        self._items: Deque[Edge] = deque()
        for edge in edges:
            self.push(edge)

    def push(self, edge: Edge) -> None:
        self._items.append(edge)
        self.pushed += 1

    def pop(self) -> Edge:
        """Remove and return the next edge.

        Raises
        ------
        EmptyQueueError
            If the queue is empty.
        """
        if not self._items:
            raise EmptyQueueError()
        if self.strategy is WorklistStrategy.LIFO:
            edge = self._items.pop()
        else:
            edge = self._items.popleft()
        self.popped += 1
        return edge

    def empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Edge]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return (
            f"WorkList(strategy={self.strategy.value}, pending={len(self._items)})"
        )
