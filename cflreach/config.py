"""
cflreach.config
===============

Solver configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from cflreach.worklist import WorklistStrategy


@dataclass
class SolverConfig:
    """Configuration for :class:`cflreach.solver.CFLRSolver`."""
    # Worklist
    strategy: WorklistStrategy = WorklistStrategy.FIFO

    # Resources
    max_edges: Optional[int] = None         # None = unbounded

    # Seed graph handling
    repair_seed: bool = False               # backfill maintained inverses on seed edges
    validate_seed: bool = True              # warn about seed edges missing their inverse

    # Logging
    log_interval: int = 100_000             # DEBUG progress every N pops; 0 disables

    def __post_init__(self) -> None:
        self.strategy = WorklistStrategy.coerce(self.strategy)
        if self.max_edges is not None and self.max_edges < 0:
            raise ValueError(f"max_edges must be non-negative, got {self.max_edges}")
        if self.log_interval < 0:
            raise ValueError(f"log_interval must be non-negative, got {self.log_interval}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SolverConfig":
        """Build a config from plain values, e.g. a parsed settings file."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise TypeError(f"unknown solver option(s): {', '.join(unknown)}")
        return cls(**dict(values))
