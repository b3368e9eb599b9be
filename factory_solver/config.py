"""
Solver constants and run configuration.

Holds the integer range guard, the default search budget and the default
paths used by the command-line runner. Everything is a plain constant
except SolverConfig, which bundles the knobs a single solve call needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Largest press count / target / total we accept (unsigned 64-bit range)
MAX_PRESS_VALUE = 2**64 - 1

# Node budget for the free-variable search (None = unbounded)
DEFAULT_MAX_SEARCH_NODES: Optional[int] = 5_000_000

# Wall-clock limit per machine in seconds (None = no deadline)
DEFAULT_TIME_LIMIT_S: Optional[float] = None

DEFAULT_INPUT_PATH = Path("inputs/day10.txt")
DEFAULT_FAILURE_LOG = Path("logs/machine_failures.jsonl")


@dataclass(frozen=True)
class SolverConfig:
    """
    Knobs for one solve call.

    Attributes:
        max_search_nodes: Search nodes allowed before giving up (None = unbounded)
        time_limit_s: Seconds allowed per machine (None = no deadline)
        max_press_value: Largest representable target / total
        cross_check: If True, the runner also solves each machine with the ILP
    """
    max_search_nodes: Optional[int] = DEFAULT_MAX_SEARCH_NODES
    time_limit_s: Optional[float] = DEFAULT_TIME_LIMIT_S
    max_press_value: int = MAX_PRESS_VALUE
    cross_check: bool = False

    def __post_init__(self):
        if self.max_search_nodes is not None and self.max_search_nodes <= 0:
            raise ValueError(f"max_search_nodes must be positive, got {self.max_search_nodes}")
        if self.time_limit_s is not None and self.time_limit_s <= 0:
            raise ValueError(f"time_limit_s must be positive, got {self.time_limit_s}")

    def make_budget(self):
        """Return a fresh SearchBudget for one solve call."""
        from factory_solver.solver.search import SearchBudget

        return SearchBudget(max_nodes=self.max_search_nodes, time_limit_s=self.time_limit_s)
