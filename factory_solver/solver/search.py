"""
Bounded depth-first search over the free columns of the echelon form.

Each free column f is tried with every count 0..max_press[f], where
max_press[f] is the smallest target among the rows f touches (pressing it
more would overshoot that row). Two prunes keep the tree small:

  - row feasibility: the partial row sums contributed by the free
    columns fixed so far may never exceed a row's target
  - branch and bound: a branch whose committed presses already reach the
    best total found so far is cut (count 0 is never cut this way)

Leaves are handed to the assembler, which derives the pivot columns and
validates the full vector. Row sums are updated before descending and
restored right after returning, so the state is exact on backtrack.

A SearchBudget bounds the number of visited nodes and/or wall-clock
time; when it trips, SearchExhaustedError is raised instead of looping
for an unbounded time.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from factory_solver.solver.assembler import evaluate_assignment
from factory_solver.solver.echelon import EchelonForm
from factory_solver.solver.errors import SearchExhaustedError, UnsatisfiableError


logger = logging.getLogger(__name__)

# Check the clock only every this many nodes
_DEADLINE_CHECK_INTERVAL = 1024


@dataclass
class SearchBudget:
    """
    Node / time allowance for one search.

    Attributes:
        max_nodes: Nodes allowed before giving up (None = unbounded)
        time_limit_s: Seconds allowed from start() (None = no deadline)
        nodes: Nodes visited so far
    """
    max_nodes: Optional[int] = None
    time_limit_s: Optional[float] = None
    nodes: int = 0
    deadline: Optional[float] = field(default=None, repr=False)

    def start(self) -> None:
        self.nodes = 0
        self.deadline = (
            time.monotonic() + self.time_limit_s if self.time_limit_s is not None else None
        )

    def tick(self) -> None:
        """Account for one node; raise SearchExhaustedError past the budget."""
        self.nodes += 1
        if self.max_nodes is not None and self.nodes > self.max_nodes:
            raise SearchExhaustedError(
                f"search exceeded {self.max_nodes} nodes", nodes_visited=self.nodes
            )
        if (
            self.deadline is not None
            and self.nodes % _DEADLINE_CHECK_INTERVAL == 0
            and time.monotonic() > self.deadline
        ):
            raise SearchExhaustedError(
                f"search exceeded {self.time_limit_s}s time limit", nodes_visited=self.nodes
            )


@dataclass
class SearchState:
    """
    Mutable scratch for one search call tree.

    Attributes:
        partial_rows: Per-row sum contributed by free columns fixed so far
        free_counts: Current count per free column (depth order)
        best_total: Smallest valid total found so far
        best_presses: Press vector achieving best_total
    """
    partial_rows: List[int]
    free_counts: List[int]
    best_total: Optional[int] = None
    best_presses: Optional[List[int]] = None


def max_press_counts(matrix: np.ndarray, target: Sequence[int]) -> List[int]:
    """
    Per-column upper bound: the smallest target among rows the column touches.

    A column that touches no row gets bound 0.

    Example:
        >>> max_press_counts(np.array([[1, 1, 0], [0, 1, 1]]), [5, 3])
        [5, 3, 3]
    """
    arr = np.asarray(matrix)
    bounds = []
    for col in range(arr.shape[1]):
        rows = np.flatnonzero(arr[:, col])
        bounds.append(min(int(target[r]) for r in rows) if len(rows) else 0)
    return bounds


def search_free_assignments(
    echelon: EchelonForm,
    matrix: np.ndarray,
    target: Sequence[int],
    budget: Optional[SearchBudget] = None,
) -> Tuple[int, List[int]]:
    """
    Find the minimum-total non-negative integer solution of matrix x = target.

    Args:
        echelon: Exact RREF of (matrix, target)
        matrix: Residual 0/1 matrix
        target: Residual target (all > 0)
        budget: Optional node/time budget; started by this call

    Returns:
        (total, presses) for the best solution over all residual columns

    Raises:
        UnsatisfiableError: If no leaf validates
        SearchExhaustedError: If the budget trips before the tree is exhausted
    """
    arr = np.asarray(matrix)
    target = [int(v) for v in target]
    max_press = max_press_counts(arr, target)
    free_cols = echelon.free_cols
    col_rows = [np.flatnonzero(arr[:, col]).tolist() for col in free_cols]
    free_bounds = [max_press[col] for col in free_cols]

    if budget is None:
        budget = SearchBudget()
    budget.start()

    state = SearchState(partial_rows=[0] * len(target), free_counts=[0] * len(free_cols))
    depth = len(free_cols)

    def descend(idx: int, partial_sum: int) -> None:
        budget.tick()
        if state.best_total is not None and partial_sum >= state.best_total:
            return
        if idx == depth:
            presses = evaluate_assignment(state.free_counts, echelon, arr, target, max_press)
            if presses is not None:
                total = sum(presses)
                if state.best_total is None or total < state.best_total:
                    state.best_total = total
                    state.best_presses = presses
            return

        rows = col_rows[idx]
        for count in range(free_bounds[idx] + 1):
            if count and state.best_total is not None and partial_sum + count >= state.best_total:
                break
            ok = True
            for row in rows:
                state.partial_rows[row] += count
                if state.partial_rows[row] > target[row]:
                    ok = False
            if ok:
                state.free_counts[idx] = count
                descend(idx + 1, partial_sum + count)
            for row in rows:
                state.partial_rows[row] -= count
            if not ok:
                # larger counts only overshoot further
                break
        state.free_counts[idx] = 0

    descend(0, 0)

    logger.debug(
        "Search over %d free columns visited %d nodes, best=%s",
        depth, budget.nodes, state.best_total,
    )

    if state.best_total is None:
        raise UnsatisfiableError("no non-negative integer assignment satisfies the system")
    return state.best_total, state.best_presses
