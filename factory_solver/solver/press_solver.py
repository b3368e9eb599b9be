"""
Increment-variant entry point: minimum total button presses.

Pipeline:
  1. Build A x = joltage from the machine (constraints.builder)
  2. Reduce by forced assignments (reducer)
  3. Exact rational RREF of the residual system (echelon)
  4. Bounded search over free columns, assembling and verifying each
     leaf (search + assembler)
  5. Map the best residual vector back onto the original buttons and
     replay it against the unreduced system

The answer is forced_total + residual optimum.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from factory_solver.config import SolverConfig
from factory_solver.constraints.builder import build_press_constraints
from factory_solver.core.machine_types import Machine
from factory_solver.solver.assembler import verify_press_counts
from factory_solver.solver.echelon import compute_echelon_form
from factory_solver.solver.errors import PressOverflowError
from factory_solver.solver.reducer import reduce_system
from factory_solver.solver.search import search_free_assignments


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PressSolution:
    """
    Minimum-press answer for one machine.

    Attributes:
        total: Minimum total number of presses
        presses: Press count per original machine button
        forced_total: Part of total fixed by the reducer
        num_rows: Rows of the residual system
        num_cols: Columns of the residual system
        num_free: Free columns searched over
        search_nodes: Search nodes visited (0 if the reducer solved it)
    """
    total: int
    presses: Tuple[int, ...]
    forced_total: int
    num_rows: int = 0
    num_cols: int = 0
    num_free: int = 0
    search_nodes: int = 0


def min_joltage_presses(machine: Machine, config: Optional[SolverConfig] = None) -> PressSolution:
    """
    Solve the increment variant of a machine exactly.

    Args:
        machine: Parsed machine (a machine without joltage block needs 0 presses)
        config: Search budget and integer range; defaults to SolverConfig()

    Returns:
        PressSolution with the minimum total and a witness press vector

    Raises:
        UnsatisfiableError: If no press vector reaches the joltage target
        SearchExhaustedError: If the search budget runs out
        PressOverflowError: If a target or the total leaves the allowed range

    Example:
        >>> m = Machine(num_counters=2,
        ...             buttons=(frozenset({0}), frozenset({0, 1}), frozenset({1})),
        ...             joltage_target=(5, 3))
        >>> min_joltage_presses(m).total
        5
    """
    if config is None:
        config = SolverConfig()

    matrix, target = build_press_constraints(machine).to_dense()
    reduced = reduce_system(matrix, target, max_press_value=config.max_press_value)

    if reduced.is_solved:
        presses = reduced.expand_presses([])
        return _checked(
            machine, matrix, target, presses, config,
            forced_total=reduced.forced_total,
        )

    echelon = compute_echelon_form(reduced.matrix, reduced.target)
    budget = config.make_budget()
    _, residual = search_free_assignments(echelon, reduced.matrix, reduced.target, budget)

    logger.debug(
        "Machine %s: %dx%d residual, %d free, %d nodes",
        machine.describe(), reduced.num_rows, reduced.num_cols,
        len(echelon.free_cols), budget.nodes,
    )

    return _checked(
        machine, matrix, target, reduced.expand_presses(residual), config,
        forced_total=reduced.forced_total,
        num_rows=reduced.num_rows,
        num_cols=reduced.num_cols,
        num_free=len(echelon.free_cols),
        search_nodes=budget.nodes,
    )


def _checked(
    machine: Machine,
    matrix: np.ndarray,
    target: Sequence[int],
    presses: List[int],
    config: SolverConfig,
    **stats: int,
) -> PressSolution:
    """Replay against the unreduced system and enforce the integer range."""
    if not verify_press_counts(matrix, target, presses):
        raise AssertionError(
            f"press vector {presses} does not reproduce {list(target)} for {machine.describe()}"
        )
    total = sum(presses)
    if total > config.max_press_value:
        raise PressOverflowError(f"Press total {total} exceeds {config.max_press_value}")
    return PressSolution(total=total, presses=tuple(presses), **stats)
