"""
Core kernel runner for the factory press solver.

This module runs both variants on every machine and turns solver
exceptions into diagnostics:
  1. Toggle variant via BFS (solver.toggle_bfs)
  2. Increment variant via reduction + exact search (solver.press_solver)
  3. Optional ILP cross-check of the increment answer (solver.lp_solver)
  4. Aggregate part 1 / part 2 totals into a RunSummary

Machines share no state, so each one is solved independently.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from factory_solver.config import SolverConfig
from factory_solver.core.machine_types import Machine
from factory_solver.runners.results import MachineDiagnostics, RunSummary
from factory_solver.solver.errors import (
    PressOverflowError,
    SearchExhaustedError,
    UnsatisfiableError,
)
from factory_solver.solver.lp_solver import InfeasibleModelError, solve_min_presses_ilp
from factory_solver.solver.press_solver import min_joltage_presses
from factory_solver.solver.reducer import reduce_machine
from factory_solver.solver.toggle_bfs import min_toggle_presses


logger = logging.getLogger(__name__)


def cross_check_joltage(machine: Machine, config: SolverConfig) -> Optional[int]:
    """
    Independent minimum for the increment variant using the ILP.

    The machine is reduced first (same deductions as the exact solver), and
    only the residual system goes to CBC.

    Returns:
        forced_total + ILP optimum, or None if the ILP reported no optimum
    """
    reduced = reduce_machine(machine, max_press_value=config.max_press_value)
    if reduced.is_solved:
        return reduced.forced_total
    try:
        extra = solve_min_presses_ilp(reduced.matrix, reduced.target)
    except InfeasibleModelError as e:
        logger.warning("  ILP cross-check failed for %s: %s", machine.describe(), e)
        return None
    return reduced.forced_total + extra


def solve_machine_with_diagnostics(
    machine: Machine,
    machine_index: int = 0,
    config: Optional[SolverConfig] = None,
) -> MachineDiagnostics:
    """
    Solve both variants of one machine and record what happened.

    Never raises for solver failures; they become statuses on the returned
    MachineDiagnostics.

    Args:
        machine: Parsed machine
        machine_index: Position in the input (for reporting)
        config: Solver configuration (defaults to SolverConfig())

    Returns:
        MachineDiagnostics with toggle and joltage outcomes
    """
    if config is None:
        config = SolverConfig()

    diag = MachineDiagnostics(machine_index=machine_index, description=machine.describe())

    # 1. Toggle variant
    diag.toggle_presses = min_toggle_presses(machine)
    if diag.toggle_presses is None:
        diag.toggle_status = "unreachable"
        logger.warning("  Machine %d: indicator diagram unreachable", machine_index)

    # 2. Increment variant
    if not machine.has_joltage:
        return diag

    try:
        solution = min_joltage_presses(machine, config)
    except UnsatisfiableError as e:
        diag.joltage_status = "unsatisfiable"
        diag.error_message = str(e)
    except SearchExhaustedError as e:
        diag.joltage_status = "search_exhausted"
        diag.search_nodes = e.nodes_visited
        diag.error_message = str(e)
    except PressOverflowError as e:
        diag.joltage_status = "overflow"
        diag.error_message = str(e)
    except Exception as e:
        logger.exception("Error while solving machine %d: %s", machine_index, e)
        diag.joltage_status = "error"
        diag.error_message = str(e)
    else:
        diag.joltage_status = "ok"
        diag.joltage_presses = solution.total
        diag.presses = solution.presses
        diag.forced_total = solution.forced_total
        diag.num_rows = solution.num_rows
        diag.num_cols = solution.num_cols
        diag.num_free = solution.num_free
        diag.search_nodes = solution.search_nodes

    if diag.joltage_status != "ok":
        logger.warning(
            "  Machine %d: joltage status=%s (%s)",
            machine_index, diag.joltage_status, diag.error_message,
        )
        return diag

    # 3. Optional cross-check
    if config.cross_check:
        diag.cross_check_total = cross_check_joltage(machine, config)
        if diag.cross_check_ok is False:
            logger.warning(
                "  Machine %d: exact search found %d presses but ILP found %d",
                machine_index, diag.joltage_presses, diag.cross_check_total,
            )

    return diag


def solve_machines(
    machines: Iterable[Machine],
    config: Optional[SolverConfig] = None,
) -> RunSummary:
    """
    Solve every machine and sum the per-variant minimums.

    Failed machines are reported in the summary and left out of the totals.
    """
    if config is None:
        config = SolverConfig()

    summary = RunSummary()
    for idx, machine in enumerate(machines):
        logger.info("Processing machine %d: %s", idx, machine.describe())
        diag = solve_machine_with_diagnostics(machine, machine_index=idx, config=config)
        summary.diagnostics.append(diag)

        if diag.toggle_presses is not None:
            summary.part1_total += diag.toggle_presses
        if diag.joltage_presses is not None:
            summary.part2_total += diag.joltage_presses

        if diag.ok:
            logger.info(
                "  ✓ toggle=%s joltage=%s (forced=%d, free=%d, nodes=%d)",
                diag.toggle_presses, diag.joltage_presses,
                diag.forced_total, diag.num_free, diag.search_nodes,
            )

    return summary
