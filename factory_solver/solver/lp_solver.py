"""
ILP cross-check for press systems.

This module provides an independent reference solver that:
  - Takes a 0/1 press matrix and target (usually the reduced system)
  - Creates integer variables x[b] >= 0, one per button
  - Adds one equality per row: sum of wired buttons = target
  - Minimises sum(x) using PuLP's CBC solver

It is used only to verify the exact search offline; it is not on the
production path.

Uses standard pulp library (no custom solver implementation).
"""

from typing import Sequence

import numpy as np
import pulp


class InfeasibleModelError(Exception):
    """Raised when the ILP model is infeasible or not optimal."""
    pass


def cbc_available() -> bool:
    """True if PuLP can find its bundled CBC binary."""
    return bool(pulp.PULP_CBC_CMD(msg=False).available())


def solve_min_presses_ilp(matrix: np.ndarray, target: Sequence[int]) -> int:
    """
    Minimum total presses of matrix x = target over non-negative integers.

    Args:
        matrix: (rows, cols) 0/1 array
        target: Required total per row

    Returns:
        Optimal objective value (minimum sum of presses)

    Raises:
        InfeasibleModelError: If CBC does not report an optimal solution

    Example:
        >>> solve_min_presses_ilp(np.array([[1, 1, 0], [0, 1, 1]]), [5, 3])
        5
    """
    arr = np.asarray(matrix)
    rows, cols = arr.shape
    if rows == 0:
        return 0
    if cols == 0:
        if all(int(v) == 0 for v in target):
            return 0
        raise InfeasibleModelError("Rows with positive target but no buttons")

    # 1. Create model
    prob = pulp.LpProblem("min_presses", pulp.LpMinimize)

    # 2. Integer press variables
    x = [pulp.LpVariable(f"x_{b}", lowBound=0, cat=pulp.LpInteger) for b in range(cols)]

    # 3. Objective: minimise total presses
    prob += pulp.lpSum(x)

    # 4. One equality per row
    for r in range(rows):
        wired = [x[b] for b in np.flatnonzero(arr[r])]
        if not wired:
            if int(target[r]) != 0:
                raise InfeasibleModelError(f"Row {r} has target {target[r]} but no buttons")
            continue
        prob += (pulp.lpSum(wired) == int(target[r])), f"row_{r}"

    # 5. Solve using pulp's CBC solver
    status = prob.solve(pulp.PULP_CBC_CMD(msg=False))

    if pulp.LpStatus[status] != "Optimal":
        raise InfeasibleModelError(
            f"Solver status: {pulp.LpStatus[status]}. "
            f"Model may be infeasible or unbounded."
        )

    # 6. Read integer solution back (guard against float noise)
    values = [pulp.value(var) for var in x]
    return sum(int(round(v)) if v is not None else 0 for v in values)
