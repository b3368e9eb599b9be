"""
Solution assembler and verifier.

Glues an assignment of the free columns to the echelon form: every pivot
unknown is evaluated exactly, must be a non-negative integer within its
column's press bound, and the full press vector is then replayed against
the residual system before it is accepted.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from factory_solver.solver.echelon import EchelonForm


def verify_press_counts(matrix: np.ndarray, target: Sequence[int], presses: Sequence[int]) -> bool:
    """
    Replay a press vector and check that every row hits its target exactly.

    Sums are taken over Python ints so large counts never wrap.

    Example:
        >>> verify_press_counts(np.array([[1, 1, 0], [0, 1, 1]]), [5, 3], [2, 3, 0])
        True
    """
    arr = np.asarray(matrix)
    if arr.shape[0] != len(target):
        return False
    if arr.ndim != 2 or arr.shape[1] != len(presses):
        return False
    for row in range(arr.shape[0]):
        total = 0
        for col in np.flatnonzero(arr[row]):
            total += int(presses[col])
        if total != target[row]:
            return False
    return True


def evaluate_assignment(
    free_counts: Sequence[int],
    echelon: EchelonForm,
    matrix: np.ndarray,
    target: Sequence[int],
    max_press: Sequence[int],
) -> Optional[List[int]]:
    """
    Turn a free-column assignment into a validated full press vector.

    Args:
        free_counts: One count per echelon.free_cols entry
        echelon: Exact RREF of the residual system
        matrix: Residual 0/1 matrix the echelon form was built from
        target: Residual target
        max_press: Per-column press upper bound

    Returns:
        Press vector over all residual columns, or None if the assignment
        yields a fractional, negative or out-of-bound pivot value, or fails
        the replay check
    """
    presses = [0] * len(max_press)
    for col, count in zip(echelon.free_cols, free_counts):
        presses[col] = int(count)

    for row, col in enumerate(echelon.pivot_cols):
        value = echelon.pivot_value(row, free_counts)
        if value.denominator != 1:
            return None
        count = value.numerator
        if count < 0 or count > max_press[col]:
            return None
        presses[col] = count

    if not verify_press_counts(matrix, target, presses):
        return None
    return presses
