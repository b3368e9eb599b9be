"""
Exact reduced row-echelon form over the rationals.

Gauss-Jordan elimination with fractions.Fraction, never floats: targets
can be large and rounding would silently corrupt them. Columns are
processed left to right; a column with no usable non-zero entry becomes
a free column. Rows left over after the last pivot must be all-zero in
the target as well, otherwise the system has no solution at all.

The truncated form expresses every pivot unknown as an affine function
of the free unknowns:

    x[pivot_cols[r]] = rhs[r] - sum_f matrix[r][f] * x[f]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Sequence, Tuple

import numpy as np

from factory_solver.solver.errors import UnsatisfiableError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EchelonForm:
    """
    Truncated RREF of a press system.

    Attributes:
        matrix: One row per pivot, full column width, exact Fractions
        rhs: Transformed target per pivot row
        pivot_cols: Pivot column of each row, strictly increasing
        free_cols: All columns that are not pivots, increasing
    """

    matrix: Tuple[Tuple[Fraction, ...], ...]
    rhs: Tuple[Fraction, ...]
    pivot_cols: Tuple[int, ...]
    free_cols: Tuple[int, ...]

    @property
    def rank(self) -> int:
        return len(self.pivot_cols)

    def pivot_value(self, row: int, free_values: Sequence[int]) -> Fraction:
        """
        Evaluate pivot unknown of `row` for an assignment of the free columns.

        Args:
            row: Pivot row index (0 .. rank-1)
            free_values: One value per free column, in free_cols order
        """
        value = self.rhs[row]
        coeffs = self.matrix[row]
        for col, count in zip(self.free_cols, free_values):
            coeff = coeffs[col]
            if coeff:
                value -= coeff * count
        return value


def compute_echelon_form(matrix: np.ndarray, target: Sequence[int]) -> EchelonForm:
    """
    Compute the exact RREF of matrix | target.

    Args:
        matrix: (rows, cols) integer array (0/1 for press systems)
        target: Right-hand side per row

    Returns:
        EchelonForm truncated to its pivot rows

    Raises:
        UnsatisfiableError: If a zero row carries a non-zero target
        ValueError: If target length does not match the row count
    """
    arr = np.asarray(matrix)
    if arr.ndim != 2:
        raise ValueError(f"Matrix must be 2D, got shape {arr.shape}")
    rows, cols = arr.shape
    if len(target) != rows:
        raise ValueError(f"Target has {len(target)} entries for {rows} rows")

    mat: List[List[Fraction]] = [[Fraction(int(v)) for v in arr[r]] for r in range(rows)]
    rhs: List[Fraction] = [Fraction(int(v)) for v in target]
    pivot_cols: List[int] = []
    current = 0

    for col in range(cols):
        if current == rows:
            break
        pivot = next((r for r in range(current, rows) if mat[r][col] != 0), None)
        if pivot is None:
            continue

        mat[current], mat[pivot] = mat[pivot], mat[current]
        rhs[current], rhs[pivot] = rhs[pivot], rhs[current]

        pivot_val = mat[current][col]
        if pivot_val != 1:
            mat[current] = [v / pivot_val for v in mat[current]]
            rhs[current] /= pivot_val

        pivot_row = mat[current]
        for r in range(rows):
            if r == current:
                continue
            factor = mat[r][col]
            if factor == 0:
                continue
            row_vals = mat[r]
            for c in range(col, cols):
                if pivot_row[c]:
                    row_vals[c] -= factor * pivot_row[c]
            rhs[r] -= factor * rhs[current]

        pivot_cols.append(col)
        current += 1

    for r in range(current, rows):
        if rhs[r] != 0 and all(v == 0 for v in mat[r]):
            raise UnsatisfiableError(
                f"inconsistent system: row reduces to 0 = {rhs[r]}"
            )

    is_pivot = set(pivot_cols)
    free_cols = tuple(c for c in range(cols) if c not in is_pivot)

    logger.debug("Echelon form: rank=%d, free columns=%s", len(pivot_cols), list(free_cols))

    return EchelonForm(
        matrix=tuple(tuple(mat[r]) for r in range(current)),
        rhs=tuple(rhs[:current]),
        pivot_cols=tuple(pivot_cols),
        free_cols=free_cols,
    )
