"""
Tests for the exact rational echelon engine.
"""

from fractions import Fraction

import numpy as np
import pytest

from factory_solver.solver.echelon import compute_echelon_form
from factory_solver.solver.errors import UnsatisfiableError


def test_pivots_and_free_columns():
    """[[1,1,0],[0,1,1]] | [5,3]: columns 0,1 pivot, column 2 free."""
    ech = compute_echelon_form(np.array([[1, 1, 0], [0, 1, 1]]), [5, 3])

    assert ech.pivot_cols == (0, 1)
    assert ech.free_cols == (2,)
    assert ech.matrix == ((1, 0, -1), (0, 1, 1))
    assert ech.rhs == (2, 3)
    # x0 = 2 + x2, x1 = 3 - x2
    assert ech.pivot_value(0, [1]) == 3
    assert ech.pivot_value(1, [1]) == 2


def test_fractional_pivots_stay_exact():
    """Triangle (0,1) (1,2) (0,2) has determinant 2, so halves appear."""
    a, b, c = 10**20, 2 * 10**20, 3 * 10**20
    matrix = np.array([[1, 0, 1], [1, 1, 0], [0, 1, 1]])
    ech = compute_echelon_form(matrix, [a + c, a + b, b + c])

    assert ech.free_cols == ()
    assert ech.rank == 3
    assert ech.rhs == (a, b, c)
    for row in ech.matrix:
        assert all(isinstance(v, Fraction) for v in row)


def test_redundant_rows_are_dropped():
    matrix = np.array([[1, 1], [1, 1], [0, 1]])
    ech = compute_echelon_form(matrix, [4, 4, 1])

    assert ech.rank == 2
    assert len(ech.matrix) == 2
    assert ech.rhs == (3, 1)


def test_inconsistent_system():
    with pytest.raises(UnsatisfiableError):
        compute_echelon_form(np.array([[1, 1], [1, 1]]), [2, 3])


def test_skipped_column_becomes_free():
    ech = compute_echelon_form(np.array([[0, 1], [0, 1]]), [2, 2])
    assert ech.pivot_cols == (1,)
    assert ech.free_cols == (0,)


def test_shape_mismatch():
    with pytest.raises(ValueError):
        compute_echelon_form(np.array([[1, 0]]), [1, 2])
