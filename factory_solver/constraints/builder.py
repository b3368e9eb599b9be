"""
Linear press-system builder for the increment variant.

This module collects one linear equality per counter over the press
vector x (one non-negative integer per button):

    sum_i coeffs[i] * x[indices[i]] = rhs

For factory machines every coefficient is 1, so each constraint reads
"the buttons wired to counter c are pressed target[c] times in total".

The builder is the generic plumbing shared by the exact reducer and the
ILP cross-check. No solver logic here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from factory_solver.core.machine_types import Machine


@dataclass
class LinearConstraint:
    """
    A single linear equality over the press vector x:

        sum_i coeffs[i] * x[indices[i]] = rhs

    Attributes:
        indices: Button indices into x (0 .. num_buttons-1)
        coeffs: Coefficients (same length as indices)
        rhs: Right-hand side value (required counter total)

    Example:
        # x[0] + x[2] = 7 (buttons 0 and 2 feed counter with target 7)
        LinearConstraint(indices=[0, 2], coeffs=[1, 1], rhs=7)
    """
    indices: List[int]
    coeffs: List[int]
    rhs: int


@dataclass
class ConstraintBuilder:
    """
    Collects linear equality constraints over the press vector.

    Attributes:
        num_vars: Number of press variables (buttons)
        constraints: One LinearConstraint per counter, in counter order
    """
    num_vars: int
    constraints: List[LinearConstraint] = field(default_factory=list)

    def add_eq(self, indices: List[int], coeffs: List[int], rhs: int) -> None:
        """
        Add a generic linear equality constraint.

        Raises:
            AssertionError: If indices and coeffs have different lengths
            ValueError: If an index falls outside 0..num_vars-1
        """
        assert len(indices) == len(coeffs), \
            f"indices and coeffs must have same length, got {len(indices)} != {len(coeffs)}"
        for idx in indices:
            if not 0 <= idx < self.num_vars:
                raise ValueError(f"Variable index {idx} out of range 0..{self.num_vars - 1}")

        self.constraints.append(
            LinearConstraint(indices=list(indices), coeffs=list(coeffs), rhs=rhs)
        )

    def add_counter_row(self, buttons: List[int], target: int) -> None:
        """Enforce that the given buttons are pressed `target` times in total."""
        self.add_eq(indices=buttons, coeffs=[1] * len(buttons), rhs=target)

    def to_dense(self) -> Tuple[np.ndarray, List[int]]:
        """
        Materialise the constraints as a dense matrix and target list.

        Returns:
            (matrix, target):
              - matrix: (num_constraints, num_vars) uint8 array of coefficients
              - target: list of Python ints (kept out of numpy so large
                targets never wrap)

        Raises:
            ValueError: If a coefficient is not 0 or 1
        """
        matrix = np.zeros((len(self.constraints), self.num_vars), dtype=np.uint8)
        target = []
        for row, lc in enumerate(self.constraints):
            for idx, coeff in zip(lc.indices, lc.coeffs):
                if coeff not in (0, 1):
                    raise ValueError(f"Press systems only carry 0/1 coefficients, got {coeff}")
                matrix[row, idx] = coeff
            target.append(int(lc.rhs))
        return matrix, target


def build_press_constraints(machine: Machine) -> ConstraintBuilder:
    """
    Build the increment-variant system A x = joltage for a machine.

    Row c lists every button wired to counter c. A machine without a
    joltage block produces an empty builder.

    Example:
        >>> m = Machine(num_counters=2, buttons=(frozenset({0}), frozenset({0, 1})),
        ...             joltage_target=(5, 3))
        >>> [lc.indices for lc in build_press_constraints(m).constraints]
        [[0, 1], [1]]
    """
    builder = ConstraintBuilder(num_vars=machine.num_buttons)
    for counter, target in enumerate(machine.joltage_target):
        covering = [b for b, button in enumerate(machine.buttons) if counter in button]
        builder.add_counter_row(covering, target)
    return builder
