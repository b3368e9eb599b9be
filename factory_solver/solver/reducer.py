"""
Linear-system reducer: cheap deductions before the exact search.

Given the 0/1 press matrix A (rows = counters, columns = buttons) and the
target vector, the reducer repeatedly applies:

  1. Counters with target 0 are satisfied; any button touching one of
     them can never be pressed (it would overshoot) and is deactivated.
  2. A counter with remaining demand covered by no active button makes
     the machine unsatisfiable.
  3. A counter covered by exactly one active button forces that button to
     absorb the whole remaining demand. The demand is subtracted from
     every counter the button touches and the button is deactivated.
  4. After a forced assignment, buttons touching a counter whose demand
     dropped to zero are deactivated.

until nothing changes. Surviving counters (demand > 0) and active buttons
form the ReducedSystem handed to the echelon engine. The reduction is a
fixpoint: reducing a ReducedSystem again forces nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from factory_solver.config import MAX_PRESS_VALUE
from factory_solver.constraints.builder import build_press_constraints
from factory_solver.core.machine_types import Machine
from factory_solver.solver.errors import PressOverflowError, UnsatisfiableError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReducedSystem:
    """
    Residual press system left after forced assignments.

    Attributes:
        forced_total: Presses already pinned down by deduction
        matrix: (num_rows, num_cols) read-only uint8 0/1 array
        target: Remaining demand per surviving row, all > 0
        row_ids: Original counter index of each surviving row
        col_ids: Original button index of each surviving column
        forced_presses: Forced count per *original* button
    """

    forced_total: int
    matrix: np.ndarray
    target: Tuple[int, ...]
    row_ids: Tuple[int, ...]
    col_ids: Tuple[int, ...]
    forced_presses: Tuple[int, ...]

    @property
    def num_rows(self) -> int:
        return self.matrix.shape[0]

    @property
    def num_cols(self) -> int:
        return self.matrix.shape[1]

    @property
    def is_solved(self) -> bool:
        """True when deduction alone satisfied every counter."""
        return self.num_rows == 0

    def expand_presses(self, residual_presses: Sequence[int]) -> List[int]:
        """
        Map a press vector of the residual columns back onto all original
        buttons, adding the forced presses.
        """
        if len(residual_presses) != self.num_cols:
            raise ValueError(
                f"Expected {self.num_cols} residual presses, got {len(residual_presses)}"
            )
        presses = list(self.forced_presses)
        for col, count in zip(self.col_ids, residual_presses):
            presses[col] += int(count)
        return presses


def reduce_system(
    matrix: np.ndarray,
    target: Sequence[int],
    max_press_value: int = MAX_PRESS_VALUE,
) -> ReducedSystem:
    """
    Shrink A x = target by forced assignments and dead-button removal.

    Args:
        matrix: (rows, cols) 0/1 array, rows = counters, cols = buttons
        target: Required total per row (non-negative Python ints)
        max_press_value: Largest accepted target / forced total

    Returns:
        ReducedSystem (possibly with zero rows when fully solved)

    Raises:
        UnsatisfiableError: If some counter can no longer be reached, or a
            forced button would overshoot another counter
        PressOverflowError: If a target or the forced total exceeds
            max_press_value
        ValueError: If matrix and target disagree on the row count
    """
    covers = np.asarray(matrix).astype(bool)
    if covers.ndim != 2:
        raise ValueError(f"Press matrix must be 2D, got shape {covers.shape}")
    n_rows, n_cols = covers.shape
    if len(target) != n_rows:
        raise ValueError(f"Target has {len(target)} entries for {n_rows} rows")

    remaining = [int(v) for v in target]
    for row, value in enumerate(remaining):
        if value < 0:
            raise ValueError(f"Target of row {row} is negative: {value}")
        if value > max_press_value:
            raise PressOverflowError(f"Target of row {row} ({value}) exceeds {max_press_value}")

    button_rows = [np.flatnonzero(covers[:, col]).tolist() for col in range(n_cols)]
    row_buttons = [np.flatnonzero(covers[row]).tolist() for row in range(n_rows)]

    # Buttons touching nothing are never useful
    active = covers.any(axis=0)

    def drop_saturated_buttons() -> None:
        for col in np.flatnonzero(active):
            if any(remaining[row] == 0 for row in button_rows[col]):
                active[col] = False

    drop_saturated_buttons()

    forced = [0] * n_cols
    forced_total = 0
    progress = True
    while progress:
        progress = False
        for row in range(n_rows):
            need = remaining[row]
            if need == 0:
                continue
            covering = [col for col in row_buttons[row] if active[col]]
            if not covering:
                raise UnsatisfiableError(
                    f"counter {row} still needs {need} presses but no usable button reaches it"
                )
            if len(covering) > 1:
                continue

            col = covering[0]
            for affected in button_rows[col]:
                if remaining[affected] < need:
                    raise UnsatisfiableError(
                        f"button {col} is forced to {need} presses, overshooting counter "
                        f"{affected} (remaining {remaining[affected]})"
                    )
            for affected in button_rows[col]:
                remaining[affected] -= need
            forced[col] += need
            forced_total += need
            active[col] = False
            drop_saturated_buttons()
            progress = True

    if forced_total > max_press_value:
        raise PressOverflowError(f"Forced press total {forced_total} exceeds {max_press_value}")

    rows = [row for row in range(n_rows) if remaining[row] > 0]
    cols = np.flatnonzero(active).tolist() if rows else []

    reduced = covers[np.ix_(rows, cols)].astype(np.uint8)
    reduced.setflags(write=False)

    logger.debug(
        "Reduced %dx%d system to %dx%d (forced_total=%d)",
        n_rows, n_cols, len(rows), len(cols), forced_total,
    )

    return ReducedSystem(
        forced_total=forced_total,
        matrix=reduced,
        target=tuple(remaining[row] for row in rows),
        row_ids=tuple(rows),
        col_ids=tuple(cols),
        forced_presses=tuple(forced),
    )


def reduce_machine(machine: Machine, max_press_value: int = MAX_PRESS_VALUE) -> ReducedSystem:
    """Build the press system of a machine and reduce it."""
    matrix, target = build_press_constraints(machine).to_dense()
    return reduce_system(matrix, target, max_press_value=max_press_value)
