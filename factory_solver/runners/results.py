"""
Result and diagnostics structures for the factory press solver.

This module defines MachineDiagnostics, the single structured record of a
solve attempt for one machine (both variants), and RunSummary, the
aggregate over a whole input file.

Key components:
  - MachineDiagnostics: status per variant, totals, residual system shape
  - RunSummary: part 1 / part 2 totals plus every machine's diagnostics
  - diagnostics_to_record: JSON-friendly dict for the failure log
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple


# Status of the toggle variant
ToggleStatus = Literal["ok", "unreachable"]

# Status of the increment variant
JoltageStatus = Literal["ok", "skipped", "unsatisfiable", "search_exhausted", "overflow", "error"]


@dataclass
class MachineDiagnostics:
    """
    Complete diagnostics for one machine.

    Attributes:
        machine_index: 0-based position of the machine in the input
        description: Normalised machine line
        toggle_status: "ok" or "unreachable"
        toggle_presses: Minimum toggle presses (None if unreachable)
        joltage_status: Outcome of the increment variant:
            - "ok": minimum found
            - "skipped": machine has no joltage block
            - "unsatisfiable": no non-negative integer solution exists
            - "search_exhausted": search budget ran out
            - "overflow": a target or total left the allowed range
            - "error": unexpected exception
        joltage_presses: Minimum total presses (None unless status "ok")
        presses: Witness press count per button (empty unless status "ok")
        forced_total: Presses fixed by the reducer
        num_rows, num_cols, num_free: Residual system shape
        search_nodes: Search nodes visited
        cross_check_total: ILP optimum when cross-checking was requested
        error_message: Message of the exception behind a failure status
    """
    machine_index: int
    description: str

    toggle_status: ToggleStatus = "ok"
    toggle_presses: Optional[int] = None

    joltage_status: JoltageStatus = "skipped"
    joltage_presses: Optional[int] = None
    presses: Tuple[int, ...] = ()

    forced_total: int = 0
    num_rows: int = 0
    num_cols: int = 0
    num_free: int = 0
    search_nodes: int = 0

    cross_check_total: Optional[int] = None

    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True if neither variant failed."""
        return self.toggle_status == "ok" and self.joltage_status in ("ok", "skipped")

    @property
    def cross_check_ok(self) -> Optional[bool]:
        """None when no cross-check ran, else whether both solvers agree."""
        if self.cross_check_total is None or self.joltage_presses is None:
            return None
        return self.cross_check_total == self.joltage_presses


@dataclass
class RunSummary:
    """
    Aggregate over every machine of a run.

    Attributes:
        part1_total: Sum of toggle minimums over machines that solved
        part2_total: Sum of joltage minimums over machines that solved
        diagnostics: One MachineDiagnostics per machine, input order
    """
    part1_total: int = 0
    part2_total: int = 0
    diagnostics: List[MachineDiagnostics] = field(default_factory=list)

    @property
    def failures(self) -> List[MachineDiagnostics]:
        return [d for d in self.diagnostics if not d.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failures


def diagnostics_to_record(diag: MachineDiagnostics) -> Dict[str, Any]:
    """
    Serialize diagnostics into a JSON-friendly dict.

    Press counts can exceed 2**53, so they are kept as Python ints (json
    writes them exactly).
    """
    record = asdict(diag)
    record["presses"] = list(diag.presses)
    record["ok"] = diag.ok
    record["cross_check_ok"] = diag.cross_check_ok
    return record
