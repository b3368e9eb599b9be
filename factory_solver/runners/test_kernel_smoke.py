"""
Smoke tests for the kernel runner and its diagnostics.

Runs both variants over the example machines and over small machines
chosen to hit each failure status.
"""

from pathlib import Path

import pytest

from factory_solver.config import SolverConfig
from factory_solver.core.machine_io import load_machines, parse_machine
from factory_solver.runners.kernel import solve_machine_with_diagnostics, solve_machines
from factory_solver.runners.results import diagnostics_to_record
from factory_solver.solver.lp_solver import cbc_available


EXAMPLE_PATH = Path(__file__).resolve().parents[2] / "inputs" / "day10_example.txt"


def test_example_totals():
    print("\n" + "=" * 70)
    print("KERNEL SMOKE TEST: example machines")
    print("=" * 70)

    summary = solve_machines(load_machines(EXAMPLE_PATH))

    assert summary.part1_total == 7
    assert summary.part2_total == 33
    assert summary.all_ok
    assert [d.toggle_presses for d in summary.diagnostics] == [2, 3, 2]
    assert [d.joltage_presses for d in summary.diagnostics] == [10, 12, 11]
    print(f"✓ Part 1 = {summary.part1_total}, Part 2 = {summary.part2_total}")


def test_unreachable_toggle():
    diag = solve_machine_with_diagnostics(parse_machine("[#.] (0,1) {1,1}"))

    assert diag.toggle_status == "unreachable"
    assert diag.toggle_presses is None
    assert diag.joltage_status == "ok"
    assert diag.joltage_presses == 1
    assert not diag.ok


def test_unsatisfiable_joltage():
    diag = solve_machine_with_diagnostics(parse_machine("[##] (0,1) {1,2}"), machine_index=4)

    assert diag.toggle_presses == 1
    assert diag.joltage_status == "unsatisfiable"
    assert diag.joltage_presses is None
    assert diag.error_message
    assert not diag.ok

    record = diagnostics_to_record(diag)
    assert record["machine_index"] == 4
    assert record["joltage_status"] == "unsatisfiable"
    assert record["ok"] is False


def test_search_exhausted():
    config = SolverConfig(max_search_nodes=1)
    diag = solve_machine_with_diagnostics(parse_machine("[..] (0) (0,1) (1) {5,3}"), config=config)

    assert diag.joltage_status == "search_exhausted"
    assert diag.search_nodes == 2


def test_overflow():
    config = SolverConfig(max_press_value=10)
    diag = solve_machine_with_diagnostics(parse_machine("[..] (0) (1) {6,6}"), config=config)
    assert diag.joltage_status == "overflow"


def test_skipped_without_joltage():
    diag = solve_machine_with_diagnostics(parse_machine("[#.] (0) (1)"))
    assert diag.joltage_status == "skipped"
    assert diag.ok


def test_failed_machines_left_out_of_totals():
    machines = [
        parse_machine("[..] (0) (1) {4,2}"),
        parse_machine("[##] (0,1) {1,2}"),
    ]
    summary = solve_machines(machines)

    # toggle minimums still count for a machine whose joltage failed
    assert summary.part1_total == 1
    assert summary.part2_total == 6
    assert [d.machine_index for d in summary.failures] == [1]


@pytest.mark.skipif(not cbc_available(), reason="CBC solver not available")
def test_cross_check():
    config = SolverConfig(cross_check=True)
    summary = solve_machines(load_machines(EXAMPLE_PATH), config)

    for diag in summary.diagnostics:
        assert diag.cross_check_total == diag.joltage_presses
        assert diag.cross_check_ok is True


if __name__ == "__main__":
    print("\n" + "=" * 70)
    print("KERNEL SMOKE TEST SUITE")
    print("=" * 70)

    test_example_totals()
    test_unreachable_toggle()
    test_unsatisfiable_joltage()
    test_search_exhausted()
    test_overflow()
    test_skipped_without_joltage()
    test_failed_machines_left_out_of_totals()
    if cbc_available():
        test_cross_check()

    print("\n" + "=" * 70)
    print("✓ ALL KERNEL TESTS PASSED")
    print("=" * 70)
    print("\nSummary:")
    print("  - Example totals (7 / 33): ✓")
    print("  - Failure statuses: ✓")
    print("  - Totals skip failed variants: ✓")
    print()
