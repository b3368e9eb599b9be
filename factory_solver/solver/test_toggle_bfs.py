"""
Tests for the toggle-variant BFS.

Scenario: target 101 (lights 0 and 2 on), buttons {0,1}, {1,2}, {0}.
Pressing {0,1} then {1,2} lights exactly 0 and 2, so the minimum is 2.
"""

from factory_solver.core.machine_io import parse_machine
from factory_solver.core.machine_types import Machine
from factory_solver.solver.toggle_bfs import min_presses_bfs, min_toggle_presses


def test_scenario_a_two_presses():
    print("\n" + "=" * 70)
    print("TEST: toggle target 101 with buttons {0,1}, {1,2}, {0}")
    print("=" * 70)

    m = Machine(
        num_counters=3,
        buttons=(frozenset({0, 1}), frozenset({1, 2}), frozenset({0})),
        indicator_target=0b101,
    )
    assert min_toggle_presses(m) == 2
    print("✓ Minimum presses = 2")


def test_zero_target_needs_no_presses():
    assert min_presses_bfs(0, []) == 0
    assert min_presses_bfs(0, [0b1]) == 0


def test_no_buttons_is_unreachable():
    assert min_presses_bfs(0b1, []) is None


def test_unreachable_target():
    # Both buttons always flip lights 0 and 1 together
    assert min_presses_bfs(0b01, [0b11]) is None


def test_example_machines():
    lines = [
        ("[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}", 2),
        ("[...#.] (0,2,3,4) (2,3) (0,4) (0,1,2) (1,2,3,4) {7,5,12,7,2}", 3),
        ("[.###.#] (0,1,2,3,4) (0,3,4) (0,1,2,4,5) (1,2) {10,11,11,5,10,5}", 2),
    ]
    for line, expected in lines:
        assert min_toggle_presses(parse_machine(line)) == expected, line


if __name__ == "__main__":
    print("\n" + "=" * 70)
    print("TOGGLE BFS SMOKE TEST SUITE")
    print("=" * 70)

    test_scenario_a_two_presses()
    test_zero_target_needs_no_presses()
    test_no_buttons_is_unreachable()
    test_unreachable_target()
    test_example_machines()

    print("\n" + "=" * 70)
    print("✓ ALL TOGGLE BFS TESTS PASSED")
    print("=" * 70)
