"""
Tests for machine line parsing.

Covers the happy path (diagram, buttons, joltage), normalisation of
buttons (idempotent indices, duplicate buttons, empty groups), skipped
lines, and every ParseError case.
"""

import pytest

from factory_solver.core.machine_io import ParseError, load_machines, parse_machine, parse_machines
from factory_solver.core.machine_types import Machine


def test_parse_full_line():
    """Diagram, buttons and joltage block all land in the Machine."""
    m = parse_machine("[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}")

    assert m.num_counters == 4
    assert m.indicator_target == 0b0110
    assert m.buttons == (
        frozenset({3}),
        frozenset({1, 3}),
        frozenset({2}),
        frozenset({2, 3}),
        frozenset({0, 2}),
        frozenset({0, 1}),
    )
    assert m.joltage_target == (3, 5, 4, 7)


def test_parse_without_joltage():
    m = parse_machine("[#.] (0) (1)")
    assert m.joltage_target == ()
    assert not m.has_joltage


def test_button_normalisation():
    """Repeated indices collapse; identical buttons are kept once; empty groups drop."""
    m = parse_machine("[...] (0,0,1) (1,0) () (2) {1,1,1}")

    assert m.buttons == (frozenset({0, 1}), frozenset({2}))


def test_skips_blank_and_comment_lines():
    text = "\n# a comment\n[#] (0) {1}\n   \n[.] (0) {0}\n"
    machines = parse_machines(text)

    assert len(machines) == 2
    assert machines[0].indicator_target == 1
    assert machines[1].joltage_target == (0,)


@pytest.mark.parametrize(
    "line, fragment",
    [
        ("(0) {1}", "missing '['"),
        ("[#. (0) {1,1}", "missing ']'"),
        ("[] (0) {}", "must not be empty"),
        ("[#x] (0) {1,1}", "invalid character"),
        ("[#.] 0 {1,1}", "starting with '('"),
        ("[#.] (0 {1,1}", "missing ')'"),
        ("[#.] (0,a) {1,1}", "invalid index"),
        ("[#.] (0,-1) {1,1}", "invalid index"),
        ("[#.] (2) {1,1}", "exceeds number of lights"),
        ("[#.] (0) {1,1", "missing closing '}'"),
        ("[#.] (0) {1,x}", "invalid joltage value"),
        ("[#.] (0) {1,2,3}", "must match"),
        ("[#.] (0) {1,2} (1)", "unexpected text"),
    ],
)
def test_parse_errors(line, fragment):
    with pytest.raises(ParseError) as excinfo:
        parse_machine(line, line_no=7)

    assert fragment in excinfo.value.reason
    assert excinfo.value.line_no == 7
    assert "line 7" in str(excinfo.value)


def test_parse_machines_reports_line_number():
    """The first malformed line aborts the whole document."""
    text = "[#] (0) {1}\n\n[#] (5) {1}\n[#] (0) {1}\n"
    with pytest.raises(ParseError) as excinfo:
        parse_machines(text)
    assert excinfo.value.line_no == 3


def test_describe_roundtrip():
    line = "[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}"
    m = parse_machine(line)
    assert m.describe() == line
    assert parse_machine(m.describe()) == m


def test_load_machines(tmp_path):
    path = tmp_path / "machines.txt"
    path.write_text("[#.] (0) (0,1) {2,1}\n[.#] (1) {0,4}\n", encoding="utf-8")

    machines = load_machines(path)

    assert [m.num_buttons for m in machines] == [2, 1]
    assert isinstance(machines[0], Machine)


def test_machine_validation():
    with pytest.raises(ValueError):
        Machine(num_counters=2, buttons=(frozenset({2}),))
    with pytest.raises(ValueError):
        Machine(num_counters=2, buttons=(frozenset({0}), frozenset({0})))
    with pytest.raises(ValueError):
        Machine(num_counters=2, buttons=(), joltage_target=(1,))


def test_load_machines_rejects_invalid_utf8(tmp_path):
    path = tmp_path / "machines.txt"
    path.write_bytes(b"[#.] (0) {1,0}\n\xff\xfe\n")

    with pytest.raises(ParseError) as excinfo:
        load_machines(path)
    assert "not valid UTF-8" in excinfo.value.reason


def test_describe_sorts_button_indices():
    m = Machine(num_counters=4, buttons=(frozenset({3, 0, 2}),), indicator_target=0b1001)
    assert m.describe() == "[#..#] (0,2,3)"
