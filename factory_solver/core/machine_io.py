"""
Machine description IO utilities.

This module parses machine description lines and files into Machine
objects.

Expected line format:

    [.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}

  - [...]: indicator diagram, '#' = on, '.' = off, one char per counter
  - (...): one button; comma-separated 0-based counter indices
  - {...}: optional joltage target, one non-negative integer per counter

Blank lines and lines starting with '#' are skipped. Any malformed line
raises ParseError with its 1-based line number; there are no partial
results.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from factory_solver.constraints.indexing import pattern_to_mask
from factory_solver.core.machine_types import Button, Machine
from factory_solver.solver.errors import FactorySolverError


_UINT_RE = re.compile(r"^\d+$")


class ParseError(FactorySolverError):
    """Raised when a machine line does not follow the line format."""

    def __init__(self, reason: str, line_no: int = 0, line: str = ""):
        self.reason = reason
        self.line_no = line_no
        self.line = line
        where = f"line {line_no}: " if line_no else ""
        super().__init__(f"{where}{reason} (in {line!r})" if line else f"{where}{reason}")


def _parse_uint(text: str, what: str) -> int:
    """Parse a plain non-negative decimal integer."""
    if not _UINT_RE.match(text):
        raise ValueError(f"invalid {what} {text!r}")
    return int(text)


def _parse_button(group: str, num_counters: int) -> Button:
    """Convert '1,3' into frozenset({1, 3}); duplicate indices are idempotent."""
    indices = set()
    for entry in group.split(","):
        trimmed = entry.strip()
        if not trimmed:
            continue
        idx = _parse_uint(trimmed, "index")
        if idx >= num_counters:
            raise ValueError(f"button index {idx} exceeds number of lights {num_counters}")
        indices.add(idx)
    return frozenset(indices)


def _parse_joltage(group: str) -> Tuple[int, ...]:
    """Read the inside of '{a,b,c}' into a tuple of integers."""
    values = []
    for entry in group.split(","):
        trimmed = entry.strip()
        if not trimmed:
            continue
        values.append(_parse_uint(trimmed, "joltage value"))
    return tuple(values)


def parse_machine(line: str, line_no: int = 0) -> Optional[Machine]:
    """
    Parse one machine description line.

    Args:
        line: Raw text line
        line_no: 1-based line number used in error messages (0 = unknown)

    Returns:
        Machine, or None for blank and comment lines

    Raises:
        ParseError: If the line is malformed

    Example:
        >>> m = parse_machine("[.#] (0) (0,1) {1,2}")
        >>> m.num_counters, m.joltage_target
        (2, (1, 2))
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None

    def fail(reason: str) -> ParseError:
        return ParseError(reason, line_no=line_no, line=text)

    # 1. Indicator diagram
    start = text.find("[")
    if start < 0:
        raise fail("missing '[' in machine description")
    end = text.find("]", start + 1)
    if end < 0:
        raise fail("missing ']' in machine description")
    pattern = text[start + 1:end]
    if not pattern:
        raise fail("indicator diagram must not be empty")
    try:
        indicator_target = pattern_to_mask(pattern)
    except ValueError as e:
        raise fail(str(e)) from e
    num_counters = len(pattern)

    # 2. Buttons, in order of first appearance
    buttons: List[Button] = []
    seen = set()
    rest = text[end + 1:].lstrip()
    while rest and not rest.startswith("{"):
        if not rest.startswith("("):
            raise fail("expected button definition starting with '('")
        close = rest.find(")")
        if close < 0:
            raise fail("missing ')' in button definition")
        try:
            button = _parse_button(rest[1:close], num_counters)
        except ValueError as e:
            raise fail(str(e)) from e
        if button and button not in seen:
            seen.add(button)
            buttons.append(button)
        rest = rest[close + 1:].lstrip()

    # 3. Optional joltage block
    joltage: Tuple[int, ...] = ()
    if rest:
        close = rest.find("}")
        if close < 0:
            raise fail("missing closing '}' in joltage block")
        try:
            joltage = _parse_joltage(rest[1:close])
        except ValueError as e:
            raise fail(str(e)) from e
        if rest[close + 1:].strip():
            raise fail("unexpected text after joltage block")
        if len(joltage) != num_counters:
            raise fail(
                f"joltage requirement count ({len(joltage)}) must match "
                f"number of indicator lights ({num_counters})"
            )

    return Machine(
        num_counters=num_counters,
        buttons=tuple(buttons),
        indicator_target=indicator_target,
        joltage_target=joltage,
    )


def parse_machines(text: str) -> List[Machine]:
    """
    Parse every machine line of a document.

    Blank lines and '#' comments are skipped; the first malformed line
    aborts with ParseError.
    """
    machines = []
    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        machine = parse_machine(raw_line, line_no=line_no)
        if machine is not None:
            machines.append(machine)
    return machines


def load_machines(path: Path) -> List[Machine]:
    """
    Load all machines from a text file.

    Args:
        path: Path to the machine description file

    Returns:
        Machines in file order

    Raises:
        FileNotFoundError: If path does not exist
        ParseError: On the first malformed line, or if the file is not
            valid UTF-8
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise ParseError(f"input is not valid UTF-8: {e}") from e
    return parse_machines(text)
