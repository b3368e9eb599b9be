"""
Core machine types for the factory press solver.

A Machine is immutable once parsed:
  - buttons: ordered tuple of distinct buttons, each a frozenset of the
    counter indices it affects (coefficient 0 or 1 per counter)
  - indicator_target: bitmask of lights that must end up on (toggle variant)
  - joltage_target: exact non-negative total per counter (increment variant)

Counters and indicator lights share the same index space, so
num_counters is the length of the indicator diagram.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Tuple, TypeAlias

from factory_solver.constraints.indexing import button_mask, mask_to_indices, mask_to_pattern


Button: TypeAlias = FrozenSet[int]  # counter indices incremented/toggled by one press


@dataclass(frozen=True)
class Machine:
    """
    One factory machine.

    Attributes:
        num_counters: Number of indicator lights / joltage counters
        buttons: Distinct buttons in order of first appearance
        indicator_target: Bitmask of lights that must be on (bit i = light i)
        joltage_target: Required total per counter, or () when the line had
                        no joltage block
    """

    num_counters: int
    buttons: Tuple[Button, ...]
    indicator_target: int = 0
    joltage_target: Tuple[int, ...] = ()

    def __post_init__(self):
        if self.num_counters <= 0:
            raise ValueError(f"Machine must have at least one counter, got {self.num_counters}")
        if self.indicator_target < 0 or self.indicator_target >> self.num_counters:
            raise ValueError(
                f"Indicator target {self.indicator_target:#x} does not fit {self.num_counters} lights"
            )
        if len(set(self.buttons)) != len(self.buttons):
            raise ValueError("Machine buttons must be distinct")
        for button in self.buttons:
            if not button:
                raise ValueError("Button must affect at least one counter")
            if min(button) < 0 or max(button) >= self.num_counters:
                raise ValueError(
                    f"Button {sorted(button)} out of range for {self.num_counters} counters"
                )
        if self.joltage_target:
            if len(self.joltage_target) != self.num_counters:
                raise ValueError(
                    f"joltage target count ({len(self.joltage_target)}) must match "
                    f"number of counters ({self.num_counters})"
                )
            if any(v < 0 for v in self.joltage_target):
                raise ValueError(f"Joltage targets must be non-negative, got {self.joltage_target}")

    @property
    def num_buttons(self) -> int:
        """Number of distinct buttons."""
        return len(self.buttons)

    @property
    def has_joltage(self) -> bool:
        """True if the machine carries an increment-variant target."""
        return len(self.joltage_target) > 0

    def toggle_masks(self) -> List[int]:
        """Return each button as a toggle bitmask, in button order."""
        return [button_mask(b) for b in self.buttons]

    def describe(self) -> str:
        """Render the machine back into its line format (normalised)."""
        parts = [f"[{mask_to_pattern(self.indicator_target, self.num_counters)}]"]
        for button in self.buttons:
            parts.append("(" + ",".join(str(i) for i in mask_to_indices(button_mask(button))) + ")")
        if self.joltage_target:
            parts.append("{" + ",".join(str(v) for v in self.joltage_target) + "}")
        return " ".join(parts)
