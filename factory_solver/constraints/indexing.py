"""
Bitmask indexing helpers for indicator lights and buttons.

This module provides canonical mappings between:
  - Counter index sets {i, j, ...} ↔ integer bitmask (bit i set)
  - Indicator diagrams "#.#." ↔ integer bitmask

Conventions:
  - Counter / light i is bit i (bit 0 is the leftmost diagram character)
  - '#' means on, '.' means off
  - All indices are 0-based

This is pure indexing math with no dependencies on machines or solvers.
"""

from typing import FrozenSet, Iterable, List


def indices_to_mask(indices: Iterable[int]) -> int:
    """
    Convert a collection of counter indices to a bitmask.

    Repeated indices are idempotent.

    Args:
        indices: Counter indices, each >= 0

    Returns:
        mask: integer with bit i set for every i in indices

    Raises:
        ValueError: If any index is negative

    Example:
        >>> indices_to_mask([0, 2, 2])
        5
    """
    mask = 0
    for idx in indices:
        if idx < 0:
            raise ValueError(f"Counter index must be non-negative, got {idx}")
        mask |= 1 << idx
    return mask


def mask_to_indices(mask: int) -> List[int]:
    """
    Convert a bitmask back to its sorted list of set bit positions.

    This is the inverse of indices_to_mask.

    Example:
        >>> mask_to_indices(0b1010)
        [1, 3]
    """
    if mask < 0:
        raise ValueError(f"Mask must be non-negative, got {mask}")
    indices = []
    idx = 0
    while mask:
        if mask & 1:
            indices.append(idx)
        mask >>= 1
        idx += 1
    return indices


def pattern_to_mask(pattern: str) -> int:
    """
    Convert an indicator diagram like ".##." into a bitmask.

    Args:
        pattern: String of '#' (on) and '.' (off) characters

    Returns:
        mask: bit i set iff pattern[i] == '#'

    Raises:
        ValueError: On any character other than '#' or '.'

    Example:
        >>> pattern_to_mask(".##.")
        6
    """
    mask = 0
    for idx, ch in enumerate(pattern):
        if ch == "#":
            mask |= 1 << idx
        elif ch != ".":
            raise ValueError(f"invalid character {ch!r} in indicator diagram")
    return mask


def mask_to_pattern(mask: int, width: int) -> str:
    """Render a bitmask as an indicator diagram of the given width."""
    return "".join("#" if (mask >> idx) & 1 else "." for idx in range(width))


def button_mask(button: FrozenSet[int]) -> int:
    """Toggle mask of a button given as its frozenset of counter indices."""
    return indices_to_mask(button)
