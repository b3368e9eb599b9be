"""
Toggle-variant solver: breadth-first search over indicator states.

Each state is a bitmask of lit indicators; pressing a button XORs its
mask into the state. Starting from all-off, the first time BFS reaches
the target is the minimum number of presses, since every edge costs one.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Optional, Sequence

from factory_solver.core.machine_types import Machine


logger = logging.getLogger(__name__)


def min_presses_bfs(target: int, masks: Sequence[int]) -> Optional[int]:
    """
    Minimum presses to go from the all-off state to `target`.

    Args:
        target: Desired indicator bitmask
        masks: Toggle mask of each button

    Returns:
        Number of presses, or None if the target is unreachable

    Example:
        >>> min_presses_bfs(0b101, [0b011, 0b110, 0b001])
        2
    """
    if target == 0:
        return 0
    if not masks:
        return None

    visited = {0}
    queue = deque([(0, 0)])

    while queue:
        state, dist = queue.popleft()
        for mask in masks:
            nxt = state ^ mask
            if nxt == target:
                return dist + 1
            if nxt not in visited:
                visited.add(nxt)
                queue.append((nxt, dist + 1))

    logger.debug("Target %#x unreachable after visiting %d states", target, len(visited))
    return None


def min_toggle_presses(machine: Machine) -> Optional[int]:
    """Minimum presses that light exactly the machine's indicator diagram."""
    return min_presses_bfs(machine.indicator_target, machine.toggle_masks())
