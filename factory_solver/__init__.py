"""
factory_solver - minimum button-press solver for factory machines.

A machine is a set of buttons, each wired to a subset of counters, plus
two targets:
  - an indicator diagram (toggle variant): buttons flip lights on/off
  - a joltage vector (increment variant): buttons add one to each counter

Modules:
  - core: Machine model and line parser
  - constraints: bitmask indexing and the linear press system
  - solver: toggle BFS, reducer, exact echelon form, bounded search, ILP check
  - runners: diagnostics records, batch kernel, CLI
"""

from factory_solver.core.machine_types import Machine
from factory_solver.core.machine_io import ParseError, parse_machine, parse_machines, load_machines
from factory_solver.solver.press_solver import PressSolution, min_joltage_presses
from factory_solver.solver.toggle_bfs import min_toggle_presses

__version__ = "0.1.0"

__all__ = [
    "Machine",
    "ParseError",
    "parse_machine",
    "parse_machines",
    "load_machines",
    "PressSolution",
    "min_joltage_presses",
    "min_toggle_presses",
]
