"""
Exception types raised by the press solvers.

Solver layers raise these; only the runner converts them into
diagnostics. Parse failures live next to the parser
(factory_solver.core.machine_io.ParseError) but share the same base.
"""


class FactorySolverError(Exception):
    """Base class for every error this package raises on purpose."""
    pass


class UnsatisfiableError(FactorySolverError):
    """No non-negative integer press vector reaches the target."""
    pass


class SearchExhaustedError(FactorySolverError):
    """The free-variable search ran out of node budget or time."""

    def __init__(self, message: str, nodes_visited: int):
        super().__init__(message)
        self.nodes_visited = nodes_visited


class PressOverflowError(FactorySolverError, OverflowError):
    """A target or press total left the representable range."""
    pass
