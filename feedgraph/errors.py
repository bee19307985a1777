"""
Error taxonomy for feedgraph runs.
"""

from typing import Optional


class FeedGraphError(Exception):
    """Base exception for feedgraph. Optionally tagged with the failing round."""

    def __init__(self, message: str = "", round_index: Optional[int] = None):
        self.detail = message
        self.round_index = round_index
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"round {self.round_index}: " if self.round_index is not None else ""
        return f"{where}{self.detail}"

    def at_round(self, round_index: int) -> "FeedGraphError":
        self.round_index = round_index
        self.args = (self._format(),)
        return self


class ConfigurationError(FeedGraphError, ValueError):
    """Invalid parameters or graph catalogs. Fatal, never retried."""

    pass


class InfeasibleProgramError(ConfigurationError):
    """The exploration program has no solution for the given graphs."""

    def __init__(
        self,
        message: str,
        uncovered: Optional[list] = None,
        round_index: Optional[int] = None,
    ):
        self.uncovered = list(uncovered or [])
        super().__init__(message, round_index)


class NumericalDegeneracyError(FeedGraphError, ArithmeticError):
    """A quantity used as a divisor or a mixing rate left its valid range."""

    def __init__(self, quantity: str, message: str, round_index: Optional[int] = None):
        self.quantity = quantity
        super().__init__(f"{quantity}: {message}", round_index)


class SolverError(FeedGraphError, RuntimeError):
    """The LP solver did not converge."""

    def __init__(
        self,
        status: int,
        message: str,
        transient: bool = True,
        round_index: Optional[int] = None,
    ):
        self.status = status
        self.solver_message = message
        self.transient = transient
        super().__init__(f"solver status {status}: {message}", round_index)
