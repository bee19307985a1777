"""
Max-min coverage program for the exploration distribution.

Given per-vertex coverage coefficients ``c`` the program is

    maximize    m
    subject to  sum(s) = 1,  s >= 0,
                c[i] * s[i] >= m      for every vertex i,

solved with SciPy's HiGHS backend. ``m`` is bounded below by a small floor,
so a vertex that no candidate graph can reveal makes the program infeasible
instead of producing a vanishing ``m``.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.optimize import linprog

from feedgraph.errors import (
    ConfigurationError,
    InfeasibleProgramError,
    NumericalDegeneracyError,
    SolverError,
)
from feedgraph.graphs import FeedbackGraphCatalog

logger = logging.getLogger(__name__)

STATUS_SUCCESS = 0
STATUS_ITERATION_LIMIT = 1
STATUS_INFEASIBLE = 2
STATUS_UNBOUNDED = 3
STATUS_NUMERICAL = 4


@dataclass
class ExplorationSolution:
    """Coverage-maximizing distribution and its guaranteed coverage."""

    distribution: np.ndarray
    min_coverage: float
    coefficients: np.ndarray


class ExplorationProgram:
    """Builds and solves the coverage LP for one round."""

    def __init__(self, floor_epsilon: float = 1e-12, method: str = "highs", retries: int = 1):
        self.floor_epsilon = floor_epsilon
        self.method = method
        self.retries = retries

    def solve(
        self,
        catalog: FeedbackGraphCatalog,
        meta_probabilities: np.ndarray,
    ) -> ExplorationSolution:
        coefficients = catalog.coverage_coefficients(meta_probabilities)
        attempt = 0
        while True:
            try:
                distribution, min_coverage = self._solve_once(coefficients)
            except SolverError as exc:
                if attempt >= self.retries:
                    raise SolverError(exc.status, exc.solver_message, transient=False) from exc
                attempt += 1
                logger.warning("LP solve failed (%s), retrying", exc.solver_message)
                continue
            return ExplorationSolution(distribution, min_coverage, coefficients)

    def _solve_once(self, coefficients: np.ndarray):
        k = coefficients.shape[0]
        # x = (s_0, ..., s_{k-1}, m); minimize -m
        c = np.zeros(k + 1)
        c[-1] = -1.0
        a_ub = np.zeros((k, k + 1))
        a_ub[np.arange(k), np.arange(k)] = -coefficients
        a_ub[:, -1] = 1.0
        b_ub = np.zeros(k)
        a_eq = np.ones((1, k + 1))
        a_eq[0, -1] = 0.0
        b_eq = np.array([1.0])
        bounds = [(0.0, 1.0)] * k + [(self.floor_epsilon, None)]

        res = linprog(
            c,
            A_ub=a_ub,
            b_ub=b_ub,
            A_eq=a_eq,
            b_eq=b_eq,
            bounds=bounds,
            method=self.method,
        )
        if res.status == STATUS_INFEASIBLE:
            uncovered = [int(i) for i in np.flatnonzero(coefficients <= 0.0)]
            if uncovered:
                raise InfeasibleProgramError(
                    f"exploration program infeasible; vertices without coverage: {uncovered}",
                    uncovered=uncovered,
                )
            weakest = int(np.argmin(coefficients))
            raise NumericalDegeneracyError(
                "min_s",
                f"coverage cannot exceed {self.floor_epsilon}; smallest coefficient "
                f"{coefficients[weakest]:.3g} at vertex {weakest}",
            )
        if res.status == STATUS_UNBOUNDED:
            raise ConfigurationError(f"exploration program unbounded: {res.message}")
        if res.status != STATUS_SUCCESS or res.x is None:
            raise SolverError(int(res.status), str(res.message))

        distribution = np.clip(res.x[:k], 0.0, None)
        distribution = distribution / distribution.sum()
        min_coverage = float(res.x[-1])
        if not np.isfinite(min_coverage) or min_coverage <= self.floor_epsilon:
            raise NumericalDegeneracyError(
                "min_s", f"guaranteed coverage {min_coverage!r} is not above {self.floor_epsilon}"
            )
        return distribution, min_coverage


def solve_exploration(
    catalog: FeedbackGraphCatalog,
    meta_probabilities: np.ndarray,
    floor_epsilon: float = 1e-12,
) -> ExplorationSolution:
    return ExplorationProgram(floor_epsilon=floor_epsilon).solve(catalog, meta_probabilities)
