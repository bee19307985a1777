"""
Shared data types used across feedgraph.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np


@dataclass(frozen=True)
class LearnerState:
    """Weights at the start of a round. Replaced, never mutated, between rounds."""

    round_index: int
    weights: np.ndarray
    meta_weights: np.ndarray

    @classmethod
    def initial(cls, num_actions: int, num_graphs: int) -> "LearnerState":
        return cls(
            round_index=0,
            weights=np.ones(num_actions, dtype=float),
            meta_weights=np.ones((num_graphs, num_actions), dtype=float),
        )


@dataclass
class RoundObservation:
    """What the environment revealed after the action was played."""

    action: int
    rewards: np.ndarray
    graph_index: int
    observed: np.ndarray


@dataclass
class RoundRecord:
    """Diagnostics for one completed round."""

    round_index: int
    meta_probabilities: np.ndarray
    exploration: np.ndarray
    min_coverage: float
    exploration_rate: float
    probabilities: np.ndarray
    observation: RoundObservation
    observation_probabilities: np.ndarray
    state: LearnerState


@dataclass
class RunResult:
    """Weight trajectories of a finished run."""

    weights: np.ndarray
    meta_weights: np.ndarray
    records: List[RoundRecord] = field(default_factory=list)
    beta: Optional[float] = None

    @property
    def final_weights(self) -> np.ndarray:
        return self.weights[-1]

    @property
    def rounds(self) -> int:
        return self.weights.shape[0] - 1

    def ranking(self) -> List[int]:
        """Actions ordered by descending final weight, ties by index."""

        return [int(a) for a in np.argsort(-self.final_weights, kind="stable")]
