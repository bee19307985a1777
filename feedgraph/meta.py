"""
Exponential weights over which candidate graph governs each action.
"""

import numpy as np

from feedgraph.errors import ConfigurationError
from feedgraph.utils import normalize


def normalize_meta(meta_weights: np.ndarray) -> np.ndarray:
    """Column-normalize C x K meta weights into per-action simplices."""

    return normalize(meta_weights, axis=0)


class MetaEstimator:
    """Loss-based multiplicative weights over candidate graphs, one simplex per action."""

    def __init__(self, eta_meta: float):
        if not eta_meta > 0.0:
            raise ConfigurationError(f"eta_meta must be positive, got {eta_meta}")
        self.eta_meta = eta_meta

    def probabilities(self, meta_weights: np.ndarray) -> np.ndarray:
        return normalize_meta(meta_weights)

    def loss_estimates(
        self,
        graph_index: int,
        observed: np.ndarray,
        meta_probabilities: np.ndarray,
        observation_probabilities: np.ndarray,
    ) -> np.ndarray:
        """Importance-weighted ``S[i] * (onehot[c] - p_meta[c, i]) / q[i]``."""

        num_graphs = meta_probabilities.shape[0]
        onehot = np.zeros((num_graphs, 1))
        onehot[graph_index, 0] = 1.0
        losses = onehot - meta_probabilities
        return losses * (observed / observation_probabilities)[np.newaxis, :]

    def update(
        self,
        meta_weights: np.ndarray,
        graph_index: int,
        observed: np.ndarray,
        meta_probabilities: np.ndarray,
        observation_probabilities: np.ndarray,
    ) -> np.ndarray:
        """Return the next meta weights; the input array is left untouched."""

        estimates = self.loss_estimates(
            graph_index, observed, meta_probabilities, observation_probabilities
        )
        return meta_weights * np.exp(-self.eta_meta * estimates)
