"""
Estimated probability that each action's feedback is observed in a round.

The realized graph contributes exactly through the confirmed neighbours;
every other candidate contributes through the unconfirmed neighbours,
weighted by the current belief that it governs the action.
"""

import logging

import numpy as np

from feedgraph.errors import NumericalDegeneracyError
from feedgraph.graphs import FeedbackGraphCatalog

logger = logging.getLogger(__name__)


def observed_component(
    catalog: FeedbackGraphCatalog,
    graph_index: int,
    probabilities: np.ndarray,
    observed: np.ndarray,
) -> np.ndarray:
    """``q_obs[i] = sum_j G_g[j, i] * S[j] * p[j]``."""

    return catalog[graph_index].T @ (observed * probabilities)


def estimated_component(
    catalog: FeedbackGraphCatalog,
    graph_index: int,
    probabilities: np.ndarray,
    meta_probabilities: np.ndarray,
    observed: np.ndarray,
) -> np.ndarray:
    """``q_est[i] = sum_{c != g} sum_j G_c[j, i] * (1 - S[j]) * p_meta[c, i] * p[j]``."""

    unconfirmed = (1.0 - observed) * probabilities
    total = np.zeros(catalog.num_actions)
    for c in range(catalog.num_graphs):
        if c == graph_index:
            continue
        total += meta_probabilities[c] * (catalog[c].T @ unconfirmed)
    return total


class ObservationEstimator:
    """Computes ``hat_q`` and guards it against vanishing."""

    def __init__(self, floor_epsilon: float = 1e-12, clip: bool = False):
        self.floor_epsilon = floor_epsilon
        self.clip = clip

    def estimate(
        self,
        catalog: FeedbackGraphCatalog,
        graph_index: int,
        probabilities: np.ndarray,
        meta_probabilities: np.ndarray,
        observed: np.ndarray,
    ) -> np.ndarray:
        q = observed_component(catalog, graph_index, probabilities, observed)
        q = q + estimated_component(
            catalog, graph_index, probabilities, meta_probabilities, observed
        )
        low = ~(q > self.floor_epsilon)
        if low.any():
            actions = [int(i) for i in np.flatnonzero(low)]
            if not self.clip:
                raise NumericalDegeneracyError(
                    "observation_probability",
                    f"estimate at or below {self.floor_epsilon} for actions {actions}",
                )
            logger.warning(
                "flooring observation probability for actions %s at %g",
                actions,
                self.floor_epsilon,
            )
            q = np.where(low, self.floor_epsilon, q)
        return q
