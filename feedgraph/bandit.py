"""
Exponential weights over actions with bias-corrected importance weighting.
"""

import math
from typing import List

import numpy as np

from feedgraph.errors import ConfigurationError
from feedgraph.utils import normalize


def confidence_bias(eta: float, delta: float, num_actions: int) -> float:
    """``beta = 2 * eta * sqrt(log(5K / delta) / log K)``.

    ``log K`` vanishes for a single action, so it is taken at ``K = 2`` there.
    """

    if num_actions <= 0:
        raise ConfigurationError("num_actions must be positive")
    if not 0.0 < delta < 1.0:
        raise ConfigurationError(f"delta must lie in (0, 1), got {delta}")
    log_k = math.log(max(num_actions, 2))
    return 2.0 * eta * math.sqrt(math.log(5.0 * num_actions / delta) / log_k)


class ExpWeightsBandit:
    """Reward-seeking multiplicative weights over K actions."""

    def __init__(self, num_actions: int, eta: float, beta: float):
        if num_actions <= 0:
            raise ConfigurationError("num_actions must be positive")
        if not eta > 0.0:
            raise ConfigurationError(f"eta must be positive, got {eta}")
        self.num_actions = num_actions
        self.eta = eta
        self.beta = beta

    def probabilities(self, weights: np.ndarray) -> List[float]:
        """Return the normalized weight distribution over actions."""

        total = float(weights.sum())
        return (weights / total).tolist()

    def mix(self, weights: np.ndarray, exploration: np.ndarray, rate: float) -> np.ndarray:
        """``(1 - nu) * w / sum(w) + nu * s``."""

        probs = (1.0 - rate) * normalize(weights) + rate * exploration
        return normalize(np.clip(probs, 0.0, None))

    def reward_estimates(
        self,
        rewards: np.ndarray,
        observed: np.ndarray,
        observation_probabilities: np.ndarray,
    ) -> np.ndarray:
        """``(S[i] * R[i] + beta) / q[i]`` for every action."""

        return (observed * rewards + self.beta) / observation_probabilities

    def update(
        self,
        weights: np.ndarray,
        rewards: np.ndarray,
        observed: np.ndarray,
        observation_probabilities: np.ndarray,
    ) -> np.ndarray:
        """Return the next weights; the input array is left untouched."""

        rewards = np.asarray(rewards, dtype=float)
        if rewards.shape != (self.num_actions,):
            raise ConfigurationError(
                f"reward vector has shape {rewards.shape}, expected ({self.num_actions},)"
            )
        estimates = self.reward_estimates(rewards, observed, observation_probabilities)
        return weights * np.exp(self.eta * estimates)
