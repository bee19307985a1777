"""
Reference environments with Beta rewards and randomly drawn feedback graphs.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from feedgraph.envs.base import Environment
from feedgraph.errors import ConfigurationError
from feedgraph.graphs import FeedbackGraphCatalog, build_two_graph_catalog
from feedgraph.utils import RandomSource, make_rng


class StochasticGraphEnvironment(Environment):
    """Static catalog, Beta rewards, per-action categorical graph selection."""

    def __init__(
        self,
        catalog: FeedbackGraphCatalog,
        reward_alpha: Sequence[float],
        reward_beta: Sequence[float],
        graph_probs: Sequence,
        reward_mask: Optional[Sequence[float]] = None,
        rng: RandomSource = None,
    ):
        k = catalog.num_actions
        self.catalog = catalog
        self.reward_alpha = np.asarray(reward_alpha, dtype=float)
        self.reward_beta = np.asarray(reward_beta, dtype=float)
        if self.reward_alpha.shape != (k,) or self.reward_beta.shape != (k,):
            raise ConfigurationError("Beta parameters need one entry per action")
        if (self.reward_alpha <= 0).any() or (self.reward_beta <= 0).any():
            raise ConfigurationError("Beta parameters must be positive")
        self.reward_mask = (
            np.ones(k) if reward_mask is None else np.asarray(reward_mask, dtype=float)
        )
        if self.reward_mask.shape != (k,):
            raise ConfigurationError("reward_mask needs one entry per action")

        probs = np.asarray(graph_probs, dtype=float)
        if probs.ndim == 1:
            probs = np.repeat(probs[:, np.newaxis], k, axis=1)
        if probs.shape != (catalog.num_graphs, k):
            raise ConfigurationError(
                f"graph_probs has shape {probs.shape}, expected {(catalog.num_graphs, k)}"
            )
        if (probs < 0).any() or not np.allclose(probs.sum(axis=0), 1.0):
            raise ConfigurationError("graph_probs columns must be probability vectors")
        self.graph_probs = probs
        self.rng = make_rng(rng)

    @property
    def num_actions(self) -> int:
        return self.catalog.num_actions

    @property
    def mean_rewards(self) -> np.ndarray:
        return self.reward_mask * self.reward_alpha / (self.reward_alpha + self.reward_beta)

    def best_action(self) -> int:
        return int(np.argmax(self.mean_rewards))

    def graphs(self, round_index: int) -> FeedbackGraphCatalog:
        return self.catalog

    def reward(self, round_index: int, action: int) -> Tuple[np.ndarray, int]:
        if not 0 <= action < self.num_actions:
            raise ConfigurationError(f"action {action} outside 0..{self.num_actions - 1}")
        rewards = self.reward_mask * self.rng.beta(self.reward_alpha, self.reward_beta)
        graph_index = int(self.rng.choice(self.catalog.num_graphs, p=self.graph_probs[:, action]))
        return rewards, graph_index


def build_demo_environment(
    num_actions: int = 5,
    full_feedback_prob: float = 0.3,
    seed: RandomSource = 7,
) -> StochasticGraphEnvironment:
    """Self-loop / complete graph pair with a single clearly best action."""

    alpha = np.full(num_actions, 2.0)
    beta = np.full(num_actions, 5.0)
    alpha[0] = 5.0
    beta[0] = 2.0
    return StochasticGraphEnvironment(
        catalog=build_two_graph_catalog(num_actions),
        reward_alpha=alpha,
        reward_beta=beta,
        graph_probs=[1.0 - full_feedback_prob, full_feedback_prob],
        rng=seed,
    )
