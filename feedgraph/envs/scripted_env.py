"""
Deterministic environment replaying fixed rewards and graph indices.
"""

from collections import deque
from typing import Sequence, Tuple

import numpy as np

from feedgraph.envs.base import Environment
from feedgraph.errors import ConfigurationError
from feedgraph.graphs import FeedbackGraphCatalog


class ScriptedEnvironment(Environment):
    """Cycles through scripted ``(rewards, graph_index)`` outputs.

    The most recent ``max_calls`` queries are kept in ``calls`` for inspection.
    """

    def __init__(
        self,
        catalog: FeedbackGraphCatalog,
        rewards: Sequence[Sequence[float]],
        graph_indices: Sequence[int],
        max_calls: int = 1000,
    ):
        if len(rewards) == 0 or len(rewards) != len(graph_indices):
            raise ConfigurationError("need matching, non-empty rewards and graph_indices")
        self.catalog = catalog
        self.rewards = [np.asarray(r, dtype=float) for r in rewards]
        for r in self.rewards:
            if r.shape != (catalog.num_actions,):
                raise ConfigurationError(f"reward vector has shape {r.shape}")
        self.graph_indices = [catalog.check_graph_index(g) for g in graph_indices]
        self.calls = deque(maxlen=max_calls)

    @property
    def num_actions(self) -> int:
        return self.catalog.num_actions

    def graphs(self, round_index: int) -> FeedbackGraphCatalog:
        return self.catalog

    def reward(self, round_index: int, action: int) -> Tuple[np.ndarray, int]:
        self.calls.append((round_index, action))
        idx = round_index % len(self.rewards)
        return self.rewards[idx].copy(), self.graph_indices[idx]
