"""
Candidate feedback graph catalogs.

Each candidate is a K x K 0/1 matrix ``G`` where ``G[j, i] == 1`` means that
playing action ``i`` while this graph is active reveals the reward of action
``j``. Which candidate governs a round is drawn by the environment and only
learned online.
"""

from typing import List, Sequence

import numpy as np

from feedgraph.errors import ConfigurationError


class FeedbackGraphCatalog:
    """Ordered set of C candidate feedback graphs over the same K actions."""

    def __init__(self, graphs: Sequence):
        if len(graphs) == 0:
            raise ConfigurationError("catalog needs at least one candidate graph")
        matrices = [np.asarray(g, dtype=float) for g in graphs]
        first = matrices[0]
        if first.ndim != 2 or first.shape[0] != first.shape[1] or first.shape[0] == 0:
            raise ConfigurationError(f"graph 0 must be a non-empty square matrix, got {first.shape}")
        for idx, g in enumerate(matrices):
            if g.shape != first.shape:
                raise ConfigurationError(
                    f"graph {idx} has shape {g.shape}, expected {first.shape}"
                )
            if not np.isin(g, (0.0, 1.0)).all():
                raise ConfigurationError(f"graph {idx} has entries outside {{0, 1}}")
        self.matrices = np.stack(matrices)
        self.matrices.setflags(write=False)

    @property
    def num_graphs(self) -> int:
        return self.matrices.shape[0]

    @property
    def num_actions(self) -> int:
        return self.matrices.shape[1]

    def __len__(self) -> int:
        return self.num_graphs

    def __getitem__(self, graph_index: int) -> np.ndarray:
        return self.matrices[graph_index]

    def check_graph_index(self, graph_index: int) -> int:
        if not 0 <= graph_index < self.num_graphs:
            raise ConfigurationError(
                f"graph index {graph_index} outside catalog of size {self.num_graphs}"
            )
        return int(graph_index)

    def observed_set(self, graph_index: int, action: int) -> np.ndarray:
        """Mask of actions whose feedback is revealed when ``action`` is played."""

        graph_index = self.check_graph_index(graph_index)
        if not 0 <= action < self.num_actions:
            raise ConfigurationError(f"action {action} outside 0..{self.num_actions - 1}")
        return self.matrices[graph_index][:, action].copy()

    def coverage_coefficients(self, meta_probabilities: np.ndarray) -> np.ndarray:
        """Per-vertex ``sum_c (G_c @ p_meta[c])``."""

        p_meta = np.asarray(meta_probabilities, dtype=float)
        if p_meta.shape != (self.num_graphs, self.num_actions):
            raise ConfigurationError(
                f"meta probabilities have shape {p_meta.shape}, "
                f"expected {(self.num_graphs, self.num_actions)}"
            )
        return np.einsum("cji,ci->j", self.matrices, p_meta)

    def uncovered_vertices(self) -> List[int]:
        """Vertices no candidate graph can ever reveal."""

        reach = self.matrices.sum(axis=(0, 2))
        return [int(i) for i in np.flatnonzero(reach == 0)]


def build_two_graph_catalog(num_actions: int) -> FeedbackGraphCatalog:
    """Self-loop-only graph paired with the complete graph."""

    return FeedbackGraphCatalog(
        [np.eye(num_actions), np.ones((num_actions, num_actions))]
    )
