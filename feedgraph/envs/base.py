"""
Environment oracle interface consumed by the learner.
"""

from typing import Tuple

import numpy as np

from feedgraph.graphs import FeedbackGraphCatalog


class Environment:
    """Base environment oracle.

    ``graphs(t)`` returns the candidate catalog for round ``t`` and
    ``reward(t, action)`` returns the full reward vector together with the
    index of the candidate graph that governed the round.
    """

    @property
    def num_actions(self) -> int:
        raise NotImplementedError

    def graphs(self, round_index: int) -> FeedbackGraphCatalog:
        raise NotImplementedError

    def reward(self, round_index: int, action: int) -> Tuple[np.ndarray, int]:
        raise NotImplementedError
