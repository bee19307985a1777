import numpy as np
import pytest

from feedgraph.config import LearnerConfig
from feedgraph.envs.scripted_env import ScriptedEnvironment
from feedgraph.graphs import FeedbackGraphCatalog, build_two_graph_catalog


@pytest.fixture
def two_graph_catalog() -> FeedbackGraphCatalog:
    return build_two_graph_catalog(2)


@pytest.fixture
def uniform_meta() -> np.ndarray:
    return np.full((2, 2), 0.5)


@pytest.fixture
def scenario_config() -> LearnerConfig:
    return LearnerConfig(eta=0.1, eta_meta=0.05, delta=0.1)


@pytest.fixture
def scenario_env(two_graph_catalog) -> ScriptedEnvironment:
    return ScriptedEnvironment(two_graph_catalog, rewards=[[1.0, 0.0]], graph_indices=[1])


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FEEDGRAPH_* variables and restore them after the test."""

    for name in ("ETA", "ETA_META", "DELTA", "ROUNDS", "SEED", "VERBOSE"):
        monkeypatch.setenv("FEEDGRAPH_" + name, "")
        monkeypatch.delenv("FEEDGRAPH_" + name)
    return monkeypatch
