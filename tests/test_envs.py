import numpy as np
import pytest

from feedgraph.envs import ScriptedEnvironment, StochasticGraphEnvironment, build_demo_environment
from feedgraph.errors import ConfigurationError
from feedgraph.graphs import build_two_graph_catalog


def test_stochastic_rewards_respect_mask():
    env = StochasticGraphEnvironment(
        catalog=build_two_graph_catalog(3),
        reward_alpha=[2.0, 2.0, 2.0],
        reward_beta=[2.0, 2.0, 2.0],
        graph_probs=[0.5, 0.5],
        reward_mask=[1.0, 0.0, 1.0],
        rng=0,
    )
    for t in range(20):
        rewards, graph_index = env.reward(t, t % 3)
        assert rewards.shape == (3,)
        assert rewards[1] == 0.0
        assert ((rewards >= 0) & (rewards <= 1)).all()
        assert graph_index in (0, 1)


def test_graph_selection_follows_per_action_probabilities():
    env = StochasticGraphEnvironment(
        catalog=build_two_graph_catalog(2),
        reward_alpha=[1.0, 1.0],
        reward_beta=[1.0, 1.0],
        graph_probs=[[1.0, 0.0], [0.0, 1.0]],
        rng=1,
    )
    assert {env.reward(t, 0)[1] for t in range(10)} == {0}
    assert {env.reward(t, 1)[1] for t in range(10)} == {1}


def test_seeded_environments_match():
    a = build_demo_environment(num_actions=4, seed=5)
    b = build_demo_environment(num_actions=4, seed=5)
    for t in range(10):
        ra, ga = a.reward(t, t % 4)
        rb, gb = b.reward(t, t % 4)
        np.testing.assert_array_equal(ra, rb)
        assert ga == gb


def test_demo_environment_best_action():
    env = build_demo_environment(num_actions=5)
    assert env.best_action() == 0
    assert env.mean_rewards[0] == pytest.approx(5.0 / 7.0)


def test_stochastic_validation():
    catalog = build_two_graph_catalog(2)
    with pytest.raises(ConfigurationError):
        StochasticGraphEnvironment(catalog, [1.0], [1.0, 1.0], [0.5, 0.5])
    with pytest.raises(ConfigurationError):
        StochasticGraphEnvironment(catalog, [1.0, 0.0], [1.0, 1.0], [0.5, 0.5])
    with pytest.raises(ConfigurationError):
        StochasticGraphEnvironment(catalog, [1.0, 1.0], [1.0, 1.0], [0.7, 0.7])
    env = StochasticGraphEnvironment(catalog, [1.0, 1.0], [1.0, 1.0], [0.5, 0.5])
    with pytest.raises(ConfigurationError):
        env.reward(0, 2)


def test_scripted_environment_cycles():
    env = ScriptedEnvironment(
        build_two_graph_catalog(2), rewards=[[1.0, 0.0], [0.0, 1.0]], graph_indices=[0, 1]
    )
    assert env.reward(0, 1)[1] == 0
    assert env.reward(1, 0)[1] == 1
    rewards, graph_index = env.reward(2, 0)
    np.testing.assert_array_equal(rewards, [1.0, 0.0])
    assert graph_index == 0
    assert list(env.calls) == [(0, 1), (1, 0), (2, 0)]


def test_scripted_environment_validation():
    catalog = build_two_graph_catalog(2)
    with pytest.raises(ConfigurationError):
        ScriptedEnvironment(catalog, rewards=[], graph_indices=[])
    with pytest.raises(ConfigurationError):
        ScriptedEnvironment(catalog, rewards=[[1.0, 0.0]], graph_indices=[2])
    with pytest.raises(ConfigurationError):
        ScriptedEnvironment(catalog, rewards=[[1.0]], graph_indices=[0])


def test_scripted_environment_keeps_recent_calls_only():
    env = ScriptedEnvironment(
        build_two_graph_catalog(2), rewards=[[1.0, 0.0]], graph_indices=[0], max_calls=2
    )
    for t in range(5):
        env.reward(t, t % 2)
    assert list(env.calls) == [(3, 1), (4, 0)]
