"""
Environment package for feedgraph.
"""

from feedgraph.envs.base import Environment
from feedgraph.envs.scripted_env import ScriptedEnvironment
from feedgraph.envs.stochastic_env import StochasticGraphEnvironment, build_demo_environment

__all__ = [
    "Environment",
    "ScriptedEnvironment",
    "StochasticGraphEnvironment",
    "build_demo_environment",
]
