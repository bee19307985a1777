"""
Configuration dataclasses for feedgraph components.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple, TypeVar, Union

from dotenv import load_dotenv

from feedgraph.errors import ConfigurationError

T = TypeVar("T")

ENV_PREFIX = "FEEDGRAPH_"


@dataclass
class LearnerConfig:
    """Learning rates, confidence level and numerical guards."""

    eta: float = 0.1
    eta_meta: Optional[float] = None
    delta: float = 0.1
    floor_epsilon: float = 1e-12
    clip_observation_probability: bool = False
    solver_method: str = "highs"
    solver_retries: int = 1
    keep_history: bool = True

    def __post_init__(self) -> None:
        if self.eta_meta is None:
            self.eta_meta = self.eta / 2.0

    def validate(self) -> "LearnerConfig":
        if not self.eta > 0.0:
            raise ConfigurationError(f"eta must be positive, got {self.eta}")
        if not self.eta_meta > 0.0:
            raise ConfigurationError(f"eta_meta must be positive, got {self.eta_meta}")
        if not 0.0 < self.delta < 1.0:
            raise ConfigurationError(f"delta must lie in (0, 1), got {self.delta}")
        if not self.floor_epsilon > 0.0:
            raise ConfigurationError("floor_epsilon must be positive")
        if self.solver_retries < 0:
            raise ConfigurationError("solver_retries must be non-negative")
        return self


@dataclass
class RunConfig:
    """Run loop settings."""

    rounds: int = 1000
    seed: Optional[int] = 7
    verbose: bool = False
    log_every: int = 100

    def validate(self) -> "RunConfig":
        if self.rounds < 0:
            raise ConfigurationError(f"rounds must be non-negative, got {self.rounds}")
        if self.log_every <= 0:
            raise ConfigurationError("log_every must be positive")
        return self


def _read(name: str, cast: Callable[[str], T], default: T) -> T:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name}={raw!r} is not a valid value") from exc


def load_config_from_env(
    env_path: Optional[Union[str, Path]] = None,
) -> Tuple[LearnerConfig, RunConfig]:
    """Build configs from FEEDGRAPH_* variables, loading ``env_path`` first if given."""

    if env_path is not None:
        load_dotenv(env_path)
    defaults = LearnerConfig()
    eta = _read("ETA", float, defaults.eta)
    learner = LearnerConfig(
        eta=eta,
        eta_meta=_read("ETA_META", float, eta / 2.0),
        delta=_read("DELTA", float, defaults.delta),
    )
    run_defaults = RunConfig()
    run = RunConfig(
        rounds=_read("ROUNDS", int, run_defaults.rounds),
        seed=_read("SEED", int, run_defaults.seed),
        verbose=_read("VERBOSE", lambda v: v.lower() in ("1", "true", "yes"), False),
    )
    return learner.validate(), run.validate()
