"""
Round orchestration for the graph-feedback learner.

Each round reads the meta probabilities, solves the coverage program, mixes
the exploration distribution into the normalized action weights, plays a
sampled action, and then updates both weight sets from the revealed
feedback. Both weight sets are rescaled so their largest entry is one, which
leaves every normalized distribution unchanged, and are committed together
at the end of the round.
"""

import logging
from typing import List, Optional

import numpy as np

from feedgraph.bandit import ExpWeightsBandit, confidence_bias
from feedgraph.config import LearnerConfig, RunConfig
from feedgraph.envs.base import Environment
from feedgraph.errors import (
    ConfigurationError,
    InfeasibleProgramError,
    NumericalDegeneracyError,
    SolverError,
)
from feedgraph.estimator import ObservationEstimator
from feedgraph.graphs import FeedbackGraphCatalog
from feedgraph.meta import MetaEstimator
from feedgraph.program import ExplorationProgram
from feedgraph.types import LearnerState, RoundObservation, RoundRecord, RunResult
from feedgraph.utils import RandomSource, make_rng, rescale

logger = logging.getLogger(__name__)


class GraphFeedbackLearner:
    """Coordinates the coverage program, both weight updaters and the environment."""

    def __init__(
        self,
        environment: Environment,
        config: Optional[LearnerConfig] = None,
        rng: RandomSource = None,
    ):
        self.environment = environment
        self.config = (config or LearnerConfig()).validate()
        self.rng = make_rng(rng)

        num_actions = environment.num_actions
        if num_actions <= 0:
            raise ConfigurationError(f"num_actions must be positive, got {num_actions}")
        self.num_actions = num_actions
        self.num_graphs = environment.graphs(0).num_graphs

        self.beta = confidence_bias(self.config.eta, self.config.delta, num_actions)
        self.bandit = ExpWeightsBandit(num_actions, self.config.eta, self.beta)
        self.meta = MetaEstimator(self.config.eta_meta)
        self.program = ExplorationProgram(
            floor_epsilon=self.config.floor_epsilon,
            method=self.config.solver_method,
            retries=self.config.solver_retries,
        )
        self.estimator = ObservationEstimator(
            floor_epsilon=self.config.floor_epsilon,
            clip=self.config.clip_observation_probability,
        )
        self.state = LearnerState.initial(num_actions, self.num_graphs)

    def probabilities(self) -> List[float]:
        return self.bandit.probabilities(self.state.weights)

    def meta_probabilities(self) -> np.ndarray:
        return self.meta.probabilities(self.state.meta_weights)

    def _catalog(self, round_index: int) -> FeedbackGraphCatalog:
        catalog = self.environment.graphs(round_index)
        if catalog.num_actions != self.num_actions or catalog.num_graphs != self.num_graphs:
            raise ConfigurationError(
                f"round {round_index}: catalog is {catalog.num_graphs} graphs over "
                f"{catalog.num_actions} actions, expected {self.num_graphs} over {self.num_actions}"
            )
        return catalog

    def exploration_rate(self, min_coverage: float) -> float:
        rate = (1.0 + self.beta) * self.config.eta / min_coverage
        if not 0.0 <= rate <= 1.0:
            raise NumericalDegeneracyError(
                "exploration_rate",
                f"nu={rate!r} outside [0, 1] (eta={self.config.eta}, beta={self.beta:.4f}, "
                f"min_s={min_coverage!r}); lower eta",
            )
        return rate

    def step(self) -> RoundRecord:
        """Play one round and commit the updated weights."""

        state = self.state
        t = state.round_index
        try:
            record = self._play(state)
        except (InfeasibleProgramError, NumericalDegeneracyError, SolverError) as exc:
            raise exc.at_round(t)
        self.state = record.state
        return record

    def _play(self, state: LearnerState) -> RoundRecord:
        t = state.round_index
        catalog = self._catalog(t)
        p_meta = self.meta.probabilities(state.meta_weights)
        solution = self.program.solve(catalog, p_meta)
        rate = self.exploration_rate(solution.min_coverage)
        probs = self.bandit.mix(state.weights, solution.distribution, rate)

        action = int(self.rng.choice(self.num_actions, p=probs))
        rewards, graph_index = self.environment.reward(t, action)
        rewards = np.asarray(rewards, dtype=float)
        graph_index = catalog.check_graph_index(graph_index)
        observed = catalog.observed_set(graph_index, action)

        q_hat = self.estimator.estimate(catalog, graph_index, probs, p_meta, observed)
        weights = rescale(self.bandit.update(state.weights, rewards, observed, q_hat))
        meta_weights = rescale(
            self.meta.update(state.meta_weights, graph_index, observed, p_meta, q_hat),
            axis=0,
        )
        for name, values in (("weights", weights), ("meta_weights", meta_weights)):
            if not (np.isfinite(values).all() and (values > 0.0).all()):
                raise NumericalDegeneracyError(
                    "weights", f"{name} left the positive finite range"
                )

        logger.debug(
            "round=%d action=%d graph=%d min_s=%.4f nu=%.4f",
            t,
            action,
            graph_index,
            solution.min_coverage,
            rate,
        )
        return RoundRecord(
            round_index=t,
            meta_probabilities=p_meta,
            exploration=solution.distribution,
            min_coverage=solution.min_coverage,
            exploration_rate=rate,
            probabilities=probs,
            observation=RoundObservation(
                action=action,
                rewards=rewards,
                graph_index=graph_index,
                observed=observed,
            ),
            observation_probabilities=q_hat,
            state=LearnerState(
                round_index=t + 1,
                weights=weights,
                meta_weights=meta_weights,
            ),
        )

    def run(self, rounds: int, verbose: bool = False, log_every: int = 100) -> RunResult:
        """Play ``rounds`` rounds from the current state and return the trajectories."""

        if rounds < 0:
            raise ConfigurationError(f"rounds must be non-negative, got {rounds}")
        weights = [self.state.weights]
        meta_weights = [self.state.meta_weights]
        records: List[RoundRecord] = []
        for _ in range(rounds):
            record = self.step()
            weights.append(record.state.weights)
            meta_weights.append(record.state.meta_weights)
            if self.config.keep_history:
                records.append(record)
            if verbose and record.state.round_index % log_every == 0:
                probs = self.probabilities()
                logger.info(
                    "Round %d/%d leader=%d p=%.3f",
                    record.state.round_index,
                    rounds,
                    int(np.argmax(probs)),
                    max(probs),
                )
        return RunResult(
            weights=np.stack(weights),
            meta_weights=np.stack(meta_weights),
            records=records,
            beta=self.beta,
        )


def run_experiment(
    environment: Environment,
    learner_config: Optional[LearnerConfig] = None,
    run_config: Optional[RunConfig] = None,
) -> RunResult:
    """Build a seeded learner and run it for ``run_config.rounds`` rounds."""

    run_config = (run_config or RunConfig()).validate()
    learner = GraphFeedbackLearner(environment, learner_config, rng=run_config.seed)
    return learner.run(
        run_config.rounds, verbose=run_config.verbose, log_every=run_config.log_every
    )
