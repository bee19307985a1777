"""
Minimal runnable demo of the graph-feedback learner on the stochastic environment.
"""

import csv
from pathlib import Path

from feedgraph.config import load_config_from_env
from feedgraph.envs.stochastic_env import build_demo_environment
from feedgraph.learner import run_experiment
from feedgraph.types import RunResult
from feedgraph.utils import get_logger


def write_weights(path: Path, result: RunResult) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["round"] + [f"w{i}" for i in range(result.weights.shape[1])])
        for t, row in enumerate(result.weights):
            writer.writerow([t] + [f"{w:.6g}" for w in row])


def main() -> None:
    get_logger("feedgraph")
    env_path = Path(__file__).resolve().parents[1] / ".env"
    learner_config, run_config = load_config_from_env(env_path if env_path.exists() else None)
    run_config.verbose = True

    env_seed = None if run_config.seed is None else run_config.seed + 1
    env = build_demo_environment(num_actions=5, full_feedback_prob=0.3, seed=env_seed)
    result = run_experiment(env, learner_config, run_config)

    out_path = Path(__file__).resolve().parents[1] / "results" / "weights.csv"
    write_weights(out_path, result)
    print(f"best action={env.best_action()} ranking={result.ranking()}")
    print(f"wrote {out_path}")


if __name__ == "__main__":
    main()
