"""Q-learning experiment runner.

Builds a case-study model, trains a tabular Q-learner on transitions
sampled from it, and reports the learned greedy policy and returns.

Usage:
    python -m sparse_mdp.experiments.run_q_learning_experiment <config_module>

Example:
    python -m sparse_mdp.experiments.run_q_learning_experiment configs.chain_prelim
"""

import importlib
import os
import sys
import time

import numpy as np

from .experiment_io import (
    build_metadata,
    episode_rows,
    save_experiment_results,
    summarize_returns,
)
from ..Learning import QLearning, train


# ============================================================
# Helpers
# ============================================================

def load_config(config_module_name: str):
    """Import ``sparse_mdp.experiments.<config_module_name>`` and return its config."""
    module = importlib.import_module(f".{config_module_name}", package="sparse_mdp.experiments")
    return module.config


def create_learner(model, config):
    """Create a Q-learner sized for the model."""
    return QLearning(
        model.get_s(),
        model.get_a(),
        learning_rate=config.learning_rate,
        discount_factor=config.discount_factor,
        exploration_rate=config.exploration_rate,
        exploration_decay=config.exploration_decay,
        min_exploration=config.min_exploration,
        seed=config.seed,
    )


def run_experiment(config, progress: bool = True):
    """Train on the configured case study and return a results dict."""
    model = config.build_model_fn(seed=config.seed, **config.model_kwargs)
    learner = create_learner(model, config)

    t0 = time.time()
    episodes = train(
        model,
        learner,
        num_episodes=config.num_episodes,
        max_steps=config.episode_length,
        start_state=config.start_state,
        progress=progress,
    )
    elapsed = time.time() - t0

    returns = [e.discounted_return for e in episodes]
    terminated = [e.terminated for e in episodes]
    window = config.summary_window

    return {
        "num_states": model.get_s(),
        "num_actions": model.get_a(),
        "greedy_policy": learner.greedy_policy().tolist(),
        "q_table": learner.q.tolist(),
        "final_exploration_rate": learner.exploration_rate,
        "return_summary": summarize_returns(returns, window),
        "terminated_rate": float(np.mean(terminated[-window:])) if terminated else 0.0,
        "train_time_s": elapsed,
        "episodes": episode_rows(episodes),
    }


def print_report(results, case_study_name):
    """Print a summary of the experiment."""
    summary = results["return_summary"]
    print("\n" + "=" * 70)
    print(f"Q-LEARNING SUMMARY: {case_study_name.upper()}")
    print("=" * 70)
    print(f"  States: {results['num_states']}, Actions: {results['num_actions']}")
    print(f"  Greedy policy: {results['greedy_policy']}")
    print(f"  Final exploration rate: {results['final_exploration_rate']:.4f}")
    print(f"  Discounted return over last {summary['episodes']} episodes: "
          f"mean={summary['mean']:.4f}  std={summary['std']:.4f}  "
          f"p10={summary['p10']:.4f}  p90={summary['p90']:.4f}")
    print(f"  Terminated rate: {results['terminated_rate']:.2%}")
    print(f"  Training time: {results['train_time_s']:.1f}s")


def try_plot(results, config):
    """Plot discounted return per episode with a moving average."""
    if not config.figures_dir:
        return
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        print("\nmatplotlib not available, skipping plots.")
        return

    returns = np.array([row["discounted_return"] for row in results["episodes"]])
    window = max(1, min(config.summary_window, len(returns)))
    smoothed = np.convolve(returns, np.ones(window) / window, mode="valid")

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(returns, alpha=0.3, color="steelblue", label="Episode return")
    ax.plot(np.arange(window - 1, len(returns)), smoothed, color="darkblue",
            label=f"Moving average ({window})")
    ax.set_xlabel("Episode")
    ax.set_ylabel("Discounted return")
    ax.set_title(f"Q-learning on {config.case_study_name}")
    ax.legend()
    ax.grid(True, alpha=0.3)

    os.makedirs(config.figures_dir, exist_ok=True)
    path = os.path.join(config.figures_dir, f"q_learning_{config.case_study_name}.png")
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\nPlot saved to {path}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m sparse_mdp.experiments.run_q_learning_experiment <config_module>")
        print("Example: python -m sparse_mdp.experiments.run_q_learning_experiment configs.chain_prelim")
        sys.exit(1)

    try:
        config = load_config(sys.argv[1])
    except (ImportError, AttributeError) as e:
        print(f"Error loading config: {e}")
        sys.exit(1)

    print("=" * 70)
    print(f"Q-LEARNING EXPERIMENT: {config.case_study_name.upper()}")
    print(f"Episodes: {config.num_episodes}, Length: {config.episode_length}, Seed: {config.seed}")
    print(f"Learning rate: {config.learning_rate}, Discount: {config.discount_factor}")
    print("=" * 70)

    results = run_experiment(config)
    print_report(results, config.case_study_name)

    metadata = build_metadata(config, extra={"total_time_s": results["train_time_s"]})
    save_experiment_results(config.results_path, results, metadata)
    print(f"\nResults saved to {config.results_path}")

    try_plot(results, config)

    print("\n" + "=" * 70)
    print("EXPERIMENT COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    main()
