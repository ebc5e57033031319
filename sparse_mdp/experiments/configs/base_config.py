"""Base configuration classes for experiments."""

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class QLearningExperimentConfig:
    """Configuration for Q-learning experiments on a sampled model."""

    # Case study
    case_study_name: str
    build_model_fn: Callable

    # Experiment parameters
    seed: int
    num_episodes: int
    episode_length: int
    start_state: int

    # Q-learning
    learning_rate: float
    discount_factor: float
    exploration_rate: float
    exploration_decay: float
    min_exploration: float

    # Output
    results_path: str
    figures_dir: Optional[str] = None

    # Number of final episodes averaged in the summary
    summary_window: int = 50

    # Optional build_model kwargs
    model_kwargs: dict = None

    def __post_init__(self):
        if self.model_kwargs is None:
            self.model_kwargs = {}
