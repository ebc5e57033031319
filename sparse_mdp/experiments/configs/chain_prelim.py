"""Preliminary Q-learning experiment configuration for the slippery chain."""

from .base_config import QLearningExperimentConfig
from ...CaseStudies.chain import build_chain_mdp


config = QLearningExperimentConfig(
    case_study_name="chain",
    build_model_fn=build_chain_mdp,
    seed=42,
    num_episodes=300,
    episode_length=100,
    start_state=0,
    learning_rate=0.2,
    discount_factor=0.95,
    exploration_rate=1.0,
    exploration_decay=0.98,
    min_exploration=0.05,
    results_path="./data/prelim/q_learning_chain_results.json",
    figures_dir="./images/prelim",
    model_kwargs={"num_states": 10, "slip": 0.2, "goal_reward": 1.0, "discount": 0.95},
)
