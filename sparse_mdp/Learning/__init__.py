"""Tabular learning driven by samples from a sparse MDP model."""

from .q_learning import QLearning
from .simulation import EpisodeResult, run_episode, train

__all__ = ['QLearning', 'EpisodeResult', 'run_episode', 'train']
