"""Tabular Q-learning over integer states and actions."""

from typing import Optional

import numpy as np


class QLearning:
    """Tabular Q-learning with epsilon-greedy exploration.

    Consumes (state, action, reward, next_state) experience, typically
    produced by ``SparseModel.sample_sr``.
    """

    def __init__(
        self,
        S: int,
        A: int,
        learning_rate: float = 0.1,
        discount_factor: float = 0.99,
        exploration_rate: float = 0.1,
        exploration_decay: float = 0.99,
        min_exploration: float = 0.01,
        seed: Optional[int] = None,
    ):
        """Initialize the Q table to zeros.

        Parameters
        ----------
        S : int
            Number of states
        A : int
            Number of actions
        learning_rate : float
            Step size of the update, in (0, 1]
        discount_factor : float
            Future reward discount (gamma), in [0, 1]
        exploration_rate : float
            Initial epsilon for epsilon-greedy exploration
        exploration_decay : float
            Multiplicative decay applied to epsilon per episode
        min_exploration : float
            Minimum epsilon value
        seed : int, optional
            Seed for exploration
        """
        if S < 1 or A < 1:
            raise ValueError(f"S and A must be positive, got S={S}, A={A}")
        if not 0.0 < learning_rate <= 1.0:
            raise ValueError(f"learning_rate must be in (0, 1], got {learning_rate}")
        if not 0.0 <= discount_factor <= 1.0:
            raise ValueError(f"discount_factor must be in [0, 1], got {discount_factor}")
        if not 0.0 <= min_exploration <= exploration_rate <= 1.0:
            raise ValueError(
                "Expected 0 <= min_exploration <= exploration_rate <= 1, got "
                f"{min_exploration} and {exploration_rate}"
            )
        if not 0.0 < exploration_decay <= 1.0:
            raise ValueError(f"exploration_decay must be in (0, 1], got {exploration_decay}")

        self.S = S
        self.A = A
        self.learning_rate = learning_rate
        self.discount_factor = discount_factor
        self.exploration_rate = exploration_rate
        self.exploration_decay = exploration_decay
        self.min_exploration = min_exploration
        self.q = np.zeros((S, A), dtype=float)
        self.rng = np.random.default_rng(seed)

    def get_action(self, s: int) -> int:
        """Epsilon-greedy action for state s. Ties go to the lowest action."""
        if self.rng.random() < self.exploration_rate:
            return int(self.rng.integers(self.A))
        return int(np.argmax(self.q[s]))

    def update_q_table(self, s: int, a: int, reward: float, s1: int, terminal: bool = False):
        """One-step Q-learning update for the transition (s, a, reward, s1)."""
        target = reward
        if not terminal:
            target += self.discount_factor * float(np.max(self.q[s1]))
        self.q[s, a] += self.learning_rate * (target - self.q[s, a])

    def update_epsilon(self):
        """Decay exploration rate after an episode."""
        self.exploration_rate = max(
            self.min_exploration,
            self.exploration_rate * self.exploration_decay
        )

    def greedy_policy(self) -> np.ndarray:
        """Return the greedy action of every state."""
        return np.argmax(self.q, axis=1)
