"""Episode loop driving a learner with samples from an MDP model."""

from dataclasses import dataclass
from typing import List

from tqdm import trange

from ..Models.sparse_model import SparseModel
from .q_learning import QLearning


@dataclass
class EpisodeResult:
    """Outcome of a single simulated episode.

    Attributes
    ----------
    steps : int
        Number of transitions sampled
    total_reward : float
        Undiscounted sum of rewards
    discounted_return : float
        Sum of rewards discounted by the model's discount factor
    terminated : bool
        True if the episode reached a terminal state before max_steps
    """
    steps: int
    total_reward: float
    discounted_return: float
    terminated: bool


def run_episode(
    model: SparseModel,
    learner: QLearning,
    start_state: int = 0,
    max_steps: int = 100,
    learn: bool = True,
) -> EpisodeResult:
    """Run one episode from start_state.

    At each step the learner picks an action, the model samples the next
    state and reward, and the learner updates its Q table. The episode
    stops when a terminal state is reached or after max_steps.
    """
    s = start_state
    total_reward = 0.0
    discounted_return = 0.0
    weight = 1.0
    discount = model.get_discount()

    for step in range(max_steps):
        if model.is_terminal(s):
            return EpisodeResult(step, total_reward, discounted_return, True)

        a = learner.get_action(s)
        s1, reward = model.sample_sr(s, a)
        if learn:
            learner.update_q_table(s, a, reward, s1, terminal=model.is_terminal(s1))

        total_reward += reward
        discounted_return += weight * reward
        weight *= discount
        s = s1

    return EpisodeResult(max_steps, total_reward, discounted_return, model.is_terminal(s))


def train(
    model: SparseModel,
    learner: QLearning,
    num_episodes: int,
    max_steps: int = 100,
    start_state: int = 0,
    progress: bool = False,
) -> List[EpisodeResult]:
    """Run num_episodes learning episodes, decaying exploration after each."""
    results = []
    for _ in trange(num_episodes, desc="Training", disable=not progress):
        results.append(run_episode(model, learner, start_state, max_steps))
        learner.update_epsilon()
    return results
