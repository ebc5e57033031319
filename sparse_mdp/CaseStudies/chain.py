"""Slippery chain MDP.

States 0..n-1 lie on a line and the last state is the absorbing goal.
Moving RIGHT advances one state but slips and stays put with probability
``slip``; moving LEFT is deterministic. The step into the goal is
deterministic and is the only rewarded transition, so rewards recovered
from the stored expected rewards are exact.
"""

from typing import Optional

from ..Models.mdp import TabularMDP
from ..Models.sparse_model import SparseModel

LEFT = 0
RIGHT = 1


def build_chain_tabular(
    num_states: int = 10,
    slip: float = 0.2,
    goal_reward: float = 1.0,
    discount: float = 0.95,
) -> TabularMDP:
    """Build the chain as a dictionary-backed model."""
    if num_states < 2:
        raise ValueError(f"Chain needs at least 2 states, got {num_states}")
    if not 0.0 <= slip < 1.0:
        raise ValueError(f"slip must be in [0, 1), got {slip}")

    goal = num_states - 1
    P = {}
    R = {}
    for s in range(num_states):
        if s == goal:
            P[(s, LEFT)] = {s: 1.0}
            P[(s, RIGHT)] = {s: 1.0}
            continue

        P[(s, LEFT)] = {max(s - 1, 0): 1.0}
        if s + 1 == goal or slip == 0.0:
            P[(s, RIGHT)] = {s + 1: 1.0}
        else:
            P[(s, RIGHT)] = {s + 1: 1.0 - slip, s: slip}

    R[(goal - 1, RIGHT)] = {goal: goal_reward}
    return TabularMDP(num_states, 2, discount, P, R)


def build_chain_mdp(
    num_states: int = 10,
    slip: float = 0.2,
    goal_reward: float = 1.0,
    discount: float = 0.95,
    seed: Optional[int] = None,
) -> SparseModel:
    """Build the chain and store it in a SparseModel."""
    tabular = build_chain_tabular(num_states, slip, goal_reward, discount)
    return tabular.to_sparse(seed=seed)
