"""Markov Decision Process interface and dictionary-backed model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol, Tuple, runtime_checkable

from .sparse_model import SparseModel

State = int
Action = int


@runtime_checkable
class MDPModel(Protocol):
    """Minimal capability set of a finite MDP over integer states and actions.

    Any object providing these five methods can be converted into a
    SparseModel with ``SparseModel.from_model``.
    """

    def get_s(self) -> int: ...

    def get_a(self) -> int: ...

    def get_discount(self) -> float: ...

    def get_transition_probability(self, s: State, a: Action, s1: State) -> float: ...

    def get_expected_reward(self, s: State, a: Action, s1: State) -> float: ...


@dataclass
class TabularMDP:
    """
    Markov Decision Process answered on demand from dictionaries.

    num_states  : number of states, states are 0..num_states-1
    num_actions : number of actions, actions are 0..num_actions-1
    discount    : discount factor
    P           : mapping (s, a) -> {s' -> P(s' | s, a)}
    R           : mapping (s, a) -> {s' -> reward of the transition (s, a, s')}

    Missing entries in P and R are zero.
    """
    num_states: int
    num_actions: int
    discount: float = 1.0
    P: Dict[Tuple[State, Action], Dict[State, float]] = field(default_factory=dict)
    R: Dict[Tuple[State, Action], Dict[State, float]] = field(default_factory=dict)

    def get_s(self) -> int:
        return self.num_states

    def get_a(self) -> int:
        return self.num_actions

    def get_discount(self) -> float:
        return self.discount

    def get_transition_probability(self, s: State, a: Action, s1: State) -> float:
        return float(self.P.get((s, a), {}).get(s1, 0.0))

    def get_expected_reward(self, s: State, a: Action, s1: State) -> float:
        return float(self.R.get((s, a), {}).get(s1, 0.0))

    def to_sparse(self, seed=None) -> SparseModel:
        """Store this model in a SparseModel."""
        return SparseModel.from_model(self, seed=seed)
