"""Markov Decision Process model backed by sparse matrices.

Transitions are stored as one S x S CSR matrix per action, and rewards as a
single S x A CSR matrix of expected rewards. Entries closer to zero than
EPSILON are never stored: an absent entry is a zero probability or a zero
reward, not an unknown one.
"""

from __future__ import annotations

import warnings
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.sparse as sp

from .probability import (
    EPSILON,
    as_dense_3d,
    check_different_small,
    check_equal_small,
    is_probability,
)
from .seeder import get_seed

TransitionMatrix = List[sp.csr_matrix]
RewardMatrix = sp.csr_matrix


class SparseModel:
    """Finite MDP with sparse transition and expected-reward storage.

    For every action a, ``T[a]`` is an S x S matrix where entry (s, s1) is
    the probability of moving from s to s1 when performing a. Every row of
    every ``T[a]`` sums to one. ``R`` is an S x A matrix where entry (s, a)
    is the expected reward of performing a in s, that is the sum over s1 of
    P(s1 | s, a) * r(s, a, s1).

    The plain constructor builds a model where every state loops back to
    itself under every action with all rewards zero, so a model is always
    valid and can be sampled right away. The other ways to build a model are
    the ``from_dense``, ``from_model`` and ``from_unchecked`` classmethods.

    Each model owns its own random generator, seeded at construction either
    from ``seed`` or from the process-wide seeder.

    Parameters
    ----------
    S : int
        Number of states.
    A : int
        Number of actions.
    discount : float
        Discount factor in [0, 1].
    seed : int, optional
        Seed for this model's random generator.
    """

    def __init__(self, S: int, A: int, discount: float = 1.0, seed: Optional[int] = None):
        _check_dimensions(S, A)
        self._S = int(S)
        self._A = int(A)
        self._discount = _checked_discount(discount)

        identity = sp.identity(self._S, dtype=float, format="csr")
        self._transitions: TransitionMatrix = [identity.copy() for _ in range(self._A)]
        self._rewards: RewardMatrix = sp.csr_matrix((self._S, self._A), dtype=float)
        self._rng = _make_rng(seed)

    # ------------------------------------------------------------------
    # Alternative constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dense(
        cls,
        S: int,
        A: int,
        transitions: Any,
        rewards: Any,
        discount: float = 1.0,
        seed: Optional[int] = None,
    ) -> SparseModel:
        """Build a model by copying dense transition and reward containers.

        Both containers are indexed [s][a][s1]. The rewards hold the reward
        of each single transition; they are folded into expected rewards
        using the given transition probabilities.

        Parameters
        ----------
        S, A : int
            Number of states and actions.
        transitions : array-like of shape (S, A, S)
            Transition probabilities.
        rewards : array-like of shape (S, A, S)
            Per-transition rewards.
        discount : float
            Discount factor in [0, 1].
        seed : int, optional
            Seed for the model's random generator.

        Raises
        ------
        ValueError
            If the containers have the wrong shape, the transitions are not
            valid probabilities, or the discount is outside [0, 1].
        """
        model = cls(S, A, discount, seed=seed)
        model._transitions = model._dense_transitions(transitions)
        model._rewards = model._dense_rewards(rewards)
        return model

    @classmethod
    def from_model(cls, model: Any, seed: Optional[int] = None) -> SparseModel:
        """Copy any model exposing the MDPModel methods into sparse storage.

        This is how a model that computes probabilities on demand is turned
        into a stored one. Every (s, a, s1) triple of the source is queried
        once. Rewards reported by the source for each transition are weighted
        by their probability and summed into the expected reward of (s, a).

        Raises
        ------
        ValueError
            If the source reports a probability outside [0, 1], a row that
            does not sum to one, or an invalid discount.
        """
        S = model.get_s()
        A = model.get_a()
        _check_dimensions(S, A)
        S, A = int(S), int(A)
        discount = _checked_discount(model.get_discount())

        rows: List[List[int]] = [[] for _ in range(A)]
        cols: List[List[int]] = [[] for _ in range(A)]
        data: List[List[float]] = [[] for _ in range(A)]
        expected = np.zeros((S, A), dtype=float)

        for s in range(S):
            for a in range(A):
                row_sum = 0.0
                for s1 in range(S):
                    p = float(model.get_transition_probability(s, a, s1))
                    if not 0.0 <= p <= 1.0:
                        raise ValueError(
                            f"Input transition matrix contains an invalid value "
                            f"{p} at ({s}, {a}, {s1})."
                        )
                    if check_different_small(0.0, p):
                        rows[a].append(s)
                        cols[a].append(s1)
                        data[a].append(p)
                        row_sum += p

                    r = float(model.get_expected_reward(s, a, s1))
                    if check_different_small(0.0, r):
                        expected[s, a] += r * p

                if check_different_small(1.0, row_sum):
                    raise ValueError(
                        f"Input transition matrix contains an invalid row "
                        f"({s}, {a}) summing to {row_sum}."
                    )

        transitions = [
            _as_csr(sp.csr_matrix((data[a], (rows[a], cols[a])), shape=(S, S), dtype=float))
            for a in range(A)
        ]
        return cls.from_unchecked(S, A, transitions, _sparse_rewards(expected), discount, seed=seed)

    @classmethod
    def from_unchecked(
        cls,
        S: int,
        A: int,
        transitions: Sequence[sp.spmatrix],
        rewards: sp.spmatrix,
        discount: float,
        seed: Optional[int] = None,
    ) -> SparseModel:
        """Take ownership of pre-built matrices without any validation.

        Meant for data that has already been validated elsewhere. Nothing is
        checked: the dimensions, the probabilities and the discount are the
        caller's responsibility, and a violation only shows up later as
        inconsistent sampling.

        Parameters
        ----------
        S, A : int
            Number of states and actions.
        transitions : sequence of sparse matrices
            A matrices of shape (S, S).
        rewards : sparse matrix
            Expected rewards, shape (S, A).
        discount : float
            Discount factor.
        seed : int, optional
            Seed for the model's random generator.
        """
        model = cls.__new__(cls)
        model._S = S
        model._A = A
        model._discount = discount
        model._transitions = [_as_csr(m) for m in transitions]
        model._rewards = _as_csr(rewards)
        model._rng = _make_rng(seed)
        return model

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_transition_function(self, t: Union[Any, Sequence[sp.spmatrix]]):
        """Replace the transition function.

        A sequence of A sparse S x S matrices is installed as is, with no
        checks. Anything else is treated as a dense [s][a][s1] container and
        is validated before it replaces the current function; on failure the
        model is left unchanged.

        Raises
        ------
        ValueError
            If a dense container has the wrong shape or does not contain
            valid probabilities.
        """
        if _is_sparse_sequence(t):
            self._transitions = [_as_csr(m) for m in t]
            return
        self._transitions = self._dense_transitions(t)

    def set_reward_function(self, r: Union[Any, sp.spmatrix]):
        """Replace the reward function.

        A sparse S x A matrix of expected rewards is installed as is, with no
        checks. Anything else is treated as a dense [s][a][s1] container of
        per-transition rewards, which are weighted by the transition
        probabilities currently stored. Set the transition function first if
        the two are being replaced together.

        Raises
        ------
        ValueError
            If a dense container has the wrong shape.
        """
        if sp.issparse(r):
            self._rewards = _as_csr(r)
            return
        self._rewards = self._dense_rewards(r)

    def set_discount(self, d: float):
        """Set a new discount factor.

        Raises
        ------
        ValueError
            If d is outside [0, 1].
        """
        self._discount = _checked_discount(d)

    def _dense_transitions(self, t: Any) -> TransitionMatrix:
        S, A = self._S, self._A
        arr = as_dense_3d(t, S, A, name="transition matrix")
        if not is_probability(S, A, arr):
            raise ValueError("Input transition matrix does not contain valid probabilities.")

        transitions = []
        for a in range(A):
            block = arr[:, a, :]
            block = np.where(block > EPSILON, block, 0.0)
            transitions.append(_as_csr(sp.csr_matrix(block)))
        return transitions

    def _dense_rewards(self, r: Any) -> RewardMatrix:
        S, A = self._S, self._A
        arr = as_dense_3d(r, S, A, name="reward matrix")

        expected = np.zeros((S, A), dtype=float)
        dropped = 0
        for a in range(A):
            T_a = self._transitions[a]
            R_a = arr[:, a, :]
            row_idx = np.repeat(np.arange(S), np.diff(T_a.indptr))
            r_on_support = R_a[row_idx, T_a.indices]
            expected[:, a] = np.bincount(row_idx, weights=T_a.data * r_on_support, minlength=S)

            nonzero = int(np.count_nonzero(np.abs(R_a) > EPSILON))
            dropped += nonzero - int(np.count_nonzero(np.abs(r_on_support) > EPSILON))

        if dropped > 0:
            warnings.warn(
                f"Discarded {dropped} non-zero rewards assigned to zero-probability transitions.",
                RuntimeWarning,
            )
        return _sparse_rewards(expected)

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def sample_sr(self, s: int, a: int) -> Tuple[int, float]:
        """Sample a successor state and reward for the pair (s, a).

        The successor is drawn with the stored transition probabilities. The
        reward is the per-transition reward of the drawn transition, recovered
        from the expected reward of (s, a).

        Returns
        -------
        tuple
            (s1, reward)
        """
        T_a = self._transitions[a]
        start, end = T_a.indptr[s], T_a.indptr[s + 1]
        if start == end:
            raise RuntimeError(f"State {s} has no successors under action {a}.")

        probs = T_a.data[start:end]
        u = self._rng.random()
        i = int(np.searchsorted(np.cumsum(probs), u, side="right"))
        # Rounding can leave the total mass just under u.
        if i >= end - start:
            i = end - start - 1

        s1 = int(T_a.indices[start + i])
        p = float(probs[i])
        return s1, float(self._rewards[s, a]) / p

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def S(self) -> int:
        return self._S

    @property
    def A(self) -> int:
        return self._A

    @property
    def discount(self) -> float:
        return self._discount

    def get_s(self) -> int:
        """Return the number of states."""
        return self._S

    def get_a(self) -> int:
        """Return the number of actions."""
        return self._A

    def get_discount(self) -> float:
        """Return the discount factor."""
        return self._discount

    def get_transition_probability(self, s: int, a: int, s1: int) -> float:
        """Return P(s1 | s, a), zero if the transition is not stored."""
        return float(self._transitions[a][s, s1])

    def get_expected_reward(self, s: int, a: int, s1: int) -> float:
        """Return the reward of the single transition (s, a, s1).

        This is the stored expected reward of (s, a) divided by P(s1 | s, a),
        or zero when that probability is zero.
        """
        p = self.get_transition_probability(s, a, s1)
        if check_equal_small(p, 0.0):
            return 0.0
        return float(self._rewards[s, a]) / p

    def get_transition_function(self, a: Optional[int] = None):
        """Return the transition matrices, or the S x S matrix of action a."""
        if a is None:
            return self._transitions
        return self._transitions[a]

    def get_reward_function(self) -> RewardMatrix:
        """Return the S x A expected reward matrix."""
        return self._rewards

    def is_terminal(self, s: int) -> bool:
        """Return True if every action brings s back to itself with certainty."""
        return all(
            check_equal_small(1.0, self.get_transition_probability(s, a, s))
            for a in range(self._A)
        )

    def __repr__(self) -> str:
        nnz = sum(m.nnz for m in self._transitions)
        return (
            f"SparseModel(S={self._S}, A={self._A}, discount={self._discount}, "
            f"transitions_nnz={nnz}, rewards_nnz={self._rewards.nnz})"
        )


def _check_dimensions(S, A):
    for name, value in (("S", S), ("A", A)):
        if isinstance(value, bool) or int(value) != value or value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")


def _checked_discount(d: float) -> float:
    d = float(d)
    if not 0.0 <= d <= 1.0:
        raise ValueError(f"Discount parameter must be in [0,1], got {d}")
    return d


def _make_rng(seed: Optional[int]) -> np.random.Generator:
    return np.random.default_rng(get_seed() if seed is None else seed)


def _as_csr(m) -> sp.csr_matrix:
    if m.format != "csr":
        m = m.tocsr()
    if not m.has_sorted_indices:
        m.sort_indices()
    return m


def _is_sparse_sequence(t) -> bool:
    return (
        isinstance(t, (list, tuple))
        and len(t) > 0
        and all(sp.issparse(m) for m in t)
    )


def _sparse_rewards(expected: np.ndarray) -> RewardMatrix:
    expected = np.where(np.abs(expected) > EPSILON, expected, 0.0)
    return sp.csr_matrix(expected)
