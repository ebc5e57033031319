"""Numeric tolerance helpers for probability validation."""

from typing import Any

import numpy as np

# Magnitudes at or below this are treated as exactly zero.
EPSILON = 1e-10


def check_equal_small(a: float, b: float, tol: float = EPSILON) -> bool:
    """Return True if a and b differ by at most tol."""
    return abs(a - b) <= tol


def check_different_small(a: float, b: float, tol: float = EPSILON) -> bool:
    """Return True if a and b differ by more than tol."""
    return not check_equal_small(a, b, tol)


def is_probability_row(row, tol: float = EPSILON) -> bool:
    """Check that a 1-D vector is a valid probability distribution.

    Every entry must lie in [0, 1] and the entries must sum to 1
    within tol.
    """
    row = np.asarray(row, dtype=float)
    if row.size == 0:
        return False
    if np.any(row < 0.0) or np.any(row > 1.0):
        return False
    return check_equal_small(float(row.sum()), 1.0, tol)


def as_dense_3d(source: Any, S: int, A: int, name: str = "source") -> np.ndarray:
    """Convert a dense [s][a][s1] container into a float array of shape (S, A, S).

    Parameters
    ----------
    source : array-like
        Nested sequences or numpy array indexed [s][a][s1].
    S : int
        Number of states.
    A : int
        Number of actions.
    name : str
        Label used in error messages.

    Returns
    -------
    np.ndarray
        Array of shape (S, A, S) and dtype float64.
    """
    try:
        arr = np.asarray(source, dtype=float)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} cannot be converted to a float array: {e}") from e

    if arr.shape != (S, A, S):
        raise ValueError(
            f"{name} must have shape ({S}, {A}, {S}) indexed [s][a][s1], got {arr.shape}"
        )
    return arr


def is_probability(S: int, A: int, t: Any, tol: float = EPSILON) -> bool:
    """Check that a dense [s][a][s1] container holds a valid transition function.

    Returns False (rather than raising) for out of range values or rows that
    do not sum to one. Shape mismatches still raise ValueError.
    """
    arr = as_dense_3d(t, S, A, name="transition matrix")
    if np.any(arr < 0.0) or np.any(arr > 1.0):
        return False
    row_sums = arr.sum(axis=2)
    return bool(np.all(np.abs(row_sums - 1.0) <= tol))
