"""Sparse MDP model, model interface and numeric helpers."""

from .probability import (
    EPSILON,
    check_equal_small,
    check_different_small,
    is_probability,
    is_probability_row,
)
from .seeder import get_seed, set_root_seed
from .sparse_model import SparseModel
from .mdp import MDPModel, TabularMDP

__all__ = [
    'EPSILON', 'check_equal_small', 'check_different_small', 'is_probability', 'is_probability_row',
    'get_seed', 'set_root_seed',
    'SparseModel',
    'MDPModel', 'TabularMDP',
]
