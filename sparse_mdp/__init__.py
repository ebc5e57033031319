"""
Sparse MDP Library

A library for storing and sampling finite Markov decision processes
whose transition functions are mostly empty.

Modules:
- Models: Core data structures (SparseModel, TabularMDP, MDPModel)
- Learning: Tabular Q-learning driven by model sampling
- CaseStudies: Example MDPs (slippery chain)
- experiments: Config-driven experiment runners
"""

from . import Models
from . import Learning

__all__ = ['Models', 'Learning']
__version__ = '0.1.0'
