"""Example MDPs used by the experiments."""

from .chain import build_chain_mdp, LEFT, RIGHT

__all__ = ['build_chain_mdp', 'LEFT', 'RIGHT']
