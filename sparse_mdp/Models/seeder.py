"""Process-wide seed source for per-model random generators.

Every SparseModel owns its own numpy Generator. Models built without an
explicit seed draw one from here, so that two models never share sampling
state while a whole run can still be reproduced with set_root_seed.
"""

from typing import Optional

import numpy as np

_root_rng = np.random.default_rng()


def set_root_seed(seed: Optional[int]) -> None:
    """Reseed the root generator. None reseeds from OS entropy."""
    global _root_rng
    _root_rng = np.random.default_rng(seed)


def get_seed() -> int:
    """Draw a fresh 32-bit seed from the root generator."""
    return int(_root_rng.integers(0, 2**32))
