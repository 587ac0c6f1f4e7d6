# reelpay/infrastructure/rng/strategies/numpy_rng.py
import numpy as np
from typing import Optional


class NumpyRNG:
    """
    Reel RNG backed by a dedicated NumPy RandomState.
    """
    name = "numpy"

    def __init__(self, seed_value: Optional[int] = None):
        self.seed(seed_value)

    def get_random_float(self, min_val: float, max_val: float) -> float:
        return float(self.rng.uniform(min_val, max_val))

    def seed(self, seed_value: Optional[int]) -> None:
        self.seed_value = seed_value
        self.rng = np.random.RandomState(seed_value)
