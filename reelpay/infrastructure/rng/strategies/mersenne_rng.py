# reelpay/infrastructure/rng/strategies/mersenne_rng.py
import random
from typing import Optional


class MersenneTwisterRNG:
    """
    Reel RNG backed by a private random.Random instance.
    """
    name = "mersenne"

    def __init__(self, seed_value: Optional[int] = None):
        # Private instance so seeding never touches the module-level generator
        self._random = random.Random()
        self.seed(seed_value)

    def get_random_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the range [min_val, max_val].

        Args:
            min_val: Lower bound
            max_val: Upper bound

        Returns:
            Uniformly distributed float
        """
        return self._random.uniform(min_val, max_val)

    def seed(self, seed_value: Optional[int]) -> None:
        self.seed_value = seed_value
        self._random.seed(seed_value)
