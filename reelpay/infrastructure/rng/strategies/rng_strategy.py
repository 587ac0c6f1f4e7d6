# reelpay/infrastructure/rng/strategies/rng_strategy.py
from typing import Optional, Protocol


class RNGStrategy(Protocol):
    """Random source consumed by the strip selector."""

    name: str

    def get_random_float(self, min_val: float, max_val: float) -> float:
        """
        Random float in the range [min_val, max_val].

        The strip selector calls this with (0, total_weight) for every draw.
        """
        ...

    def seed(self, seed_value: Optional[int]) -> None:
        ...
