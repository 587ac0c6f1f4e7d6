# reelpay/infrastructure/rng/rng_provider.py
import logging
from typing import Any, Dict, Optional

from .strategies.rng_strategy import RNGStrategy
from .strategies.mersenne_rng import MersenneTwisterRNG
from .strategies.numpy_rng import NumpyRNG


class RNGProvider:
    """
    Creates reel RNG strategies by name.

    Unseeded strategies are shared per name; seeded ones are always fresh so
    two machines built from the same seed draw identical spins.
    """
    STRATEGIES = {
        "mersenne": MersenneTwisterRNG,
        "numpy": NumpyRNG,
    }

    def __init__(self):
        self.logger = logging.getLogger("infrastructure.rng.provider")
        self._shared: Dict[str, RNGStrategy] = {}

    def get_rng(self, strategy_name: str = "mersenne", seed: Optional[int] = None) -> RNGStrategy:
        """
        Get an RNG strategy instance by name.

        Args:
            strategy_name: "mersenne" or "numpy"
            seed: Optional seed for reproducible draws

        Returns:
            RNG strategy instance

        Raises:
            ValueError: If the strategy name is unknown
        """
        key = (strategy_name or "mersenne").lower()
        strategy_cls = self.STRATEGIES.get(key)
        if strategy_cls is None:
            self.logger.error(f"Unknown RNG strategy: {strategy_name}")
            raise ValueError(f"Unknown RNG strategy: {strategy_name}")

        if seed is None:
            if key not in self._shared:
                self.logger.debug(f"Creating shared {key} RNG")
                self._shared[key] = strategy_cls(None)
            return self._shared[key]

        self.logger.debug(f"Creating {key} RNG with seed: {seed}")
        return strategy_cls(seed)

    def create_from_config(self, config: Optional[Dict[str, Any]]) -> RNGStrategy:
        """
        Create an RNG from a machine's ``rng`` section.

        Example config:
            {"strategy": "numpy", "seed": 12345}
        """
        config = config or {}
        return self.get_rng(config.get("strategy", "mersenne"), config.get("seed"))

    @classmethod
    def get_available_strategies(cls):
        return sorted(cls.STRATEGIES)
