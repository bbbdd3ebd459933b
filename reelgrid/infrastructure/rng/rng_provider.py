# reelgrid/infrastructure/rng/rng_provider.py
import logging
from typing import Optional, Dict, Any

from .strategies.mersenne_rng import MersenneTwisterRNG
from .strategies.numpy_rng import NumpyRNG
from .strategies.rng_strategy import RNGStrategy


class RNGProvider:
    """
    Creates RNG strategies by name. Unseeded strategies are shared per name,
    seeded ones are always fresh so that two engines with the same seed replay
    the same rounds.
    """
    _STRATEGIES = {
        "mersenne": MersenneTwisterRNG,
        "numpy": NumpyRNG,
    }

    def __init__(self):
        self.logger = logging.getLogger("infrastructure.rng.provider")
        self._strategies = {}  # name -> shared unseeded instance

    def get_rng(self, strategy_name: str, seed: Optional[int] = None) -> RNGStrategy:
        """
        Get a RNG strategy instance by name.

        Args:
            strategy_name: Name of the RNG strategy ("mersenne", "numpy")
            seed: Optional seed value for the RNG

        Returns:
            An instance of the requested RNG strategy

        Raises:
            ValueError: If the strategy name is unknown
        """
        strategy_name = strategy_name.lower()

        if seed is None and strategy_name in self._strategies:
            return self._strategies[strategy_name]

        strategy = self._create_strategy(strategy_name, seed)

        if seed is None:
            self._strategies[strategy_name] = strategy

        return strategy

    def _create_strategy(self, strategy_name: str, seed: Optional[int] = None) -> RNGStrategy:
        strategy_class = self._STRATEGIES.get(strategy_name)
        if strategy_class is None:
            self.logger.error(f"Unknown RNG strategy: {strategy_name}")
            raise ValueError(f"Unknown RNG strategy: {strategy_name}")

        self.logger.debug(f"Creating {strategy_class.__name__} with seed: {seed}")
        return strategy_class(seed)

    def create_from_config(self, config: Dict[str, Any]) -> RNGStrategy:
        """
        Create an RNG strategy from a configuration dictionary.

        Example config:
            {"strategy": "numpy", "seed": 12345}
        """
        strategy_name = config.get('strategy', 'mersenne')
        seed = config.get('seed', None)

        return self.get_rng(strategy_name, seed)

    @staticmethod
    def get_available_strategies() -> Dict[str, str]:
        return {
            "mersenne": "Mersenne Twister (Python's default random generator)",
            "numpy": "NumPy RandomState (draws whole grids in one batch)"
        }
