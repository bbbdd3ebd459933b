# reelgrid/infrastructure/rng/strategies/rng_strategy.py
from typing import List, Protocol, Any


class RNGStrategy(Protocol):
    """Random source consumed by the symbol generators."""

    def get_random_int(self, min_val: int, max_val: int) -> int:
        """
        Get a random integer in the range [min_val, max_val].

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (inclusive)

        Returns:
            Random integer in the specified range
        """
        ...

    def get_random_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the half-open range [min_val, max_val).
        """
        ...

    def get_batch_ints(self, min_val: int, max_val: int, count: int) -> List[int]:
        """
        Get a batch of random integers, each in [min_val, max_val].
        """
        ...

    def seed(self, seed_value: int) -> None:
        ...

    def shuffle(self, items: List[Any]) -> List[Any]:
        """
        Return a shuffled copy of items. The original list is left untouched.
        """
        ...
