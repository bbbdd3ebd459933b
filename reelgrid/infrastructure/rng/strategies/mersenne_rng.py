# reelgrid/infrastructure/rng/strategies/mersenne_rng.py
import random
from typing import List, Optional, Any


class MersenneTwisterRNG:
    """
    Random number generator backed by Python's Mersenne Twister.
    """
    def __init__(self, seed_value: Optional[int] = None):
        """
        Initialize the RNG with an optional seed.

        Args:
            seed_value: Optional seed value for reproducible rounds
        """
        # Dedicated instance, the module-level generator is never touched
        self._random = random.Random()

        if seed_value is not None:
            self.seed(seed_value)

    def get_random_int(self, min_val: int, max_val: int) -> int:
        """
        Get a random integer in the range [min_val, max_val].

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (inclusive)

        Returns:
            Random integer in the specified range
        """
        return self._random.randint(min_val, max_val)

    def get_random_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random float in the specified range
        """
        return min_val + (max_val - min_val) * self._random.random()

    def get_batch_ints(self, min_val: int, max_val: int, count: int) -> List[int]:
        return [self._random.randint(min_val, max_val) for _ in range(count)]

    def seed(self, seed_value: int) -> None:
        self._random.seed(seed_value)

    def shuffle(self, items: List[Any]) -> List[Any]:
        """
        Shuffle a copy of items.

        Args:
            items: Items to shuffle

        Returns:
            Shuffled copy
        """
        items_copy = list(items)
        self._random.shuffle(items_copy)
        return items_copy
