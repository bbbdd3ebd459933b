# reelgrid/infrastructure/rng/strategies/numpy_rng.py
import numpy as np
from typing import List, Optional, Any


class NumpyRNG:
    """
    Random number generator backed by NumPy's RandomState. Faster when a whole
    grid is drawn in one batch.
    """
    def __init__(self, seed_value: Optional[int] = None):
        """
        Initialize the RNG with an optional seed.

        Args:
            seed_value: Optional seed value for reproducible rounds
        """
        self.rng = np.random.RandomState(seed_value)

    def get_random_int(self, min_val: int, max_val: int) -> int:
        """
        Get a random integer in the range [min_val, max_val].

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (inclusive)

        Returns:
            Random integer in the specified range
        """
        # randint is [min, max) in NumPy
        return int(self.rng.randint(min_val, max_val + 1))

    def get_random_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the range [min_val, max_val).
        """
        return float(self.rng.uniform(min_val, max_val))

    def get_batch_ints(self, min_val: int, max_val: int, count: int) -> List[int]:
        """
        Get a batch of random integers in one call.

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (inclusive)
            count: Number of random values to generate

        Returns:
            List of Python ints
        """
        return self.rng.randint(min_val, max_val + 1, size=count).tolist()

    def seed(self, seed_value: int) -> None:
        self.rng = np.random.RandomState(seed_value)

    def shuffle(self, items: List[Any]) -> List[Any]:
        """
        Shuffle a copy of items without modifying the original.
        """
        order = self.rng.permutation(len(items))
        return [items[i] for i in order]
