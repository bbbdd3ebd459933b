# reelgrid/domain/machine/services/symbol_generator.py
import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..entities.engine_config import EngineConfig, GenerationMode, Tier, TierShape
from ..entities.grid import Grid


@dataclass(frozen=True)
class GeneratedGrid:
    """A freshly drawn grid and, in tiered mode, the tier it was built for."""
    grid: Grid
    tier: Optional[Tier] = None


class SymbolGenerator(Protocol):
    def generate(self, rng) -> GeneratedGrid:
        ...


class UniformSymbolGenerator:
    """
    Draws every cell independently and uniformly from the symbol set.
    """
    def __init__(self, rows: int, cols: int, symbol_count: int):
        self.rows = rows
        self.cols = cols
        self.symbol_count = symbol_count

    def generate(self, rng) -> GeneratedGrid:
        cells = rng.get_batch_ints(0, self.symbol_count - 1, self.rows * self.cols)
        return GeneratedGrid(Grid(self.rows, self.cols, cells))


class TieredSymbolGenerator:
    """
    Picks an outcome tier first, then synthesizes a 3-reel line that shows it.

    Tiers are drawn with a single uniform real in [0, total_weight) compared
    against the cumulative weights in declaration order.
    """
    REEL_COUNT = 3

    def __init__(self, tiers: Sequence[Tier], symbol_count: int):
        if not tiers:
            raise ValueError("Tiered generation needs at least one tier")
        self.tiers = tuple(tiers)
        self.symbol_count = symbol_count
        self.total_weight = sum(tier.weight for tier in self.tiers)
        self.logger = logging.getLogger("domain.machine.generator.tiered")

    def draw_tier(self, rng) -> Tier:
        roll = rng.get_random_float(0.0, self.total_weight)
        cumulative = 0.0
        for tier in self.tiers:
            cumulative += tier.weight
            if roll < cumulative:
                return tier
        # Float rounding at the top end
        return self.tiers[-1]

    def generate(self, rng) -> GeneratedGrid:
        tier = self.draw_tier(rng)
        symbols = self.generate_for_shape(tier.shape, rng)
        self.logger.debug(f"Tier '{tier.name}' -> {symbols}")
        return GeneratedGrid(Grid(1, self.REEL_COUNT, symbols), tier)

    def generate_for_shape(self, shape: TierShape, rng) -> List[int]:
        if shape is TierShape.ALL_SAME:
            return self._all_same(rng)
        if shape is TierShape.TWO_MATCH:
            return self._two_match(rng)
        return self._all_different(rng)

    def _random_symbol(self, rng) -> int:
        return rng.get_random_int(0, self.symbol_count - 1)

    def _all_same(self, rng) -> List[int]:
        return [self._random_symbol(rng)] * self.REEL_COUNT

    def _two_match(self, rng) -> List[int]:
        matching = self._random_symbol(rng)
        # Any offset in 1..K-1 lands on a different symbol
        different = (matching + 1 + rng.get_random_int(0, self.symbol_count - 2)) % self.symbol_count
        position = rng.get_random_int(0, self.REEL_COUNT - 1)

        symbols = [matching] * self.REEL_COUNT
        symbols[position] = different
        return symbols

    def _all_different(self, rng) -> List[int]:
        first = self._random_symbol(rng)
        offsets = sorted(rng.shuffle(list(range(1, self.symbol_count)))[:self.REEL_COUNT - 1])
        distinct = [first] + [(first + offset) % self.symbol_count for offset in offsets]

        orders = list(itertools.permutations(distinct))
        return list(orders[rng.get_random_int(0, len(orders) - 1)])


def create_generator(config: EngineConfig) -> SymbolGenerator:
    if config.mode is GenerationMode.TIERED:
        return TieredSymbolGenerator(config.tiers, config.symbol_count)
    return UniformSymbolGenerator(config.rows, config.cols, config.symbol_count)
