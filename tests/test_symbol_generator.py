# tests/test_symbol_generator.py
import unittest
import sys
import os
from collections import Counter

# Add the repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelgrid.domain.machine.entities.engine_config import (
    DEFAULT_TIERS, EngineConfig, Tier, TierShape
)
from reelgrid.domain.machine.services.symbol_generator import (
    TieredSymbolGenerator, UniformSymbolGenerator, create_generator
)
from reelgrid.infrastructure.rng.strategies.mersenne_rng import MersenneTwisterRNG
from reelgrid.infrastructure.rng.strategies.numpy_rng import NumpyRNG


class ScriptedRNG:
    """RNG double that replays fixed draws."""

    def __init__(self, ints=(), floats=()):
        self.ints = list(ints)
        self.floats = list(floats)

    def get_random_int(self, min_val, max_val):
        value = self.ints.pop(0)
        assert min_val <= value <= max_val, (value, min_val, max_val)
        return value

    def get_random_float(self, min_val, max_val):
        return self.floats.pop(0)

    def get_batch_ints(self, min_val, max_val, count):
        return [self.get_random_int(min_val, max_val) for _ in range(count)]

    def shuffle(self, items):
        return list(items)


class TestUniformSymbolGenerator(unittest.TestCase):

    def test_dimensions_and_range(self):
        generator = UniformSymbolGenerator(rows=8, cols=12, symbol_count=3)
        rng = MersenneTwisterRNG(seed_value=1)
        for _ in range(20):
            generated = generator.generate(rng)
            self.assertEqual((generated.grid.rows, generated.grid.cols), (8, 12))
            self.assertEqual(len(generated.grid), 96)
            self.assertTrue(all(0 <= s <= 2 for s in generated.grid))
            self.assertIsNone(generated.tier)

    def test_cells_come_from_rng_in_row_major_order(self):
        generator = UniformSymbolGenerator(rows=2, cols=3, symbol_count=3)
        generated = generator.generate(ScriptedRNG(ints=[0, 1, 2, 2, 1, 0]))
        self.assertEqual(generated.grid.to_rows(), [[0, 1, 2], [2, 1, 0]])

    def test_every_symbol_appears(self):
        generator = UniformSymbolGenerator(rows=8, cols=12, symbol_count=3)
        counts = Counter()
        rng = NumpyRNG(seed_value=11)
        for _ in range(100):
            counts.update(generator.generate(rng).grid)
        for symbol in range(3):
            self.assertAlmostEqual(counts[symbol] / 9600, 1 / 3, delta=0.03)


class TestTieredSymbolGenerator(unittest.TestCase):

    def setUp(self):
        self.generator = TieredSymbolGenerator(DEFAULT_TIERS, symbol_count=3)

    def test_tier_boundaries(self):
        # Cumulative weights: jackpot [0, 2), big_win [2, 12), small_win [12, 32), lose [32, 100)
        cases = [(0.0, "jackpot"), (1.99, "jackpot"), (2.0, "big_win"), (11.5, "big_win"),
                 (12.0, "small_win"), (31.9, "small_win"), (32.0, "lose"), (99.99, "lose")]
        for roll, expected in cases:
            with self.subTest(roll=roll):
                self.assertEqual(self.generator.draw_tier(ScriptedRNG(floats=[roll])).name, expected)

    def test_jackpot_line(self):
        # roll 1.0 -> jackpot, symbol 2
        generated = self.generator.generate(ScriptedRNG(floats=[1.0], ints=[2]))
        self.assertEqual(generated.tier.name, "jackpot")
        self.assertEqual(list(generated.grid), [2, 2, 2])

    def test_two_match_line(self):
        # matching 1, offset 1 -> different (1 + 1 + 1) % 3 = 0, odd position 2
        generated = self.generator.generate(ScriptedRNG(floats=[5.0], ints=[1, 1, 2]))
        self.assertEqual(generated.tier.name, "big_win")
        self.assertEqual(list(generated.grid), [1, 1, 0])

    def test_all_different_line(self):
        # first 0, offsets [1, 2] -> (0, 1, 2), permutation 5 -> (2, 1, 0)
        generated = self.generator.generate(ScriptedRNG(floats=[50.0], ints=[0, 5]))
        self.assertEqual(generated.tier.name, "lose")
        self.assertEqual(list(generated.grid), [2, 1, 0])

    def test_shapes_hold_for_random_draws(self):
        rng = MersenneTwisterRNG(seed_value=2024)
        for _ in range(3000):
            generated = self.generator.generate(rng)
            distinct = len(set(generated.grid))
            shape = generated.tier.shape
            if shape is TierShape.ALL_SAME:
                self.assertEqual(distinct, 1)
            elif shape is TierShape.TWO_MATCH:
                self.assertEqual(distinct, 2)
            else:
                self.assertEqual(distinct, 3)

    def test_tier_frequencies(self):
        rng = MersenneTwisterRNG(seed_value=77)
        draws = 20000
        counts = Counter(self.generator.draw_tier(rng).name for _ in range(draws))
        self.assertAlmostEqual(counts["jackpot"] / draws, 0.02, delta=0.01)
        self.assertAlmostEqual(counts["big_win"] / draws, 0.10, delta=0.015)
        self.assertAlmostEqual(counts["small_win"] / draws, 0.20, delta=0.02)
        self.assertAlmostEqual(counts["lose"] / draws, 0.68, delta=0.02)

    def test_odd_position_is_uniform(self):
        rng = MersenneTwisterRNG(seed_value=31)
        positions = Counter()
        draws = 6000
        for _ in range(draws):
            symbols = self.generator.generate_for_shape(TierShape.TWO_MATCH, rng)
            odd = [i for i, s in enumerate(symbols) if symbols.count(s) == 1]
            self.assertEqual(len(odd), 1)
            positions[odd[0]] += 1
        for position in range(3):
            self.assertAlmostEqual(positions[position] / draws, 1 / 3, delta=0.03)

    def test_all_different_with_more_symbols(self):
        generator = TieredSymbolGenerator([Tier("lose", 1, TierShape.ALL_DIFFERENT)], symbol_count=6)
        rng = NumpyRNG(seed_value=4)
        for _ in range(500):
            symbols = list(generator.generate(rng).grid)
            self.assertEqual(len(set(symbols)), 3)
            self.assertTrue(all(0 <= s < 6 for s in symbols))

    def test_requires_tiers(self):
        with self.assertRaises(ValueError):
            TieredSymbolGenerator([], symbol_count=3)


class TestCreateGenerator(unittest.TestCase):

    def test_mode_selects_generator(self):
        self.assertIsInstance(create_generator(EngineConfig.from_dict({})), UniformSymbolGenerator)
        self.assertIsInstance(
            create_generator(EngineConfig.from_dict({"mode": "tiered"})), TieredSymbolGenerator
        )


if __name__ == "__main__":
    unittest.main()
