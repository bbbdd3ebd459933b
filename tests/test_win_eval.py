# tests/test_win_eval.py
import unittest
import sys
import os

# Add the repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelgrid.domain.machine.entities.engine_config import EngineConfig, Tier, TierShape
from reelgrid.domain.machine.entities.grid import Grid
from reelgrid.domain.machine.services.win_evaluation import (
    RunEvaluator, TierMatchEvaluator, create_evaluator
)


class TestRunEvaluator(unittest.TestCase):
    """Test cases for horizontal run detection."""

    def setUp(self):
        self.evaluator = RunEvaluator(min_run_length=3)

    def test_find_runs(self):
        self.assertEqual(RunEvaluator.find_runs([0, 0, 0, 1, 2, 2, 2, 2, 2], 3), [(0, 3), (4, 5)])
        self.assertEqual(RunEvaluator.find_runs([0, 1, 0, 1], 3), [])
        self.assertEqual(RunEvaluator.find_runs([1, 1, 0, 0, 0], 3), [(2, 3)])
        self.assertEqual(RunEvaluator.find_runs([], 3), [])

    def test_two_runs_in_one_row(self):
        grid = Grid.from_rows([[0, 0, 0, 1, 2, 2, 2, 2, 2]])
        evaluation = self.evaluator.evaluate(grid)

        self.assertEqual(evaluation.lines_won, 2)
        self.assertEqual(evaluation.run_lengths, [3, 5])
        self.assertEqual(evaluation.winning_cells, (0, 1, 2, 4, 5, 6, 7, 8))
        self.assertEqual([line.category for line in evaluation.lines], [3, 5])
        self.assertEqual([line.symbol for line in evaluation.lines], [0, 2])

    def test_full_row_counts_once(self):
        grid = Grid.from_rows([[1] * 12, [0, 1, 2] * 4])
        evaluation = self.evaluator.evaluate(grid)

        self.assertEqual(evaluation.lines_won, 1)
        self.assertEqual(evaluation.lines[0].length, 12)
        self.assertEqual(evaluation.winning_cells, tuple(range(12)))

    def test_short_runs_do_not_qualify(self):
        grid = Grid.from_rows([[0, 0, 1, 1, 2, 2], [2, 2, 0, 0, 1, 1]])
        evaluation = self.evaluator.evaluate(grid)

        self.assertEqual(evaluation.lines_won, 0)
        self.assertEqual(evaluation.winning_cells, ())

    def test_cells_use_absolute_indices(self):
        grid = Grid.from_rows([[0, 1, 2, 0], [1, 1, 1, 0], [2, 0, 2, 2]])
        evaluation = self.evaluator.evaluate(grid)

        self.assertEqual(evaluation.lines_won, 1)
        line = evaluation.lines[0]
        self.assertEqual((line.row, line.start_col, line.length), (1, 0, 3))
        self.assertEqual(line.cells, (4, 5, 6))

    def test_runs_never_span_rows(self):
        # 1 1 at the end of row 0 and 1 at the start of row 1 are not a run
        grid = Grid.from_rows([[0, 2, 1, 1], [1, 0, 2, 0]])
        self.assertEqual(self.evaluator.evaluate(grid).lines_won, 0)

    def test_winning_cells_are_unique(self):
        grid = Grid.from_rows([[2, 2, 2, 2, 0, 0, 0, 1], [1, 1, 1, 0, 0, 0, 0, 0]])
        cells = self.evaluator.evaluate(grid).winning_cells
        self.assertEqual(len(cells), len(set(cells)))
        self.assertEqual(list(cells), sorted(cells))

    def test_invalid_min_run_length(self):
        with self.assertRaises(ValueError):
            RunEvaluator(min_run_length=0)


class TestTierMatchEvaluator(unittest.TestCase):
    """Test cases for 3-reel match counting."""

    def setUp(self):
        self.evaluator = TierMatchEvaluator(min_match=2)
        self.small_win = Tier("small_win", 20, TierShape.TWO_MATCH)

    def test_non_adjacent_pair_wins(self):
        grid = Grid(1, 3, [1, 0, 1])
        evaluation = self.evaluator.evaluate(grid, self.small_win)

        self.assertEqual(evaluation.lines_won, 1)
        self.assertEqual(evaluation.winning_cells, (0, 2))
        self.assertEqual(evaluation.lines[0].category, "small_win")

    def test_three_of_a_kind(self):
        jackpot = Tier("jackpot", 2, TierShape.ALL_SAME)
        evaluation = self.evaluator.evaluate(Grid(1, 3, [2, 2, 2]), jackpot)

        self.assertEqual(evaluation.lines[0].length, 3)
        self.assertEqual(evaluation.winning_cells, (0, 1, 2))
        self.assertEqual(evaluation.lines[0].category, "jackpot")

    def test_all_different_loses(self):
        lose = Tier("lose", 68, TierShape.ALL_DIFFERENT)
        self.assertEqual(self.evaluator.evaluate(Grid(1, 3, [0, 2, 1]), lose).lines_won, 0)

    def test_category_falls_back_to_match_count(self):
        evaluation = self.evaluator.evaluate(Grid(1, 3, [0, 0, 2]))
        self.assertEqual(evaluation.lines[0].category, 2)


class TestCreateEvaluator(unittest.TestCase):

    def test_mode_selects_evaluator(self):
        uniform = create_evaluator(EngineConfig.from_dict({}))
        tiered = create_evaluator(EngineConfig.from_dict({"mode": "tiered"}))

        self.assertIsInstance(uniform, RunEvaluator)
        self.assertEqual(uniform.min_run_length, 3)
        self.assertIsInstance(tiered, TierMatchEvaluator)
        self.assertEqual(tiered.min_match, 2)


if __name__ == "__main__":
    unittest.main()
