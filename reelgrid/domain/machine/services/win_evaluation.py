# reelgrid/domain/machine/services/win_evaluation.py
import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple, Union

from ..entities.engine_config import EngineConfig, GenerationMode, Tier
from ..entities.grid import Grid


@dataclass(frozen=True)
class WinLine:
    """
    One qualifying line. ``category`` is the payout table key for the line:
    the run length in uniform mode, the tier name in tiered mode.
    """
    row: int
    start_col: int
    length: int
    symbol: int
    cells: Tuple[int, ...]
    category: Union[int, str]


@dataclass(frozen=True)
class WinEvaluation:
    lines: Tuple[WinLine, ...] = ()

    @property
    def lines_won(self) -> int:
        return len(self.lines)

    @property
    def winning_cells(self) -> Tuple[int, ...]:
        """Sorted union of the cells of every winning line."""
        return tuple(sorted({cell for line in self.lines for cell in line.cells}))

    @property
    def run_lengths(self) -> List[int]:
        return [line.length for line in self.lines]


class WinEvaluator(Protocol):
    def evaluate(self, grid: Grid, tier: Optional[Tier] = None) -> WinEvaluation:
        ...


class RunEvaluator:
    """
    Horizontal run detection for the multi-line grid.

    Each row is scanned left to right. A run of identical symbols at least
    ``min_run_length`` long is recorded once and the scan resumes after it, so
    a full-row run is a single line.
    """
    def __init__(self, min_run_length: int = 3):
        if min_run_length < 1:
            raise ValueError(f"min_run_length must be positive, got {min_run_length}")
        self.min_run_length = min_run_length
        self.logger = logging.getLogger("domain.machine.win_evaluator")

    @staticmethod
    def find_runs(symbols, min_length: int) -> List[Tuple[int, int]]:
        """
        Return (start, length) of every maximal run in ``symbols`` that is at
        least ``min_length`` long.
        """
        runs = []
        col = 0
        width = len(symbols)
        while col < width:
            end = col + 1
            while end < width and symbols[end] == symbols[col]:
                end += 1
            if end - col >= min_length:
                runs.append((col, end - col))
                col = end
            else:
                col += 1
        return runs

    def evaluate(self, grid: Grid, tier: Optional[Tier] = None) -> WinEvaluation:
        lines = []
        for row in range(grid.rows):
            row_symbols = grid.row(row)
            for start, length in self.find_runs(row_symbols, self.min_run_length):
                first = grid.index(row, start)
                lines.append(WinLine(
                    row=row,
                    start_col=start,
                    length=length,
                    symbol=row_symbols[start],
                    cells=tuple(range(first, first + length)),
                    category=length,
                ))

        if lines:
            self.logger.debug(f"Runs found: {[(l.row, l.start_col, l.length) for l in lines]}")
        return WinEvaluation(tuple(lines))


class TierMatchEvaluator:
    """
    Match-count detection for the 3-reel line.

    The most frequent symbol of a row wins when it shows at least
    ``min_match`` times, adjacent or not. The line pays under the name of the
    tier that produced the grid, or under its match count when no tier is
    known.
    """
    def __init__(self, min_match: int = 2):
        if min_match < 1:
            raise ValueError(f"min_match must be positive, got {min_match}")
        self.min_match = min_match

    def evaluate(self, grid: Grid, tier: Optional[Tier] = None) -> WinEvaluation:
        lines = []
        for row in range(grid.rows):
            row_symbols = grid.row(row)
            symbol, count = Counter(row_symbols).most_common(1)[0]
            if count < self.min_match:
                continue

            positions = [col for col, s in enumerate(row_symbols) if s == symbol]
            lines.append(WinLine(
                row=row,
                start_col=positions[0],
                length=count,
                symbol=symbol,
                cells=tuple(grid.index(row, col) for col in positions),
                category=tier.name if tier is not None else count,
            ))

        return WinEvaluation(tuple(lines))


def create_evaluator(config: EngineConfig) -> WinEvaluator:
    if config.mode is GenerationMode.TIERED:
        return TierMatchEvaluator(config.min_run_length)
    return RunEvaluator(config.min_run_length)
