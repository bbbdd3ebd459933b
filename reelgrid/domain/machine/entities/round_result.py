# reelgrid/domain/machine/entities/round_result.py
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Optional, Tuple
import time

from .grid import Grid
from ..services.outcome_classifier import Outcome
from ..services.win_evaluation import WinLine


@dataclass(frozen=True)
class RoundResult:
    """
    Everything the presentation layer needs to show one round. Fully
    determined when the engine returns it.
    """
    grid: Grid
    bet: int
    delta: int
    balance: int
    outcome: Outcome
    winning_cells: Tuple[int, ...]
    lines_won: int

    win_amount: int = 0
    total_multiplier: Fraction = Fraction(0)
    lines: Tuple[WinLine, ...] = ()
    tier: Optional[str] = None
    timestamp: float = field(default_factory=time.time, compare=False)

    @property
    def symbols(self) -> Tuple[int, ...]:
        return self.grid.cells

    @property
    def is_win(self) -> bool:
        return self.outcome.is_win

    def to_dict(self) -> Dict[str, Any]:
        """Plain types only, ready for JSON or CSV."""
        return {
            "grid": list(self.grid.cells),
            "rows": self.grid.rows,
            "cols": self.grid.cols,
            "bet": self.bet,
            "delta": self.delta,
            "balance": self.balance,
            "outcome": self.outcome.value,
            "winning_cells": list(self.winning_cells),
            "lines_won": self.lines_won,
            "win_amount": self.win_amount,
            "total_multiplier": float(self.total_multiplier),
            "tier": self.tier,
            "timestamp": self.timestamp,
        }
