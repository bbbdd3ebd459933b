# reelgrid/domain/machine/services/payout_calculator.py
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable

from ..entities.engine_config import PayoutTable
from .win_evaluation import WinLine


@dataclass(frozen=True)
class Payout:
    total_multiplier: Fraction
    win_amount: int
    delta: int


class PayoutCalculator:
    """
    Turns winning lines into money: every line adds the multiplier of its
    category, the win is floor(bet * total) and the delta is win - bet.
    """
    def __init__(self, payout_table: PayoutTable):
        self.payout_table = payout_table

    def total_multiplier(self, lines: Iterable[WinLine]) -> Fraction:
        return sum((self.payout_table.multiplier_for(line.category) for line in lines), Fraction(0))

    def calculate(self, lines: Iterable[WinLine], bet: int) -> Payout:
        total_multiplier = self.total_multiplier(lines)
        win_amount = math.floor(bet * total_multiplier)
        return Payout(
            total_multiplier=total_multiplier,
            win_amount=win_amount,
            delta=win_amount - bet,
        )
