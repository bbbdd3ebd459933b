# reelgrid/domain/machine/services/outcome_classifier.py
from enum import Enum
from fractions import Fraction

from ..entities.engine_config import OutcomeThresholds


class Outcome(Enum):
    LOSE = "LOSE"
    WIN_SMALL = "WIN_SMALL"
    WIN = "WIN"
    WIN_JACKPOT = "WIN_JACKPOT"

    @property
    def is_win(self) -> bool:
        return self is not Outcome.LOSE


class OutcomeClassifier:
    """
    Buckets a round by its line count and total multiplier. Any qualifying
    line makes the round at least a small win.
    """
    def __init__(self, thresholds: OutcomeThresholds):
        self.thresholds = thresholds

    def classify(self, total_multiplier: Fraction, lines_won: int) -> Outcome:
        if lines_won <= 0:
            return Outcome.LOSE
        if total_multiplier >= self.thresholds.jackpot:
            return Outcome.WIN_JACKPOT
        if total_multiplier >= self.thresholds.big:
            return Outcome.WIN
        return Outcome.WIN_SMALL
