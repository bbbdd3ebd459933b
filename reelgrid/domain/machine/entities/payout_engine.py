# reelgrid/domain/machine/entities/payout_engine.py
import logging
from typing import Any, Dict, Optional

from .engine_config import EngineConfig, GenerationMode, Tier, TierShape
from .grid import Grid
from .round_result import RoundResult
from ..errors import InsufficientBalanceError, InvalidBetError
from ..services.outcome_classifier import OutcomeClassifier
from ..services.payout_calculator import PayoutCalculator
from ..services.symbol_generator import create_generator
from ..services.win_evaluation import create_evaluator


class PayoutEngine:
    """
    Plays one round at a time: draw a grid, find the winning lines, price
    them, classify the outcome and apply the delta to the caller's balance.

    The engine keeps no state between rounds apart from its RNG strategy;
    the balance lives with the caller.
    """
    def __init__(self, engine_id: str, config: EngineConfig, rng_strategy=None):
        """
        Args:
            engine_id: Identifier used in logs and reports
            config: Validated engine configuration
            rng_strategy: Random source (optional, see ``set_rng``)
        """
        self.id = engine_id
        self.config = config
        self.rng = rng_strategy
        self.logger = logging.getLogger(f"domain.machine.{engine_id}")

        self.generator = create_generator(config)
        self.evaluator = create_evaluator(config)
        self.calculator = PayoutCalculator(config.payout_table)
        self.classifier = OutcomeClassifier(config.thresholds)

        self.logger.info(
            f"Payout engine {engine_id} ready: {config.mode.value} mode, "
            f"{config.rows}x{config.cols} grid, {config.symbol_count} symbols"
        )

    def set_rng(self, rng_strategy):
        self.rng = rng_strategy
        self.logger.debug(f"Updated RNG strategy: {type(rng_strategy).__name__}")

    def play_round(self, balance: int, bet: int) -> RoundResult:
        """
        Play a full round.

        Args:
            balance: Balance before the round, at least ``bet``
            bet: Positive integer stake

        Returns:
            Immutable RoundResult carrying the new balance

        Raises:
            InvalidBetError: Bet is not a positive integer
            InsufficientBalanceError: Bet exceeds the balance
            ValueError: No RNG strategy has been set
        """
        self._check_stake(balance, bet)

        if self.rng is None:
            self.logger.error("No RNG strategy set, cannot play a round")
            raise ValueError("No RNG strategy set for payout engine")

        generated = self.generator.generate(self.rng)
        return self.evaluate_round(generated.grid, balance, bet, generated.tier)

    def evaluate_round(self, grid: Grid, balance: int, bet: int,
                       tier: Optional[Tier] = None) -> RoundResult:
        """
        Run every step of a round except generation on a known grid.

        In tiered mode a replay without ``tier`` is priced by the grid's
        shape (see ``infer_tier``).

        Raises:
            ValueError: Grid does not match the configured dimensions, or no
                configured tier has the grid's shape
        """
        self._check_stake(balance, bet)

        if (grid.rows, grid.cols) != (self.config.rows, self.config.cols):
            raise ValueError(
                f"Grid is {grid.rows}x{grid.cols}, engine expects {self.config.rows}x{self.config.cols}"
            )

        if tier is None and self.config.mode is GenerationMode.TIERED:
            tier = self.infer_tier(grid)

        evaluation = self.evaluator.evaluate(grid, tier)
        payout = self.calculator.calculate(evaluation.lines, bet)
        outcome = self.classifier.classify(payout.total_multiplier, evaluation.lines_won)

        result = RoundResult(
            grid=grid,
            bet=bet,
            delta=payout.delta,
            balance=max(0, balance + payout.delta),
            outcome=outcome,
            winning_cells=evaluation.winning_cells,
            lines_won=evaluation.lines_won,
            win_amount=payout.win_amount,
            total_multiplier=payout.total_multiplier,
            lines=evaluation.lines,
            tier=tier.name if tier is not None else None,
        )

        self.logger.debug(
            f"Round: bet={bet}, lines={result.lines_won}, multiplier={result.total_multiplier}, "
            f"delta={result.delta:+d}, outcome={outcome.value}, balance {balance} -> {result.balance}"
        )
        return result

    def infer_tier(self, grid: Grid) -> Tier:
        """
        Pick the tier a tiered grid belongs to from its shape alone.

        Tiers of the same shape cannot be told apart from the symbols, so a
        pair always maps to the first declared TWO_MATCH tier.
        """
        distinct = len(set(grid.cells))
        if distinct == 1:
            shape = TierShape.ALL_SAME
        elif distinct == 2:
            shape = TierShape.TWO_MATCH
        else:
            shape = TierShape.ALL_DIFFERENT

        for tier in self.config.tiers:
            if tier.shape is shape:
                self.logger.debug(f"Inferred tier {tier.name} for grid {list(grid.cells)}")
                return tier

        raise ValueError(f"No configured tier has shape {shape.value}")

    def _check_stake(self, balance: int, bet: int):
        if isinstance(bet, bool) or not isinstance(bet, int) or bet < 1:
            self.logger.error(f"Rejected bet {bet!r}")
            raise InvalidBetError(bet)
        if isinstance(balance, bool) or not isinstance(balance, int) or balance < 0:
            self.logger.error(f"Rejected balance {balance!r}")
            raise ValueError(f"Balance must be a non-negative integer, got {balance!r}")
        if bet > balance:
            self.logger.error(f"Bet {bet} exceeds balance {balance}")
            raise InsufficientBalanceError(balance, bet)

    def expected_rtp(self) -> Optional[float]:
        """
        Analytic return-to-player for tiered mode, where each tier pays a
        fixed multiplier. Uniform mode has no closed form here and returns None.
        """
        if self.config.mode is not GenerationMode.TIERED:
            return None

        total_weight = sum(tier.weight for tier in self.config.tiers)
        expected = sum(
            tier.weight * self.config.payout_table.multiplier_for(tier.name)
            for tier in self.config.tiers
        )
        return float(expected / total_weight)

    def get_info(self) -> Dict[str, Any]:
        info = self.config.to_dict()
        info["id"] = self.id
        info["rng"] = type(self.rng).__name__ if self.rng is not None else None
        info["expected_rtp"] = self.expected_rtp()
        return info
