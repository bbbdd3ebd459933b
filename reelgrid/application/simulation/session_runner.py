# reelgrid/application/simulation/session_runner.py
import logging
import time
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from reelgrid.domain.machine.errors import EngineError
from reelgrid.domain.session.entities.game_session import GameSession, coerce_bet


class SessionRunner:
    """
    Runs a single game session from start to end with a fixed bet.

    The session ends when ``max_rounds`` have been played or the balance can
    no longer cover the bet and automatic top-up is disabled.
    """
    def __init__(self, session: GameSession, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            session: GameSession that owns the balance
            config: Session section of the simulation config. Keys:
                bet, max_rounds, top_up_amount, show_progress, record_rounds
        """
        self.logger = logging.getLogger(f"application.simulation.runner.{session.id}")
        self.session = session

        self.config = config or {}
        self.bet = coerce_bet(self.config.get("bet", 1))
        self.max_rounds = int(self.config.get("max_rounds", 1000))
        self.top_up_amount = int(self.config.get("top_up_amount", 0) or 0)
        self.show_progress = bool(self.config.get("show_progress", False))
        self.record_rounds = bool(self.config.get("record_rounds", True))

        if self.max_rounds < 0:
            raise ValueError(f"max_rounds must not be negative, got {self.max_rounds}")

        # Per-round records, kept here because the session history is bounded
        self.rounds: List[Dict[str, Any]] = []

    def run(self) -> Dict[str, Any]:
        """
        Play rounds until a termination condition is met.

        Returns:
            Dictionary with session results
        """
        self.logger.info(
            f"Starting session {self.session.id} on engine {self.session.engine.id}: "
            f"bet {self.bet}, up to {self.max_rounds} rounds"
        )
        start_time = time.time()
        self.session.start()

        reason = f"max_rounds_reached_{self.max_rounds}"
        pbar = tqdm(total=self.max_rounds, desc=self.session.id, unit="round") if self.show_progress else None

        try:
            for round_number in range(1, self.max_rounds + 1):
                if not self._ensure_funds():
                    reason = "insufficient_balance"
                    break

                result = self.session.play(self.bet)

                if self.record_rounds:
                    record = result.to_dict()
                    record["round"] = round_number
                    self.rounds.append(record)

                if pbar:
                    pbar.update(1)
                    if round_number % 100 == 0:
                        pbar.set_postfix(balance=self.session.balance)

        except EngineError as e:
            self.logger.error(f"Error during session execution: {str(e)}")
            self.session.end(reason="error")
            raise
        finally:
            if pbar:
                pbar.close()

        self.session.end(reason=reason)
        duration = time.time() - start_time
        self.logger.info(
            f"Session completed - Rounds: {self.session.stats.total_rounds}, "
            f"RTP: {self.session.stats.return_to_player:.4f}, Duration: {duration:.2f}s"
        )

        return {
            "session_id": self.session.id,
            "engine_id": self.session.engine.id,
            "end_reason": reason,
            "bet": self.bet,
            "total_rounds": self.session.stats.total_rounds,
            "total_bet": self.session.stats.total_bet,
            "total_win": self.session.stats.total_win,
            "total_profit": self.session.stats.total_profit,
            "total_top_up": self.session.stats.total_top_up,
            "return_to_player": self.session.stats.return_to_player,
            "hit_rate": self.session.stats.hit_rate,
            "outcome_counts": dict(self.session.stats.outcome_counts),
            "initial_balance": self.session.initial_balance,
            "final_balance": self.session.balance,
            "expected_rtp": self.session.engine.expected_rtp(),
            "duration": duration,
            "session_stats": self.session.get_session_summary(),
        }

    def _ensure_funds(self) -> bool:
        """
        Make sure the balance covers the bet, topping up when enabled.

        Returns:
            False when the session has to stop
        """
        if self.session.balance >= self.bet:
            return True

        if self.top_up_amount <= 0:
            self.logger.info(f"Balance {self.session.balance} below bet {self.bet}, stopping")
            return False

        while self.session.balance < self.bet:
            self.session.add_funds(self.top_up_amount)
        return True
