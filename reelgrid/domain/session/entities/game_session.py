# reelgrid/domain/session/entities/game_session.py
import logging
import math
import re
import time
from collections import deque
from typing import Any, Dict, List, Optional

from reelgrid.domain.events.event_dispatcher import EventDispatcher
from reelgrid.domain.events.session_events import SessionEvent, SessionEventType
from reelgrid.domain.machine.entities.round_result import RoundResult
from reelgrid.domain.machine.errors import InsufficientBalanceError, SessionBusyError
from reelgrid.domain.machine.services.outcome_classifier import Outcome
from .session_stats import SessionStats


DEFAULT_BET = 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def coerce_bet(raw_bet: Any, default: int = DEFAULT_BET) -> int:
    """
    Turn raw bet input into a positive integer stake.

    Text is read up to its first non-digit ("25 coins" -> 25); anything that
    is not a positive number becomes ``default``.
    """
    if isinstance(raw_bet, bool) or raw_bet is None:
        return default

    if isinstance(raw_bet, (int, float)):
        if isinstance(raw_bet, float) and not math.isfinite(raw_bet):
            return default
        value = int(raw_bet)
    else:
        match = _LEADING_INT.match(str(raw_bet))
        if not match:
            return default
        value = int(match.group(1))

    return value if value > 0 else default


class GameSession:
    """
    Owns the balance between rounds and the gate that keeps a new round from
    starting while the previous one is still being shown.
    """
    def __init__(self, session_id: str, engine, initial_balance: int = 999,
                 event_dispatcher: Optional[EventDispatcher] = None,
                 history_size: int = 50):
        """
        Args:
            session_id: Unique identifier for this session
            engine: PayoutEngine that plays the rounds
            initial_balance: Starting balance
            event_dispatcher: Optional dispatcher for session events
            history_size: Number of recent rounds kept in ``history``
        """
        if isinstance(initial_balance, bool) or not isinstance(initial_balance, int) or initial_balance < 0:
            raise ValueError(f"Initial balance must be a non-negative integer, got {initial_balance!r}")

        self.id = session_id
        self.engine = engine
        self.event_dispatcher = event_dispatcher
        self.logger = logging.getLogger(f"domain.session.{session_id}")

        self.balance = initial_balance
        self.initial_balance = initial_balance
        self.history = deque(maxlen=history_size)
        self.stats = SessionStats(session_id=session_id, engine_id=engine.id)
        self.stats.track_balance(initial_balance)

        self.busy = False
        self.active = False
        self.start_time = None
        self.end_time = None

        self.logger.info(f"Session initialized on engine {engine.id} with balance {initial_balance}")

    @property
    def last_result(self) -> Optional[RoundResult]:
        return self.history[-1] if self.history else None

    def can_play(self, raw_bet: Any) -> bool:
        """Whether a round with this bet input may start now."""
        return not self.busy and self.balance >= coerce_bet(raw_bet)

    def start(self):
        if self.active:
            self.logger.warning("Session is already active")
            return

        self.active = True
        self.start_time = time.time()
        self._dispatch(SessionEventType.SESSION_STARTED, {"initial_balance": self.initial_balance})

    def end(self, reason: Optional[str] = None):
        if not self.active:
            self.logger.warning("Session is not active")
            return

        self.active = False
        self.end_time = time.time()
        self.logger.info(
            f"Session ended after {self.stats.total_rounds} rounds, balance {self.balance}"
            + (f" ({reason})" if reason else "")
        )
        data = self.stats.to_dict()
        data["reason"] = reason
        self._dispatch(SessionEventType.SESSION_ENDED, data)

    def play(self, raw_bet: Any, hold: bool = False) -> RoundResult:
        """
        Play one round and apply its delta to the balance.

        Args:
            raw_bet: Bet input, coerced with ``coerce_bet``
            hold: Keep the session busy after the round until ``release``
                is called, e.g. while reels are still stopping on screen

        Returns:
            The round's RoundResult

        Raises:
            SessionBusyError: A held round has not been released yet
            InsufficientBalanceError: The bet exceeds the balance
        """
        if self.busy:
            self.logger.warning("Round requested while the previous one is still held")
            raise SessionBusyError(f"Session {self.id} is busy")

        bet = coerce_bet(raw_bet)
        if self.balance < bet:
            self.logger.warning(f"Bet {bet} exceeds balance {self.balance}")
            raise InsufficientBalanceError(self.balance, bet)

        self.busy = True
        try:
            result = self.engine.play_round(self.balance, bet)
        except Exception:
            self.busy = False
            raise

        self.balance = result.balance
        self.history.append(result)
        self.stats.update_round(result)
        self.busy = hold

        self._publish_round(result)
        return result

    def release(self):
        """Allow the next round after a held one has been presented."""
        self.busy = False

    def add_funds(self, amount: int = 100) -> int:
        """
        Credit the balance, like the "add credit" button.

        Returns:
            The new balance
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError(f"Top-up amount must be a positive integer, got {amount!r}")

        self.balance += amount
        self.stats.total_top_up += amount
        self.stats.track_balance(self.balance)
        self.logger.debug(f"Balance topped up by {amount} to {self.balance}")
        self._dispatch(SessionEventType.FUNDS_ADDED, {"amount": amount, "balance": self.balance})
        return self.balance

    def get_recent_results(self, count: Optional[int] = None) -> List[RoundResult]:
        results = list(self.history)
        return results if count is None else results[-count:]

    def get_session_summary(self) -> Dict[str, Any]:
        summary = self.stats.to_dict()
        summary["initial_balance"] = self.initial_balance
        summary["final_balance"] = self.balance
        summary["duration"] = (self.end_time or time.time()) - self.start_time if self.start_time else 0.0
        return summary

    def _publish_round(self, result: RoundResult):
        self._dispatch(SessionEventType.ROUND_COMPLETED, result.to_dict())

        if result.outcome is Outcome.WIN_JACKPOT:
            self._dispatch(SessionEventType.JACKPOT_WIN, {"win_amount": result.win_amount})
        elif result.outcome is Outcome.WIN:
            self._dispatch(SessionEventType.BIG_WIN, {"win_amount": result.win_amount})

        if result.balance == 0:
            self.logger.info("Balance depleted")
            self._dispatch(SessionEventType.BALANCE_DEPLETED, {"last_bet": result.bet})

    def _dispatch(self, event_type: SessionEventType, data: Dict[str, Any]):
        if self.event_dispatcher:
            self.event_dispatcher.dispatch(SessionEvent(
                type=event_type,
                session_id=self.id,
                engine_id=self.engine.id,
                data=data
            ))
