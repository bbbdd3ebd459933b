# reelgrid/domain/session/entities/session_stats.py
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from reelgrid.domain.machine.services.outcome_classifier import Outcome


@dataclass
class SessionStats:
    """Running totals for one game session."""
    session_id: str
    engine_id: str

    total_rounds: int = 0
    win_count: int = 0
    total_bet: int = 0
    total_win: int = 0
    total_profit: int = 0
    total_lines_won: int = 0
    total_top_up: int = 0
    hit_rate: float = 0.0
    return_to_player: float = 0.0
    biggest_win: int = 0
    start_balance: Optional[int] = None
    end_balance: int = 0
    min_balance: Optional[int] = None
    max_balance: Optional[int] = None
    outcome_counts: Dict[str, int] = field(
        default_factory=lambda: {outcome.value: 0 for outcome in Outcome}
    )

    def update_round(self, result) -> None:
        """Fold one RoundResult into the totals."""
        self.total_rounds += 1
        self.total_bet += result.bet
        self.total_win += result.win_amount
        self.total_profit = self.total_win - self.total_bet
        self.total_lines_won += result.lines_won
        self.outcome_counts[result.outcome.value] += 1

        if result.is_win:
            self.win_count += 1
        self.biggest_win = max(self.biggest_win, result.win_amount)

        self.hit_rate = self.win_count / self.total_rounds
        self.return_to_player = self.total_win / self.total_bet if self.total_bet > 0 else 0.0

        self.track_balance(result.balance)

    def track_balance(self, balance: int) -> None:
        if self.start_balance is None:
            self.start_balance = balance
        self.end_balance = balance
        self.min_balance = balance if self.min_balance is None else min(self.min_balance, balance)
        self.max_balance = balance if self.max_balance is None else max(self.max_balance, balance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "engine_id": self.engine_id,
            "total_rounds": self.total_rounds,
            "win_count": self.win_count,
            "total_bet": self.total_bet,
            "total_win": self.total_win,
            "total_profit": self.total_profit,
            "total_lines_won": self.total_lines_won,
            "total_top_up": self.total_top_up,
            "hit_rate": self.hit_rate,
            "return_to_player": self.return_to_player,
            "biggest_win": self.biggest_win,
            "start_balance": self.start_balance,
            "end_balance": self.end_balance,
            "min_balance": self.min_balance,
            "max_balance": self.max_balance,
            "outcome_counts": dict(self.outcome_counts),
        }
