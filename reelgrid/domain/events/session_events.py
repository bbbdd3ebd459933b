# reelgrid/domain/events/session_events.py
from enum import Enum, auto
from dataclasses import dataclass

from .event_types import DomainEvent


class SessionEventType(Enum):
    """Event types specific to game sessions."""
    SESSION_STARTED = auto()
    SESSION_ENDED = auto()
    ROUND_COMPLETED = auto()
    BIG_WIN = auto()
    JACKPOT_WIN = auto()
    BALANCE_DEPLETED = auto()
    FUNDS_ADDED = auto()


@dataclass
class SessionEvent(DomainEvent):
    """Something that happened during a game session."""
    session_id: str = ""
    engine_id: str = ""

    def __post_init__(self):
        super().__post_init__()

        self.data["session_id"] = self.session_id
        self.data["engine_id"] = self.engine_id
