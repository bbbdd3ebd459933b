# reelgrid/domain/machine/errors.py


class EngineError(Exception):
    """Base class for payout engine and session errors."""
    pass


class InvalidBetError(EngineError, ValueError):
    """The bet is not a positive integer."""
    def __init__(self, bet):
        self.bet = bet
        self.message = f"Bet must be a positive integer, got {bet!r}"
        super().__init__(self.message)


class InsufficientBalanceError(EngineError):
    """The bet exceeds the balance it would be taken from."""
    def __init__(self, balance: int, bet: int):
        self.balance = balance
        self.bet = bet
        self.message = f"Insufficient balance: bet {bet} exceeds balance {balance}"
        super().__init__(self.message)


class EngineConfigError(EngineError, ValueError):
    """The engine configuration is inconsistent."""
    def __init__(self, errors):
        self.errors = list(errors)
        error_msg = "\n  - ".join([""] + self.errors)
        self.message = f"Invalid engine configuration:{error_msg}"
        super().__init__(self.message)


class SessionBusyError(EngineError):
    """A round was requested while the previous one is still held for presentation."""
    pass
