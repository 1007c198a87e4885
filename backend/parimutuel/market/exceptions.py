"""Market lifecycle and settlement exceptions."""


class MarketError(Exception):
    """Base market exception."""

    code = "MarketError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(MarketError):
    """Caller is not the market creator."""

    code = "Unauthorized"


class BadDeadlineFormat(MarketError):
    """Deadline is not a 'YYYY-MM-DD HH:MM' UTC string."""

    code = "BadDeadlineFormat"


class BettingClosed(MarketError):
    """Bet arrived while the market is not accepting wagers."""

    code = "BettingClosed"


class MissingParameter(MarketError):
    """Required outcome label is absent or blank."""

    code = "MissingParameter"


class InvalidStake(MarketError):
    """Stake amount is negative or above the configured maximum."""

    code = "InvalidStake"


class InvalidBettor(MarketError):
    """Bettor identity cannot be used as a payout address."""

    code = "InvalidBettor"


class AlreadyInitialized(MarketError):
    """Market was already initialized."""

    code = "AlreadyInitialized"


class NotInitialized(MarketError):
    """Market has not been initialized yet."""

    code = "NotInitialized"


class AlreadyClosed(MarketError):
    """Market was already closed."""

    code = "AlreadyClosed"


class TooEarly(MarketError):
    """Betting deadline has not passed yet."""

    code = "TooEarly"


class NoBets(MarketError):
    """Settlement attempted with zero recorded wagers."""

    code = "NoBets"


class CorruptState(MarketError):
    """Persisted wager blob failed to decode."""

    code = "CorruptState"
