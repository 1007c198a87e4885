"""Market core: stake ledger, clock, settlement and payout dispatch.

MarketLifecycle lives in parimutuel.market.lifecycle; it depends on the
storage layer, which in turn imports the models defined here.
"""

from .clock import (
    NO_DEADLINE,
    format_deadline,
    is_betting_open,
    is_past_deadline,
    parse_deadline,
    utc_now,
)
from .dispatcher import PayoutDispatcher
from .exceptions import (
    AlreadyClosed,
    AlreadyInitialized,
    BadDeadlineFormat,
    BettingClosed,
    CorruptState,
    InvalidBettor,
    InvalidStake,
    MarketError,
    MissingParameter,
    NoBets,
    NotInitialized,
    TooEarly,
    Unauthorized,
)
from .ledger import StakeLedger
from .models import (
    BetResult,
    DispatchOutcome,
    DispatchReport,
    MarketStatus,
    Payout,
    Settlement,
    SettlementReport,
    Wager,
)
from .settlement import SettlementEngine, aggregate_totals

__all__ = [
    "NO_DEADLINE",
    "format_deadline",
    "is_betting_open",
    "is_past_deadline",
    "parse_deadline",
    "utc_now",
    "PayoutDispatcher",
    "MarketError",
    "Unauthorized",
    "BadDeadlineFormat",
    "BettingClosed",
    "MissingParameter",
    "InvalidStake",
    "InvalidBettor",
    "AlreadyInitialized",
    "NotInitialized",
    "AlreadyClosed",
    "TooEarly",
    "NoBets",
    "CorruptState",
    "StakeLedger",
    "Wager",
    "Payout",
    "Settlement",
    "BetResult",
    "DispatchOutcome",
    "DispatchReport",
    "SettlementReport",
    "MarketStatus",
    "SettlementEngine",
    "aggregate_totals",
]
