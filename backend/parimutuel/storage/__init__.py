"""Storage layer for Parimutuel - market state and payout journal.

This package provides:
- State management (load/save market state from data/state.yaml)
- Payout journal (transfer outcomes appended to data/payouts/*.jsonl)

All operations use Pydantic models for type safety and atomic writes to prevent corruption.
"""

from .files import JsonlPayoutJournal, MemoryPayoutJournal, PayoutJournal
from .state import (
    MarketState,
    MemoryStateStore,
    SettlementSummary,
    StateStore,
    StrandedFunds,
    YamlStateStore,
    get_data_dir,
)

__all__ = [
    "MarketState",
    "SettlementSummary",
    "StrandedFunds",
    "StateStore",
    "MemoryStateStore",
    "YamlStateStore",
    "get_data_dir",
    "PayoutJournal",
    "JsonlPayoutJournal",
    "MemoryPayoutJournal",
]
