"""Market data models."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

MarketStatus = Literal["uninitialized", "open", "closed"]


class Wager(BaseModel):
    """A bettor's single active stake on one outcome label."""

    bettor: str = Field(min_length=1)
    amount: int = Field(ge=0, description="Stake in the smallest currency unit")
    outcome: str = Field(min_length=1)

    model_config = {"frozen": True}


class Payout(BaseModel):
    """Amount owed to one winning bettor."""

    bettor: str
    amount: int = Field(gt=0)


class Settlement(BaseModel):
    """Result of settling a ledger against a winning outcome."""

    winning_outcome: str
    policy: str
    total_pool: int
    totals: dict[str, int] = Field(
        default_factory=dict,
        description="Total stake per outcome label, for every label bet on",
    )
    winning_total: int = 0
    payouts: list[Payout] = Field(default_factory=list)

    @property
    def total_paid(self) -> int:
        return sum(p.amount for p in self.payouts)

    @property
    def retained(self) -> int:
        """Part of the pool not distributed to winners."""
        return self.total_pool - self.total_paid


class BetResult(BaseModel):
    """Outcome of a place_bet call."""

    accepted: bool
    bettor: str
    outcome: str
    amount: int
    replaced: Wager | None = None
    code: str | None = None
    message: str = ""

    def __str__(self) -> str:
        if self.accepted:
            return f"Recorded {self.amount} on {self.outcome!r} for {self.bettor}"
        return f"Rejected bet from {self.bettor}: {self.code} ({self.message})"


class DispatchOutcome(BaseModel):
    """Result of one payout transfer attempt."""

    bettor: str
    amount: int
    success: bool
    address: str | None = None
    transfer_id: str | None = None
    fee: int = 0
    error: str | None = None
    attempted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class DispatchReport(BaseModel):
    """All transfer attempts for one settlement."""

    currency: str
    outcomes: list[DispatchOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[DispatchOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[DispatchOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def total_sent(self) -> int:
        return sum(o.amount for o in self.succeeded)


class SettlementReport(BaseModel):
    """What close_market computed and dispatched."""

    settlement: Settlement
    dispatch: DispatchReport
    closed_at: int
