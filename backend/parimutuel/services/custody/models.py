"""Custody models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Address(BaseModel):
    """Transfer target address."""

    value: str

    def __str__(self) -> str:
        return self.value


class DepositReceipt(BaseModel):
    """Funds received alongside a bet."""

    sender: str
    amount: int
    currency: str
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class TransferReceipt(BaseModel):
    """Executed outgoing transfer."""

    transfer_id: str
    address: str
    amount: int
    fee: int = 0
    currency: str
    executed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def net_amount(self) -> int:
        """Amount delivered after the flat fee."""
        return self.amount - self.fee

    def __str__(self) -> str:
        return f"Sent {self.net_amount} {self.currency} to {self.address} ({self.transfer_id})"
