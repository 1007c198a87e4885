"""Funds custody clients."""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import uuid4

from .config import CustodyConfig
from .exceptions import InsufficientFundsError, TransferRejectedError
from .models import Address, DepositReceipt, TransferReceipt

logger = logging.getLogger(__name__)


class CustodyClient(Protocol):
    def transfer(self, address: Address, amount: int, currency: str) -> TransferReceipt: ...


class PaperCustodyClient:
    """In-memory treasury that simulates deposits and payouts."""

    def __init__(self, config: CustodyConfig | None = None, treasury: int | None = None):
        self.config = config or CustodyConfig()
        self.treasury = self.config.initial_treasury if treasury is None else treasury
        self.deposits: list[DepositReceipt] = []
        self.transfers: list[TransferReceipt] = []
        self.balances: dict[str, int] = {}

        logger.info(
            f"Initialized PaperCustodyClient (treasury={self.treasury} "
            f"{self.config.currency}, fee={self.config.transfer_fee})"
        )

    def receive(self, sender: str, amount: int) -> DepositReceipt:
        """Credit funds sent alongside a bet to the treasury."""
        if amount < 0:
            raise TransferRejectedError(f"Negative deposit of {amount}", bettor=sender)

        receipt = DepositReceipt(sender=sender, amount=amount, currency=self.config.currency)
        self.treasury += amount
        self.deposits.append(receipt)
        logger.debug(f"Received {amount} {self.config.currency} from {sender}")
        return receipt

    def transfer(self, address: Address, amount: int, currency: str) -> TransferReceipt:
        """Send funds from the treasury, deducting the flat transfer fee."""
        if currency != self.config.currency:
            raise TransferRejectedError(
                f"Unsupported currency {currency!r} (expected {self.config.currency!r})",
                bettor=address.value,
            )
        if amount <= 0:
            raise TransferRejectedError(f"Transfer amount must be positive, got {amount}", bettor=address.value)
        if amount > self.treasury:
            raise InsufficientFundsError(
                f"Treasury holds {self.treasury} {currency}, cannot send {amount}",
                bettor=address.value,
            )

        fee = min(self.config.transfer_fee, amount)
        receipt = TransferReceipt(
            transfer_id=f"paper_{uuid4().hex[:8]}",
            address=address.value,
            amount=amount,
            fee=fee,
            currency=currency,
        )
        self.treasury -= amount
        self.balances[address.value] = self.balances.get(address.value, 0) + receipt.net_amount
        self.transfers.append(receipt)

        logger.info(str(receipt))
        return receipt

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)


def create_custody_client(
    config: CustodyConfig | None = None,
    treasury: int | None = None,
) -> PaperCustodyClient:
    """Create the custody client for the configured mode."""
    config = config or CustodyConfig()
    if not config.paper_mode:
        raise NotImplementedError(
            "Live custody requires an external ledger client; only paper mode is built in"
        )
    return PaperCustodyClient(config=config, treasury=treasury)
