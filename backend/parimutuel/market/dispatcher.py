"""Turns computed payouts into custody transfers (best-effort fan-out)."""

import logging
from collections.abc import Iterable

from parimutuel.services.custody import AddressCodec, CustodyClient, CustodyError

from .models import DispatchOutcome, DispatchReport, Payout

logger = logging.getLogger(__name__)


class PayoutDispatcher:
    """Requests one transfer per payout; a failed transfer never stops the rest."""

    def __init__(self, custody: CustodyClient, codec: AddressCodec, currency: str):
        self.custody = custody
        self.codec = codec
        self.currency = currency

    def dispatch(self, payouts: Iterable[Payout]) -> DispatchReport:
        report = DispatchReport(currency=self.currency)

        for payout in payouts:
            if payout.amount <= 0:
                continue
            report.outcomes.append(self._send(payout))

        if report.failed:
            logger.error(
                f"{len(report.failed)} of {len(report.outcomes)} payout transfers failed; "
                "manual reconciliation required"
            )
        logger.info(
            f"Dispatched {len(report.succeeded)} transfers totalling "
            f"{report.total_sent} {self.currency}"
        )
        return report

    def _send(self, payout: Payout) -> DispatchOutcome:
        try:
            address = self.codec.decode(payout.bettor)
            logger.info(f"Transferring {payout.amount} {self.currency} to {address}")
            receipt = self.custody.transfer(address, payout.amount, self.currency)
        except CustodyError as e:
            logger.error(
                f"Payout of {payout.amount} {self.currency} to {payout.bettor} failed: {e}"
            )
            return DispatchOutcome(
                bettor=payout.bettor,
                amount=payout.amount,
                success=False,
                error=f"{type(e).__name__}: {e}",
            )
        except Exception as e:
            logger.error(
                f"Unexpected error paying {payout.amount} {self.currency} to {payout.bettor}: {e}",
                exc_info=True,
            )
            return DispatchOutcome(
                bettor=payout.bettor,
                amount=payout.amount,
                success=False,
                error=f"{type(e).__name__}: {e}" if str(e) else type(e).__name__,
            )

        return DispatchOutcome(
            bettor=payout.bettor,
            amount=payout.amount,
            success=True,
            address=receipt.address,
            transfer_id=receipt.transfer_id,
            fee=receipt.fee,
        )
