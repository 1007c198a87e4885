"""
Pari-mutuel settlement.

Every wager on the winning outcome receives a share of the whole pool
proportional to its stake on that outcome:

    payout = floor(amount / winning_total * total_pool)

Rounding policies:
- remainder_to_last: exact integer floor per winner; the undistributed
  remainder goes to the last staked winner in bettor order, so the pool is paid out
  exactly.
- floor: exact integer floor per winner; the remainder stays in the pool.
- legacy_float: single-precision float share truncated to an integer. Kept
  for compatibility with markets settled that way; it can drift by a unit
  or more on large pools.
"""

import logging
import struct
from collections.abc import Iterable

from parimutuel.config import RoundingPolicy

from .exceptions import MissingParameter, NoBets
from .models import Payout, Settlement, Wager

logger = logging.getLogger(__name__)


def _f32(value: float) -> float:
    """Round a float to IEEE-754 binary32."""
    return struct.unpack("f", struct.pack("f", value))[0]


def aggregate_totals(wagers: Iterable[Wager]) -> dict[str, int]:
    """Total stake per outcome label."""
    totals: dict[str, int] = {}
    for wager in wagers:
        totals[wager.outcome] = totals.get(wager.outcome, 0) + wager.amount
    return totals


def proportional_share(amount: int, winning_total: int, total_pool: int) -> int:
    """Exact floor(amount * total_pool / winning_total)."""
    return (amount * total_pool) // winning_total


def legacy_float_share(amount: int, winning_total: int, total_pool: int) -> int:
    """Share computed in single-precision floats, then truncated."""
    share = _f32(_f32(float(amount)) / _f32(float(winning_total)))
    return int(_f32(share * _f32(float(total_pool))))


class SettlementEngine:
    """Computes per-bettor payouts from a finalized ledger."""

    def __init__(self, policy: RoundingPolicy = "remainder_to_last"):
        if policy not in ("remainder_to_last", "floor", "legacy_float"):
            raise ValueError(f"Unknown rounding policy: {policy}")
        self.policy = policy

    def settle(self, wagers: Iterable[Wager], winning_outcome: str | None) -> Settlement:
        """Settle all wagers against the winning outcome label.

        Raises:
            MissingParameter: winning outcome is missing or blank
            NoBets: no wagers were recorded
        """
        if winning_outcome is None or not winning_outcome.strip():
            raise MissingParameter("Winning outcome label is required")

        ordered = sorted(wagers, key=lambda w: w.bettor)
        if not ordered:
            raise NoBets("At least one bet is required to settle the market")

        totals = aggregate_totals(ordered)
        total_pool = sum(totals.values())
        winning_total = totals.get(winning_outcome, 0)

        for outcome, amount in sorted(totals.items()):
            logger.info(f"Total staked on {outcome!r}: {amount}")
        logger.info(f"Total pool over all outcomes: {total_pool}")

        settlement = Settlement(
            winning_outcome=winning_outcome,
            policy=self.policy,
            total_pool=total_pool,
            totals=totals,
            winning_total=winning_total,
        )

        if winning_total <= 0:
            logger.warning(
                f"No stake on winning outcome {winning_outcome!r}; "
                f"pool of {total_pool} is retained"
            )
            return settlement

        winners = [w for w in ordered if w.outcome == winning_outcome]
        for wager in ordered:
            if wager.outcome != winning_outcome:
                logger.info(f"{wager.bettor} bet {wager.amount} on {wager.outcome!r}: not a win")

        amounts = self._distribute(winners, winning_total, total_pool)

        for wager, amount in zip(winners, amounts):
            logger.info(
                f"{wager.bettor} bet {wager.amount} on {wager.outcome!r}: WIN, "
                f"payout {amount} (winning total {winning_total}, pool {total_pool})"
            )
            if amount > 0:
                settlement.payouts.append(Payout(bettor=wager.bettor, amount=amount))

        logger.info(
            f"Settled {len(settlement.payouts)} payouts totalling {settlement.total_paid} "
            f"({settlement.retained} retained, policy={self.policy})"
        )
        return settlement

    def _distribute(self, winners: list[Wager], winning_total: int, total_pool: int) -> list[int]:
        if self.policy == "legacy_float":
            return [legacy_float_share(w.amount, winning_total, total_pool) for w in winners]

        amounts = [proportional_share(w.amount, winning_total, total_pool) for w in winners]
        if self.policy == "remainder_to_last":
            # Zero-stake winners never absorb the remainder.
            last = max(i for i, w in enumerate(winners) if w.amount > 0)
            amounts[last] += total_pool - sum(amounts)
        return amounts
