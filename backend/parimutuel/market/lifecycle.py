"""
Market lifecycle: uninitialized -> open -> closed.

Every public call runs under one lock and validates everything before the
first save. The creator identity is fixed by initialize and persisted with
the market; only that identity may close it, whichever lifecycle instance
is asked to.
"""

import logging
import threading

from parimutuel.config import MarketSettings
from parimutuel.services.custody import AddressDecodeError
from parimutuel.storage.files import PayoutJournal
from parimutuel.storage.state import MarketState, SettlementSummary, StateStore, StrandedFunds

from .clock import format_deadline, is_betting_open, is_past_deadline, parse_deadline
from .dispatcher import PayoutDispatcher
from .exceptions import (
    AlreadyClosed,
    AlreadyInitialized,
    BettingClosed,
    InvalidBettor,
    InvalidStake,
    MissingParameter,
    NotInitialized,
    TooEarly,
    Unauthorized,
)
from .ledger import StakeLedger
from .models import BetResult, MarketStatus, SettlementReport, Wager
from .settlement import SettlementEngine, aggregate_totals

logger = logging.getLogger(__name__)


class MarketLifecycle:
    """Gates initialize / place_bet / close_market for a single event."""

    def __init__(
        self,
        creator: str,
        store: StateStore,
        dispatcher: PayoutDispatcher,
        engine: SettlementEngine | None = None,
        settings: MarketSettings | None = None,
        journal: PayoutJournal | None = None,
    ):
        if not creator:
            raise ValueError("Market creator identity is required")

        self.creator = creator
        self.store = store
        self.dispatcher = dispatcher
        self.settings = settings or MarketSettings(creator=creator)
        self.engine = engine or SettlementEngine(self.settings.rounding_policy)
        self.journal = journal
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    @property
    def status(self) -> MarketStatus:
        with self._lock:
            return self._status(self.store.load())

    def snapshot(self) -> MarketState:
        with self._lock:
            return self.store.load()

    def wagers(self) -> list[Wager]:
        with self._lock:
            return StakeLedger.decode(self.store.load().wagers).all_wagers()

    def outcome_totals(self) -> dict[str, int]:
        return aggregate_totals(self.wagers())

    @staticmethod
    def _status(state: MarketState) -> MarketStatus:
        if state.closed:
            return "closed"
        if state.initialized:
            return "open"
        return "uninitialized"

    def _require_creator(self, caller: str, action: str, state: MarketState) -> None:
        creator = state.creator if state.initialized and state.creator else self.creator
        if caller != creator:
            raise Unauthorized(
                f"Not authorised to {action} - only the market creator is allowed to do this"
            )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def initialize(self, caller: str, deadline: str | None = None) -> MarketState:
        """Open the market, optionally with a 'YYYY-MM-DD HH:MM' UTC betting deadline.

        Raises:
            Unauthorized: caller is not the creator
            BadDeadlineFormat: deadline is malformed
            AlreadyInitialized: market was initialized before
        """
        with self._lock:
            state = self.store.load()
            self._require_creator(caller, "initialize the market", state)
            deadline_epoch = parse_deadline(deadline)

            if state.initialized:
                raise AlreadyInitialized(
                    f"Market is already {self._status(state)}; initialization is allowed once"
                )

            state.initialized = True
            state.creator = self.creator
            state.deadline = deadline_epoch
            state.closed = False
            self.store.save(state)

            if deadline_epoch:
                logger.info(f"Market initialized; bets accepted until {format_deadline(deadline_epoch)}")
            else:
                logger.info("Market initialized without a betting deadline")
            return state

    def place_bet(self, caller: str, outcome: str | None, amount: int, now: int) -> BetResult:
        """Record or replace the caller's wager.

        The amount is the value the custody collaborator received with the
        call and is taken as given. A bet outside the betting window is not
        recorded; its funds are noted as stranded and the result carries the
        BettingClosed code instead of raising.

        Raises:
            MissingParameter: bettor identity or outcome label is missing
            InvalidBettor: bettor identity is not a valid payout address
            InvalidStake: amount is negative or above the configured maximum
        """
        with self._lock:
            if not caller:
                raise MissingParameter("Bettor identity is required")
            if outcome is None or not outcome.strip():
                raise MissingParameter("Bet outcome label is required")
            if amount < 0:
                raise InvalidStake(f"Stake must be non-negative, got {amount}")
            if amount > self.settings.max_stake:
                raise InvalidStake(f"Stake {amount} exceeds the maximum of {self.settings.max_stake}")
            try:
                self.dispatcher.codec.decode(caller)
            except AddressDecodeError as e:
                raise InvalidBettor(f"Bettor {caller!r} cannot receive payouts: {e}") from e

            state = self.store.load()
            try:
                self._check_betting_open(state, now)
            except BettingClosed as e:
                logger.warning(f"Bet from {caller} on {outcome!r} not recorded: {e}")
                state.stranded.append(
                    StrandedFunds(bettor=caller, amount=amount, outcome=outcome, received_at=now)
                )
                self.store.save(state)
                return BetResult(
                    accepted=False,
                    bettor=caller,
                    outcome=outcome,
                    amount=amount,
                    code=e.code,
                    message=e.message,
                )

            ledger = StakeLedger.decode(state.wagers)
            replaced = ledger.record_bet(caller, outcome, amount)
            state.wagers = ledger.encode()
            self.store.save(state)

            logger.info(f"Bet placed: {caller} staked {amount} on {outcome!r}")
            return BetResult(
                accepted=True,
                bettor=caller,
                outcome=outcome,
                amount=amount,
                replaced=replaced,
            )

    def close_market(self, caller: str, winning_outcome: str | None, now: int) -> SettlementReport:
        """Settle the market and pay winners.

        All checks and the settlement computation run before any state is
        written. The closed flag is persisted before transfers are requested
        so a crash mid-dispatch can never lead to paying out twice.

        Raises:
            Unauthorized: caller is not the creator
            MissingParameter: winning outcome is missing or blank
            NotInitialized: market was never initialized
            AlreadyClosed: market was closed before
            TooEarly: betting deadline has not passed
            CorruptState: persisted wagers failed to decode
            NoBets: no wagers were recorded (market stays open)
        """
        with self._lock:
            state = self.store.load()
            self._require_creator(caller, "close the market", state)
            if winning_outcome is None or not winning_outcome.strip():
                raise MissingParameter("Winning outcome label is required")

            if not state.initialized:
                raise NotInitialized("Market must be initialized before it can be closed")
            if state.closed:
                raise AlreadyClosed("The prediction market was already closed")
            if not is_past_deadline(now, state.deadline):
                raise TooEarly(
                    f"Market can only be closed after the betting deadline "
                    f"({format_deadline(state.deadline)}) has passed"
                )

            ledger = StakeLedger.decode(state.wagers)
            logger.info(f"Closing market; winning outcome is {winning_outcome!r}")
            settlement = self.engine.settle(ledger.all_wagers(), winning_outcome)

            state.closed = True
            state.settlement = SettlementSummary(
                winning_outcome=settlement.winning_outcome,
                policy=settlement.policy,
                total_pool=settlement.total_pool,
                totals=settlement.totals,
                payouts={p.bettor: p.amount for p in settlement.payouts},
                closed_at=now,
            )
            self.store.save(state)

            dispatch = self.dispatcher.dispatch(settlement.payouts)
            if dispatch.failed:
                state.settlement.failed = {o.bettor: o.amount for o in dispatch.failed}
                self.store.save(state)
            if self.journal is not None:
                try:
                    self.journal.record(winning_outcome, dispatch.outcomes)
                except Exception as e:
                    logger.error(f"Payout journal write failed after market closed: {e}")

            return SettlementReport(settlement=settlement, dispatch=dispatch, closed_at=now)

    def _check_betting_open(self, state: MarketState, now: int) -> None:
        if not state.initialized:
            raise BettingClosed("Market has not been initialized")
        if state.closed:
            raise BettingClosed("Market is closed")
        if not is_betting_open(now, state.deadline):
            raise BettingClosed(
                f"Bet was not provided on time (deadline {format_deadline(state.deadline)})"
            )
