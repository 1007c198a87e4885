"""Wires a MarketLifecycle from Settings."""

import logging

from parimutuel.config import Settings
from parimutuel.services.custody import (
    Base58AddressCodec,
    CustodyConfig,
    PaperCustodyClient,
    create_custody_client,
)
from parimutuel.storage import JsonlPayoutJournal, MarketState, StateStore, YamlStateStore

from .dispatcher import PayoutDispatcher
from .ledger import StakeLedger
from .lifecycle import MarketLifecycle
from .settlement import SettlementEngine

logger = logging.getLogger(__name__)


def custody_config_from(settings: Settings) -> CustodyConfig:
    return CustodyConfig(
        paper_mode=settings.custody.paper_mode,
        currency=settings.custody.currency,
        transfer_fee=settings.custody.transfer_fee,
        initial_treasury=settings.custody.initial_treasury,
    )


def funds_held(state: MarketState) -> int:
    """Funds the market has received and not yet paid out."""
    received = StakeLedger.decode(state.wagers).total_pool + sum(s.amount for s in state.stranded)
    paid = 0
    if state.settlement:
        paid = sum(state.settlement.payouts.values()) - sum(state.settlement.failed.values())
    return received - paid


def create_market(
    settings: Settings,
    store: StateStore | None = None,
    custody: PaperCustodyClient | None = None,
) -> tuple[MarketLifecycle, PaperCustodyClient]:
    """Create the lifecycle and its paper custody client for the configured data dir."""
    if not settings.market.creator:
        raise ValueError(
            "market.creator is not configured. Set it in data/config.yaml "
            "or PARIMUTUEL_MARKET__CREATOR."
        )

    store = store or YamlStateStore(settings.data_dir / "state.yaml")
    config = custody_config_from(settings)
    if custody is None:
        treasury = config.initial_treasury + funds_held(store.load())
        custody = create_custody_client(config, treasury=treasury)

    dispatcher = PayoutDispatcher(
        custody=custody,
        codec=Base58AddressCodec(config),
        currency=config.currency,
    )
    lifecycle = MarketLifecycle(
        creator=settings.market.creator,
        store=store,
        dispatcher=dispatcher,
        engine=SettlementEngine(settings.market.rounding_policy),
        settings=settings.market,
        journal=JsonlPayoutJournal(settings.data_dir / "payouts"),
    )
    logger.debug(f"Created market for creator {settings.market.creator}")
    return lifecycle, custody
