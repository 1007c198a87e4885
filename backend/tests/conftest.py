"""Shared fixtures for market tests."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from parimutuel.config import MarketSettings, get_settings
from parimutuel.market import PayoutDispatcher, SettlementEngine
from parimutuel.market.lifecycle import MarketLifecycle
from parimutuel.services.custody import Base58AddressCodec, CustodyConfig, PaperCustodyClient
from parimutuel.storage import MemoryPayoutJournal, MemoryStateStore

CREATOR = "Creator"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def custody() -> PaperCustodyClient:
    return PaperCustodyClient(CustodyConfig(transfer_fee=0))


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def journal() -> MemoryPayoutJournal:
    return MemoryPayoutJournal()


@pytest.fixture
def make_market(store, custody, journal):
    def _make(policy: str = "remainder_to_last", max_stake: int = 2_147_483_647) -> MarketLifecycle:
        settings = MarketSettings(creator=CREATOR, rounding_policy=policy, max_stake=max_stake)
        dispatcher = PayoutDispatcher(
            custody=custody,
            codec=Base58AddressCodec(custody.config),
            currency=custody.config.currency,
        )
        return MarketLifecycle(
            creator=CREATOR,
            store=store,
            dispatcher=dispatcher,
            engine=SettlementEngine(policy),
            settings=settings,
            journal=journal,
        )

    return _make


@pytest.fixture
def market(make_market) -> MarketLifecycle:
    return make_market()
