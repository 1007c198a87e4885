"""Unit tests for the stake ledger."""

import pytest

from parimutuel.market import CorruptState, StakeLedger


def test_last_write_wins():
    ledger = StakeLedger()
    assert ledger.record_bet("Bob", "yes", 100) is None
    replaced = ledger.record_bet("Bob", "no", 40)

    assert replaced is not None
    assert replaced.amount == 100
    assert len(ledger) == 1
    assert ledger.get("Bob").outcome == "no"
    assert ledger.total_pool == 40


def test_one_wager_per_distinct_bettor():
    ledger = StakeLedger()
    bets = [("Ann", "yes", 5), ("Bob", "no", 7), ("Ann", "no", 9), ("Cy", "yes", 1), ("Bob", "no", 2)]
    for bettor, outcome, amount in bets:
        ledger.record_bet(bettor, outcome, amount)

    wagers = ledger.all_wagers()
    assert [w.bettor for w in wagers] == ["Ann", "Bob", "Cy"]
    assert len(wagers) == len({b for b, _, _ in bets})
    assert ledger.total_pool == 9 + 2 + 1


def test_encode_decode_preserves_wagers():
    ledger = StakeLedger()
    ledger.record_bet("Ann", "yes", 100)
    ledger.record_bet("Bob", "no", 0)

    restored = StakeLedger.decode(ledger.encode())

    assert restored.all_wagers() == ledger.all_wagers()


def test_empty_ledger_uses_sentinel():
    assert StakeLedger().encode() == ""
    assert len(StakeLedger.decode("")) == 0
    assert len(StakeLedger.decode(None)) == 0


@pytest.mark.parametrize(
    "blob",
    [
        "not json",
        "[]",
        '{"map": {"Ann": {"amount": -1, "outcome": "yes"}}}',
        '{"map": {"Ann": {"amount": "100", "outcome": "yes"}}}',
        '{"map": {"Ann": {"amount": 1.5, "outcome": "yes"}}}',
        '{"map": {"Ann": {"amount": 1, "outcome": ""}}}',
        '{"map": {"": {"amount": 1, "outcome": "yes"}}}',
    ],
)
def test_corrupt_blob_is_fatal(blob):
    with pytest.raises(CorruptState):
        StakeLedger.decode(blob)
