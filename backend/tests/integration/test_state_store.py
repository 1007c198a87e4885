"""Integration tests for YAML market state and the payout journal."""

from datetime import datetime, timezone

import pytest

from parimutuel.market import CorruptState, DispatchOutcome, StakeLedger
from parimutuel.storage import (
    JsonlPayoutJournal,
    MarketState,
    StrandedFunds,
    YamlStateStore,
)


def test_missing_file_returns_default_state(tmp_path):
    state = YamlStateStore(tmp_path / "state.yaml").load()

    assert state == MarketState()
    assert state.wagers == ""


def test_state_survives_restart(tmp_path):
    path = tmp_path / "state.yaml"
    ledger = StakeLedger()
    ledger.record_bet("Ada", "yes", 100)
    ledger.record_bet("Bob", "no", 300)

    YamlStateStore(path).save(
        MarketState(
            initialized=True,
            creator="Creator",
            deadline=1_609_466_400,
            wagers=ledger.encode(),
            stranded=[StrandedFunds(bettor="Cora", amount=5, outcome="yes", received_at=1)],
        )
    )
    restored = YamlStateStore(path).load()

    assert restored.initialized is True
    assert restored.closed is False
    assert restored.deadline == 1_609_466_400
    assert restored.last_updated is not None
    assert StakeLedger.decode(restored.wagers).all_wagers() == ledger.all_wagers()
    assert restored.stranded[0].bettor == "Cora"
    assert [p.name for p in tmp_path.iterdir()] == ["state.yaml"]


def test_closed_flag_is_a_boolean(tmp_path):
    path = tmp_path / "state.yaml"
    YamlStateStore(path).save(MarketState(initialized=True, closed=True))

    assert "closed: true" in path.read_text(encoding="utf-8")


def test_invalid_yaml_is_corrupt_state(tmp_path):
    path = tmp_path / "state.yaml"
    path.write_text("initialized: [unclosed\n", encoding="utf-8")

    with pytest.raises(CorruptState):
        YamlStateStore(path).load()


def test_schema_mismatch_is_corrupt_state(tmp_path):
    path = tmp_path / "state.yaml"
    path.write_text("deadline: soon\n", encoding="utf-8")

    with pytest.raises(CorruptState):
        YamlStateStore(path).load()


def test_journal_appends_jsonl(tmp_path):
    journal = JsonlPayoutJournal(tmp_path / "payouts")
    outcomes = [
        DispatchOutcome(bettor="Ada", amount=250, success=True, transfer_id="paper_1"),
        DispatchOutcome(bettor="Bob", amount=750, success=False, error="InsufficientFundsError: empty"),
    ]

    journal.record("yes", outcomes)
    journal.record("yes", [])

    today = datetime.now(timezone.utc)
    lines = journal.path_for(today).read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert '"winning_outcome": "yes"' in lines[0]
    assert [o.bettor for o in journal.read(today) if not o.success] == ["Bob"]


def test_default_path_comes_from_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("PARIMUTUEL_DATA_DIR", str(tmp_path))

    assert YamlStateStore().path == tmp_path.resolve() / "state.yaml"


def test_missing_data_dir_is_reported(tmp_path, monkeypatch):
    monkeypatch.setenv("PARIMUTUEL_DATA_DIR", str(tmp_path / "absent"))

    with pytest.raises(FileNotFoundError):
        YamlStateStore()
