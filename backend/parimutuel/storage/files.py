"""Append-only JSONL journal of payout transfers.

One file per day under data/payouts/ so failed transfers can be reconciled
by an operator.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from parimutuel.market.models import DispatchOutcome

logger = logging.getLogger(__name__)


class PayoutJournal(Protocol):
    def record(self, winning_outcome: str, outcomes: list[DispatchOutcome]) -> None: ...


def _ensure_dir(base_dir: Path) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir


class JsonlPayoutJournal:
    """Writes one JSON line per transfer attempt."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def path_for(self, when: datetime) -> Path:
        return self.base_dir / f"{when.strftime('%Y-%m-%d')}.jsonl"

    def record(self, winning_outcome: str, outcomes: list[DispatchOutcome]) -> None:
        if not outcomes:
            return

        journal_path = self.path_for(datetime.now(timezone.utc))
        _ensure_dir(journal_path.parent)
        try:
            with open(journal_path, "a", encoding="utf-8") as f:
                for outcome in outcomes:
                    entry = {"winning_outcome": winning_outcome, **outcome.model_dump(mode="json")}
                    f.write(json.dumps(entry) + "\n")
            logger.info(f"Journaled {len(outcomes)} payout transfers to {journal_path}")
        except Exception as e:
            logger.error(f"Failed to journal payouts to {journal_path}: {e}")
            raise

    def read(self, day: datetime) -> list[DispatchOutcome]:
        """Read back one day's journal."""
        journal_path = self.path_for(day)
        if not journal_path.exists():
            return []

        outcomes = []
        for line in journal_path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            data = json.loads(line)
            data.pop("winning_outcome", None)
            outcomes.append(DispatchOutcome(**data))
        return outcomes


class MemoryPayoutJournal:
    """Keeps journal entries in memory."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, DispatchOutcome]] = []

    def record(self, winning_outcome: str, outcomes: list[DispatchOutcome]) -> None:
        self.entries.extend((winning_outcome, o) for o in outcomes)
