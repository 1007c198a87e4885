"""Stake ledger: one active wager per bettor, serialized as a JSON blob."""

import json
import logging

from pydantic import BaseModel, Field, StrictInt, ValidationError

from .exceptions import CorruptState
from .models import Wager

logger = logging.getLogger(__name__)

EMPTY_BLOB = ""


class _StoredWager(BaseModel):
    amount: StrictInt = Field(ge=0)
    outcome: str = Field(min_length=1)


class _StoredLedger(BaseModel):
    map: dict[str, _StoredWager] = Field(default_factory=dict)


class StakeLedger:
    """Mapping of bettor identity to that bettor's single wager."""

    def __init__(self, wagers: dict[str, Wager] | None = None):
        self._wagers: dict[str, Wager] = dict(wagers or {})

    def record_bet(self, bettor: str, outcome: str, amount: int) -> Wager | None:
        """Insert or overwrite the bettor's wager. Returns the replaced wager."""
        wager = Wager(bettor=bettor, outcome=outcome, amount=amount)
        previous = self._wagers.get(bettor)
        self._wagers[bettor] = wager

        if previous is not None:
            logger.info(
                f"Replaced wager for {bettor}: {previous.amount} on "
                f"{previous.outcome!r} -> {amount} on {outcome!r}"
            )
        return previous

    def all_wagers(self) -> list[Wager]:
        """All recorded wagers, sorted by bettor identity."""
        return [self._wagers[b] for b in sorted(self._wagers)]

    def get(self, bettor: str) -> Wager | None:
        return self._wagers.get(bettor)

    @property
    def total_pool(self) -> int:
        return sum(w.amount for w in self._wagers.values())

    def __len__(self) -> int:
        return len(self._wagers)

    def __contains__(self, bettor: object) -> bool:
        return bettor in self._wagers

    def encode(self) -> str:
        """Serialize to the persisted JSON blob (empty sentinel when no wagers)."""
        if not self._wagers:
            return EMPTY_BLOB

        stored = _StoredLedger(
            map={
                bettor: _StoredWager(amount=w.amount, outcome=w.outcome)
                for bettor, w in sorted(self._wagers.items())
            }
        )
        return json.dumps(stored.model_dump(), separators=(",", ":"))

    @classmethod
    def decode(cls, blob: str | None) -> "StakeLedger":
        """Rebuild a ledger from its persisted blob.

        Raises:
            CorruptState: a non-empty blob is not a valid wager map
        """
        if blob is None or blob == EMPTY_BLOB:
            return cls()

        try:
            stored = _StoredLedger.model_validate_json(blob)
        except ValidationError as e:
            logger.error(f"Corrupted wager ledger: {e}")
            raise CorruptState(f"Persisted wager ledger failed to decode: {e}") from e

        wagers: dict[str, Wager] = {}
        for bettor, record in stored.map.items():
            if not bettor:
                raise CorruptState("Persisted wager ledger contains an empty bettor identity")
            wagers[bettor] = Wager(bettor=bettor, amount=record.amount, outcome=record.outcome)

        return cls(wagers)
