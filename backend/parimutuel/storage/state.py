"""Market state persistence with atomic writes to data/state.yaml."""

import logging
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import BaseModel, Field, ValidationError

from parimutuel.config import get_settings
from parimutuel.market.exceptions import CorruptState

logger = logging.getLogger(__name__)


# ============================================================================
# Pydantic Models
# ============================================================================


class StrandedFunds(BaseModel):
    """Funds received with a bet that was not recorded."""

    bettor: str
    amount: int
    outcome: str
    received_at: int  # Epoch seconds of the rejected call


class SettlementSummary(BaseModel):
    """What the market paid out when it closed."""

    winning_outcome: str
    policy: str
    total_pool: int
    totals: dict[str, int] = Field(default_factory=dict)
    payouts: dict[str, int] = Field(default_factory=dict)
    failed: dict[str, int] = Field(
        default_factory=dict,
        description="Payouts whose transfer failed and need manual reconciliation",
    )
    closed_at: int


class MarketState(BaseModel):
    """Complete market state - matches data/state.yaml schema."""

    last_updated: datetime | None = None
    initialized: bool = False
    creator: str = ""
    deadline: int = 0  # Epoch seconds, 0 = no deadline
    closed: bool = False
    wagers: str = ""  # Serialized stake ledger, "" = no wagers
    stranded: list[StrandedFunds] = Field(default_factory=list)
    settlement: SettlementSummary | None = None


# ============================================================================
# Stores
# ============================================================================


class StateStore(Protocol):
    def load(self) -> MarketState: ...

    def save(self, state: MarketState) -> None: ...


def get_data_dir() -> Path:
    """Get the data directory path from settings."""
    settings = get_settings()
    data_dir = settings.data_dir

    if not data_dir.exists():
        raise FileNotFoundError(
            f"Data directory not found: {data_dir}. "
            "Run 'python -m parimutuel init' to create it."
        )

    return data_dir


class MemoryStateStore:
    """Keeps state in memory; saves are copies so callers cannot mutate it."""

    def __init__(self, state: MarketState | None = None):
        self._state = (state or MarketState()).model_copy(deep=True)
        self.saves = 0

    def load(self) -> MarketState:
        return self._state.model_copy(deep=True)

    def save(self, state: MarketState) -> None:
        state.last_updated = datetime.now(timezone.utc)
        self._state = state.model_copy(deep=True)
        self.saves += 1


class YamlStateStore:
    """Stores state in a YAML file."""

    def __init__(self, path: Path | None = None):
        self.path = path or get_data_dir() / "state.yaml"

    def load(self) -> MarketState:
        """Load market state, returning a fresh state if the file is missing."""
        if not self.path.exists():
            logger.info(f"State file not found: {self.path}. Returning default empty state.")
            return MarketState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Corrupted YAML in state file: {e}")
            raise CorruptState(f"State file {self.path} is not valid YAML: {e}") from e

        if not raw_data:
            logger.warning(f"Empty state file: {self.path}. Returning default state.")
            return MarketState()

        try:
            state = MarketState(**raw_data)
        except (TypeError, ValidationError) as e:
            logger.error(f"Invalid state file {self.path}: {e}")
            raise CorruptState(f"State file {self.path} does not match the market schema: {e}") from e

        logger.debug(f"Loaded state from {self.path}")
        return state

    def save(self, state: MarketState) -> None:
        """Atomically save market state.

        Uses a tempfile -> rename so a crash mid-write leaves the previous
        state.yaml intact.
        """
        state.last_updated = datetime.now(timezone.utc)
        state_dict = state.model_dump(mode="json")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self.path.parent,
                delete=False,
                suffix=".yaml",
                encoding="utf-8",
            ) as temp_file:
                yaml.dump(
                    state_dict,
                    temp_file,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                )
                temp_path = Path(temp_file.name)

            shutil.move(str(temp_path), str(self.path))
            logger.debug(f"Saved state to {self.path}")

        except Exception as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            logger.error(f"Failed to save state: {e}")
            raise
