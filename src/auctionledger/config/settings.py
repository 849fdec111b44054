"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

_DB_PATH_ENV = "AUCTION_DB_PATH"
_STARTING_CASH_ENV = "AUCTION_STARTING_CASH"
_PLAYERS_CSV_ENV = "AUCTION_PLAYERS_CSV"
_RECENT_TRADES_ENV = "AUCTION_RECENT_TRADES"

DEFAULT_STARTING_CASH = 100_000_000
DEFAULT_RECENT_TRADES = 10
DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "auctionledger.sqlite"


@dataclass(frozen=True)
class Settings:
    db_path: Path | str
    starting_cash: int = DEFAULT_STARTING_CASH
    players_csv: Optional[Path] = None
    recent_trades: int = DEFAULT_RECENT_TRADES


def _env_int(env: Mapping[str, str], name: str, default: int, *, min_value: int | None = None) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s=%d is below %d; using %d", name, value, min_value, min_value)
        value = min_value
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env

    raw_db = env.get(_DB_PATH_ENV)
    db_path: Path | str
    if raw_db and raw_db.startswith("file:"):
        db_path = raw_db
    elif raw_db:
        db_path = Path(raw_db)
    else:
        db_path = DEFAULT_DB_PATH

    raw_csv = env.get(_PLAYERS_CSV_ENV)
    players_csv = Path(raw_csv) if raw_csv else None

    return Settings(
        db_path=db_path,
        starting_cash=_env_int(env, _STARTING_CASH_ENV, DEFAULT_STARTING_CASH, min_value=0),
        players_csv=players_csv,
        recent_trades=_env_int(env, _RECENT_TRADES_ENV, DEFAULT_RECENT_TRADES, min_value=1),
    )
