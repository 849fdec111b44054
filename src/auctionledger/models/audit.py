"""Immutable audit log entries."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class BidRecord(BaseModel):
    """One successful auction bid. The most recent one per player decides trade rights."""

    record_id: str = Field(default_factory=_new_id)
    team_name: str
    player_name: str
    amount: int = Field(..., ge=0)
    timestamp: datetime = Field(default_factory=_now)

    model_config = ConfigDict(frozen=True)


class TradeRecord(BaseModel):
    record_id: str = Field(default_factory=_new_id)
    from_team: str
    to_team: str
    player: str
    amount: int = Field(..., ge=0)
    points: int = 0
    timestamp: datetime = Field(default_factory=_now)

    model_config = ConfigDict(frozen=True)
