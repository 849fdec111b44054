from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from auctionledger.formatting import format_money
from auctionledger.models import MAX_AMOUNT, BidRecord, TradeRecord

from .team import TeamResponse


class BidRequest(BaseModel):
    team_id: str = Field(..., min_length=1)
    player_name: str = Field(..., min_length=1)
    # range checks happen in the ledger so rejections carry its message
    amount: int
    points: int | None = Field(default=None, ge=0, le=MAX_AMOUNT)


class TradeRequest(BaseModel):
    from_team_id: str = Field(..., min_length=1)
    to_team_id: str = Field(..., min_length=1)
    player_name: str = Field(..., min_length=1)
    amount: int


class BidRecordResponse(BaseModel):
    record_id: str
    team_name: str
    player_name: str
    amount: int
    amount_display: str
    timestamp: datetime

    @classmethod
    def from_record(cls, record: BidRecord) -> "BidRecordResponse":
        return cls(
            record_id=record.record_id,
            team_name=record.team_name,
            player_name=record.player_name,
            amount=record.amount,
            amount_display=format_money(record.amount),
            timestamp=record.timestamp,
        )


class TradeRecordResponse(BaseModel):
    record_id: str
    from_team: str
    to_team: str
    player: str
    amount: int
    amount_display: str
    points: int
    timestamp: datetime

    @classmethod
    def from_record(cls, record: TradeRecord) -> "TradeRecordResponse":
        return cls(
            record_id=record.record_id,
            from_team=record.from_team,
            to_team=record.to_team,
            player=record.player,
            amount=record.amount,
            amount_display=format_money(record.amount),
            points=record.points,
            timestamp=record.timestamp,
        )


class BidResponse(BaseModel):
    team: TeamResponse
    record: BidRecordResponse


class TradeResponse(BaseModel):
    seller: TeamResponse
    buyer: TeamResponse
    record: TradeRecordResponse


class LeaderboardEntryResponse(BaseModel):
    rank: int
    team: TeamResponse
    bids: List[BidRecordResponse]
