"""Pydantic models for API I/O."""

from .ledger import (
    BidRecordResponse,
    BidRequest,
    BidResponse,
    LeaderboardEntryResponse,
    TradeRecordResponse,
    TradeRequest,
    TradeResponse,
)
from .team import OwnedPlayerResponse, TeamCreateRequest, TeamResponse, TeamUpdateRequest

__all__ = [
    "BidRecordResponse",
    "BidRequest",
    "BidResponse",
    "LeaderboardEntryResponse",
    "OwnedPlayerResponse",
    "TeamCreateRequest",
    "TeamResponse",
    "TeamUpdateRequest",
    "TradeRecordResponse",
    "TradeRequest",
    "TradeResponse",
]
