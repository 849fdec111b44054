"""Canonical records for teams, rosters and the audit log."""

from .audit import BidRecord, TradeRecord
from .team import MAX_AMOUNT, OwnedPlayer, TeamRecord

__all__ = [
    "MAX_AMOUNT",
    "BidRecord",
    "OwnedPlayer",
    "TeamRecord",
    "TradeRecord",
]
