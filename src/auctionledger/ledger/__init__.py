"""Ledger transfer core: bid application, trade validation and execution."""

from .bid import BidOutcome, apply_bid, validate_bid
from .service import LedgerService
from .trade import (
    TradeOutcome,
    ValidatedTrade,
    apply_trade,
    check_trade_request,
    find_original_bid,
    validate_trade,
)

__all__ = [
    "BidOutcome",
    "LedgerService",
    "TradeOutcome",
    "ValidatedTrade",
    "apply_bid",
    "apply_trade",
    "check_trade_request",
    "find_original_bid",
    "validate_bid",
    "validate_trade",
]
