"""Trade validation and the two-party cash/player transfer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from auctionledger.errors import (
    InsufficientFundsError,
    InvalidAmountError,
    NotOriginalOwnerError,
    PlayerNotFoundError,
    SelfTradeError,
    UnverifiedOwnershipError,
)
from auctionledger.models import BidRecord, OwnedPlayer, TeamRecord, TradeRecord


@dataclass(frozen=True)
class ValidatedTrade:
    seller: TeamRecord
    buyer: TeamRecord
    player: OwnedPlayer
    amount: int


@dataclass(frozen=True)
class TradeOutcome:
    seller: TeamRecord
    buyer: TeamRecord
    record: TradeRecord


def is_valid_amount(amount: object) -> bool:
    return isinstance(amount, int) and not isinstance(amount, bool) and amount >= 0


def check_trade_request(seller_id: str, buyer_id: str, amount: object) -> None:
    """Checks that need no stored data: distinct teams and a usable amount."""
    if seller_id == buyer_id:
        raise SelfTradeError("A team cannot trade with itself.")
    if not is_valid_amount(amount):
        raise InvalidAmountError("Please enter a valid, non-negative trade amount.")


def find_original_bid(player_name: str, bid_history: Iterable[BidRecord]) -> Optional[BidRecord]:
    """Return the first bid naming ``player_name``; ``bid_history`` is most recent first."""
    for bid in bid_history:
        if bid.player_name == player_name:
            return bid
    return None


def validate_trade(
    seller: TeamRecord,
    buyer: TeamRecord,
    player_name: str,
    amount: int,
    bid_history: Iterable[BidRecord],
) -> ValidatedTrade:
    """Validate a proposed trade, raising on the first failed check.

    Checks run in a fixed order so the reported reason is deterministic:
    self trade, amount, buyer funds, seller roster, then auction provenance.
    Only the team that won the player at auction may sell them, even after the
    player has moved on through an earlier trade.
    """
    check_trade_request(seller.team_id, buyer.team_id, amount)
    if buyer.cash < amount:
        raise InsufficientFundsError(f"{buyer.name} does not have enough cash for this trade.")

    player = seller.find_player(player_name)
    if player is None:
        raise PlayerNotFoundError("Selected player not found in the selling team.")

    original_bid = find_original_bid(player_name, bid_history)
    if original_bid is None:
        raise UnverifiedOwnershipError(
            f"Ownership of {player_name} could not be verified in auction logs. Trade is denied."
        )
    if original_bid.team_name != seller.name:
        raise NotOriginalOwnerError(
            f"{seller.name} is not the original owner. {original_bid.team_name} bought "
            f"{player_name} in the auction and only they can trade this player for cash."
        )

    return ValidatedTrade(seller=seller, buyer=buyer, player=player, amount=amount)


def _without_first(players: list[OwnedPlayer], target: OwnedPlayer) -> list[OwnedPlayer]:
    remaining = list(players)
    for index, player in enumerate(remaining):
        if player.name == target.name:
            del remaining[index]
            break
    return remaining


def apply_trade(
    seller: TeamRecord,
    buyer: TeamRecord,
    player: OwnedPlayer,
    amount: int,
    *,
    timestamp: datetime | None = None,
) -> TradeOutcome:
    """Move ``player`` from seller to buyer for ``amount``.

    Cash, points and roster size are conserved across the pair. The roster entry
    moves unchanged, so it keeps the price paid at auction.
    """
    points = player.points or 0
    updated_seller = seller.model_copy(
        update={
            "cash": seller.cash + amount,
            "players": _without_first(seller.players, player),
            "points": seller.points - points,
        }
    )
    updated_buyer = buyer.model_copy(
        update={
            "cash": buyer.cash - amount,
            "players": [*buyer.players, player],
            "points": buyer.points + points,
        }
    )
    record = TradeRecord(
        from_team=seller.name,
        to_team=buyer.name,
        player=player.name,
        amount=amount,
        points=points,
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    return TradeOutcome(seller=updated_seller, buyer=updated_buyer, record=record)
