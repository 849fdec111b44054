"""Applying a won auction bid to a team."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from auctionledger.errors import InsufficientFundsError, InvalidAmountError, PlayerNotFoundError
from auctionledger.formatting import format_money
from auctionledger.models import BidRecord, OwnedPlayer, TeamRecord


@dataclass(frozen=True)
class BidOutcome:
    team: TeamRecord
    record: BidRecord


def validate_bid(team: TeamRecord, player_name: str, amount: object) -> None:
    if not player_name or not player_name.strip():
        raise PlayerNotFoundError("Please enter a player name.")
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError("Bid amount must be a valid positive number.")
    if amount > team.cash:
        raise InsufficientFundsError(
            f"Bid of {format_money(amount)} is too high. Available cash: {format_money(team.cash)}"
        )


def apply_bid(
    team: TeamRecord,
    player_name: str,
    amount: int,
    points: int,
    *,
    timestamp: datetime | None = None,
) -> BidOutcome:
    """Charge ``team`` for a won bid and add the player to its roster.

    A second bid for a player already on the roster is accepted as-is.
    """
    validate_bid(team, player_name, amount)
    entry = OwnedPlayer(name=player_name, amount=amount, points=points)
    updated = team.model_copy(
        update={
            "cash": team.cash - amount,
            "players": [*team.players, entry],
            "points": team.points + points,
        }
    )
    record = BidRecord(
        team_name=team.name,
        player_name=player_name,
        amount=amount,
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    return BidOutcome(team=updated, record=record)
