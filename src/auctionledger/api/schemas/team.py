from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from auctionledger.formatting import format_money
from auctionledger.models import MAX_AMOUNT, OwnedPlayer, TeamRecord


class TeamCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    cash: int | None = Field(default=None, ge=0, le=MAX_AMOUNT)


class TeamUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    cash: int | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    points: int | None = Field(default=None, ge=-MAX_AMOUNT, le=MAX_AMOUNT)


class OwnedPlayerResponse(BaseModel):
    name: str
    amount: int
    points: int
    amount_display: str

    @classmethod
    def from_player(cls, player: OwnedPlayer) -> "OwnedPlayerResponse":
        return cls(
            name=player.name,
            amount=player.amount,
            points=player.points,
            amount_display=format_money(player.amount),
        )


class TeamResponse(BaseModel):
    team_id: str
    name: str
    cash: int
    cash_display: str
    points: int
    players: List[OwnedPlayerResponse]

    @classmethod
    def from_record(cls, team: TeamRecord) -> "TeamResponse":
        return cls(
            team_id=team.team_id,
            name=team.name,
            cash=team.cash,
            cash_display=format_money(team.cash),
            points=team.points,
            players=[OwnedPlayerResponse.from_player(player) for player in team.players],
        )
