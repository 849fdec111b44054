"""Team and roster models shared by the ledger, the store and the API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# largest value a stored integer column holds
MAX_AMOUNT = 2**63 - 1


class OwnedPlayer(BaseModel):
    """A player on a team's roster, with the amount paid and points at acquisition."""

    name: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    points: int = 0

    model_config = ConfigDict(frozen=True)


class TeamRecord(BaseModel):
    """Persisted team state. ``version`` increases on every committed write."""

    team_id: str = Field(..., min_length=1)
    name: str
    cash: int = Field(..., ge=0)
    points: int = 0
    players: List[OwnedPlayer] = Field(default_factory=list)
    version: int = 0

    model_config = ConfigDict(frozen=True)

    def find_player(self, name: str) -> Optional[OwnedPlayer]:
        for player in self.players:
            if player.name == name:
                return player
        return None
