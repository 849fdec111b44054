"""Live leaderboard built from team records and the bid log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from auctionledger.models import BidRecord, TeamRecord


@dataclass
class LeaderboardEntry:
    rank: int
    team: TeamRecord
    bids: List[BidRecord] = field(default_factory=list)


def build_leaderboard(teams: Iterable[TeamRecord], bids: Iterable[BidRecord]) -> List[LeaderboardEntry]:
    """Rank teams by points (highest first, ties by name) with each team's bid history.

    ``bids`` should be most recent first; that order is kept per team.
    """
    by_team: dict[str, list[BidRecord]] = {}
    for bid in bids:
        by_team.setdefault(bid.team_name, []).append(bid)

    ordered = sorted(teams, key=lambda team: (-(team.points or 0), team.name.lower()))
    return [
        LeaderboardEntry(rank=index, team=team, bids=by_team.get(team.name, []))
        for index, team in enumerate(ordered, start=1)
    ]
