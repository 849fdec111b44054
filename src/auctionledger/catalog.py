"""Player catalog: the auction pool with each player's fixed points."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from auctionledger.errors import UnknownPlayerError


@dataclass(frozen=True)
class CatalogPlayer:
    name: str
    points: int


class PlayerCatalog:
    def __init__(self, players: Iterable[CatalogPlayer]):
        self._players: Dict[str, CatalogPlayer] = {}
        for player in players:
            self._players[player.name] = player

    def __len__(self) -> int:
        return len(self._players)

    def require(self, name: str) -> CatalogPlayer:
        player = self._players.get(name)
        if player is None:
            raise UnknownPlayerError("Invalid player. Please select a player from the suggestion list.")
        return player


def _parse_points(raw: Optional[str], *, line: int) -> int:
    text = (raw or "").strip()
    if not text:
        return 0
    try:
        return int(float(text))
    except ValueError as exc:
        raise ValueError(f"Invalid points value {raw!r} on line {line}") from exc


def _row_to_player(row: Mapping[str, Optional[str]], line: int) -> Optional[CatalogPlayer]:
    name = (row.get("name") or "").strip()
    if not name:
        return None
    return CatalogPlayer(
        name=name,
        points=_parse_points(row.get("points"), line=line),
    )


def load_player_catalog(path: Path) -> PlayerCatalog:
    """Load a ``name,points`` CSV. Extra columns are ignored and rows without a name are skipped."""
    players: list[CatalogPlayer] = []
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or "name" not in reader.fieldnames:
            raise ValueError(f"{path} must have a 'name' column")
        # header is line 1
        for line, row in enumerate(reader, start=2):
            player = _row_to_player(row, line)
            if player is not None:
                players.append(player)
    return PlayerCatalog(players)
