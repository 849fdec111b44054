"""Persistence layer for team records and the bid/trade audit log."""

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Union
from uuid import uuid4

from auctionledger.errors import (
    ConflictError,
    InvalidAmountError,
    StoreUnavailableError,
    TeamNotFoundError,
)
from auctionledger.models import BidRecord, OwnedPlayer, TeamRecord, TradeRecord

logger = logging.getLogger(__name__)

AuditRecord = Union[BidRecord, TradeRecord]


@dataclass
class AtomicWrite:
    """Team records to replace and audit records to append in one transaction."""

    teams: List[TeamRecord]
    audit: List[AuditRecord] = field(default_factory=list)


WriteFn = Callable[[Dict[str, TeamRecord]], AtomicWrite]


def _is_contention(exc: sqlite3.Error) -> bool:
    text = str(exc).lower()
    return "locked" in text or "busy" in text


@contextlib.contextmanager
def _guard(action: str) -> Iterator[None]:
    """Translate sqlite failures raised while doing ``action`` into ledger errors."""
    try:
        yield
    except OverflowError as exc:
        # sqlite INTEGER is 64-bit
        raise InvalidAmountError("Amount is too large to record.") from exc
    except sqlite3.Error as exc:
        if _is_contention(exc):
            raise ConflictError("Another update was in progress. Please try again.") from exc
        raise StoreUnavailableError(f"Could not {action}: {exc}") from exc


class LeagueStore:
    """SQLite-backed store for teams, bid logs and trade logs.

    Team rows carry a ``version`` column. Every write goes through a
    compare-and-swap on that column so concurrent writers never interleave a
    read-modify-write on the same team.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path: Path | str = db_path if self._use_uri else Path(db_path)
        self._ensure_schema()

    def _connect(self, *, autocommit: bool = False) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Could not open the league database: {exc}") from exc
        if autocommit:
            conn.isolation_level = None
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with _guard("prepare the league database"), self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS teams (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                cash INTEGER NOT NULL,
                points INTEGER NOT NULL DEFAULT 0,
                players_json TEXT NOT NULL,
                version INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS bid_logs (
                id TEXT PRIMARY KEY,
                seq INTEGER NOT NULL,
                team_name TEXT NOT NULL,
                player_name TEXT NOT NULL,
                amount INTEGER NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS trade_logs (
                id TEXT PRIMARY KEY,
                seq INTEGER NOT NULL,
                from_team TEXT NOT NULL,
                to_team TEXT NOT NULL,
                player TEXT NOT NULL,
                amount INTEGER NOT NULL,
                points INTEGER NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS bid_logs_player ON bid_logs (player_name)")
        conn.commit()

    # -- teams -------------------------------------------------------------

    def create_team(
        self,
        *,
        name: str,
        cash: int,
        points: int = 0,
        players: Sequence[OwnedPlayer] = (),
        team_id: Optional[str] = None,
    ) -> TeamRecord:
        record = TeamRecord(
            team_id=team_id or uuid4().hex,
            name=name,
            cash=cash,
            points=points,
            players=list(players),
            version=0,
        )
        with _guard(f"add team {name}"), self._connect() as conn:
            conn.execute(
                """
                INSERT INTO teams (id, name, cash, points, players_json, version)
                VALUES (?, ?, ?, ?, ?, 0)
                """,
                (
                    record.team_id,
                    record.name,
                    record.cash,
                    record.points,
                    self._players_json(record.players),
                ),
            )
            conn.commit()
        return record

    def get_team(self, team_id: Optional[str]) -> Optional[TeamRecord]:
        if not team_id:
            return None
        with _guard("load team"), self._connect() as conn:
            row = conn.execute("SELECT * FROM teams WHERE id = ?", (team_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_team(row)

    def list_teams(self, *, order_by: str = "name") -> List[TeamRecord]:
        orderings = {
            "name": "name COLLATE NOCASE ASC, id ASC",
            "points": "points DESC, name COLLATE NOCASE ASC",
        }
        if order_by not in orderings:
            raise ValueError(f"order_by must be one of {sorted(orderings)}, got {order_by!r}")
        with _guard("list teams"), self._connect() as conn:
            rows = conn.execute(f"SELECT * FROM teams ORDER BY {orderings[order_by]}").fetchall()
        return [self._row_to_team(row) for row in rows]

    def update_team(
        self,
        team_id: str,
        *,
        name: str | None = None,
        cash: int | None = None,
        points: int | None = None,
    ) -> TeamRecord:
        """Administrative edit of name, cash and points. The roster is left alone."""
        if cash is not None and cash < 0:
            raise InvalidAmountError("Cash must be a non-negative number.")
        if name is not None and not name.strip():
            raise ValueError("Team name cannot be blank")

        def write(snapshot: Dict[str, TeamRecord]) -> AtomicWrite:
            team = snapshot[team_id]
            updated = TeamRecord(
                team_id=team.team_id,
                name=name if name is not None else team.name,
                cash=cash if cash is not None else team.cash,
                points=points if points is not None else team.points,
                players=team.players,
                version=team.version,
            )
            return AtomicWrite(teams=[updated])

        self.run_atomic([team_id], write)
        updated = self.get_team(team_id)
        if updated is None:  # pragma: no cover
            raise TeamNotFoundError(f"Team {team_id} not found after update")
        return updated

    def delete_team(self, team_id: str) -> bool:
        with _guard(f"remove team {team_id}"), self._connect() as conn:
            cursor = conn.execute("DELETE FROM teams WHERE id = ?", (team_id,))
            conn.commit()
        return cursor.rowcount == 1

    def run_atomic(self, team_ids: Sequence[str], write_fn: WriteFn) -> AtomicWrite:
        """Read ``team_ids``, let ``write_fn`` compute new state, commit all or nothing.

        ``write_fn`` receives a snapshot keyed by team id and returns the updated
        records (with the snapshot's ``version`` untouched) plus the audit records to
        append. Raises :class:`ConflictError` when any written team changed after the
        snapshot was taken; nothing is written in that case.
        """
        with _guard("save the update"):
            snapshot = self._snapshot(team_ids)
            pending = write_fn(snapshot)
            self._commit(pending)
        return pending

    def _snapshot(self, team_ids: Sequence[str]) -> Dict[str, TeamRecord]:
        snapshot: Dict[str, TeamRecord] = {}
        for team_id in team_ids:
            team = self.get_team(team_id)
            if team is None:
                raise TeamNotFoundError("One of the teams does not exist.")
            snapshot[team_id] = team
        return snapshot

    def _commit(self, pending: AtomicWrite) -> None:
        conn = self._connect(autocommit=True)
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                for team in pending.teams:
                    cursor = conn.execute(
                        """
                        UPDATE teams
                        SET name = ?, cash = ?, points = ?, players_json = ?,
                            version = version + 1
                        WHERE id = ? AND version = ?
                        """,
                        (
                            team.name,
                            team.cash,
                            team.points,
                            self._players_json(team.players),
                            team.team_id,
                            team.version,
                        ),
                    )
                    if cursor.rowcount != 1:
                        raise ConflictError(
                            f"{team.name} was changed by another update. Please try again."
                        )
                for record in pending.audit:
                    self._insert_audit(conn, record)
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
            logger.debug(
                "Committed %d team update(s) and %d audit record(s)",
                len(pending.teams),
                len(pending.audit),
            )
        finally:
            conn.close()

    # -- audit log ---------------------------------------------------------

    def append_bid(self, record: BidRecord) -> BidRecord:
        with _guard("record the bid"), self._connect() as conn:
            self._insert_audit(conn, record)
            conn.commit()
        return record

    def append_trade(self, record: TradeRecord) -> TradeRecord:
        with _guard("record the trade"), self._connect() as conn:
            self._insert_audit(conn, record)
            conn.commit()
        return record

    def query_bids_by_player(self, player_name: str) -> List[BidRecord]:
        """Bid records naming ``player_name``, most recent first."""
        with _guard("read the bid log"), self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM bid_logs WHERE player_name = ? ORDER BY seq DESC",
                (player_name,),
            ).fetchall()
        return [self._row_to_bid(row) for row in rows]

    def list_bids(self, *, team_name: str | None = None, limit: int | None = None) -> List[BidRecord]:
        query = "SELECT * FROM bid_logs"
        params: list[str | int] = []
        if team_name:
            query += " WHERE team_name = ?"
            params.append(team_name)
        query += " ORDER BY seq DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        with _guard("read the bid log"), self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_bid(row) for row in rows]

    def list_trades(self, *, limit: int | None = None) -> List[TradeRecord]:
        query = "SELECT * FROM trade_logs ORDER BY seq DESC"
        params: tuple[int, ...] = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        with _guard("read the trade log"), self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_trade(row) for row in rows]

    def _insert_audit(self, conn: sqlite3.Connection, record: AuditRecord) -> None:
        if isinstance(record, BidRecord):
            conn.execute(
                """
                INSERT INTO bid_logs (id, seq, team_name, player_name, amount, timestamp)
                VALUES (?, (SELECT COALESCE(MAX(seq), 0) + 1 FROM bid_logs), ?, ?, ?, ?)
                """,
                (
                    record.record_id,
                    record.team_name,
                    record.player_name,
                    record.amount,
                    record.timestamp.isoformat(),
                ),
            )
        elif isinstance(record, TradeRecord):
            conn.execute(
                """
                INSERT INTO trade_logs (id, seq, from_team, to_team, player, amount, points, timestamp)
                VALUES (?, (SELECT COALESCE(MAX(seq), 0) + 1 FROM trade_logs), ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.record_id,
                    record.from_team,
                    record.to_team,
                    record.player,
                    record.amount,
                    record.points,
                    record.timestamp.isoformat(),
                ),
            )
        else:
            raise TypeError(f"Unsupported audit record type {type(record).__name__}")

    # -- row mapping -------------------------------------------------------

    @staticmethod
    def _players_json(players: Sequence[OwnedPlayer]) -> str:
        return json.dumps([player.model_dump() for player in players])

    def _row_to_team(self, row: sqlite3.Row) -> TeamRecord:
        return TeamRecord(
            team_id=row["id"],
            name=row["name"],
            cash=row["cash"],
            points=row["points"],
            players=[OwnedPlayer.model_validate(item) for item in json.loads(row["players_json"])],
            version=row["version"],
        )

    def _row_to_bid(self, row: sqlite3.Row) -> BidRecord:
        return BidRecord(
            record_id=row["id"],
            team_name=row["team_name"],
            player_name=row["player_name"],
            amount=row["amount"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )

    def _row_to_trade(self, row: sqlite3.Row) -> TradeRecord:
        return TradeRecord(
            record_id=row["id"],
            from_team=row["from_team"],
            to_team=row["to_team"],
            player=row["player"],
            amount=row["amount"],
            points=row["points"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )


__all__ = [
    "AtomicWrite",
    "AuditRecord",
    "LeagueStore",
    "WriteFn",
]
