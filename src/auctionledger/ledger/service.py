"""Ledger operations executed against a :class:`LeagueStore`."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, TypeVar

from auctionledger.catalog import PlayerCatalog
from auctionledger.config import DEFAULT_STARTING_CASH
from auctionledger.errors import (
    ConflictError,
    InvalidAmountError,
    LedgerError,
    StoreUnavailableError,
)
from auctionledger.ledger.bid import BidOutcome, apply_bid
from auctionledger.ledger.trade import TradeOutcome, apply_trade, check_trade_request, validate_trade
from auctionledger.models import TeamRecord
from auctionledger.persistence import AtomicWrite, LeagueStore
from auctionledger.standings import LeaderboardEntry, build_leaderboard


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

_CONFLICT_RETRIES = 1

T = TypeVar("T")


class LedgerService:
    """Bids, trades and team administration over an injected store.

    Team records only change through :meth:`LeagueStore.run_atomic`; a write that
    loses a race is retried once and then reported as :class:`ConflictError`.
    """

    def __init__(
        self,
        store: LeagueStore,
        *,
        catalog: PlayerCatalog | None = None,
        starting_cash: int = DEFAULT_STARTING_CASH,
    ):
        self.store = store
        self.catalog = catalog
        self.starting_cash = starting_cash

    def _with_retry(self, label: str, operation: Callable[[], T]) -> T:
        attempt = 0
        while True:
            try:
                return operation()
            except ConflictError as exc:
                if attempt >= _CONFLICT_RETRIES:
                    logger.warning("%s failed after %d attempt(s): %s", label, attempt + 1, exc.message)
                    raise
                attempt += 1
                logger.warning("%s hit a write conflict; retrying (%s)", label, exc.message)

    # -- trades ------------------------------------------------------------

    def execute_trade(self, seller_id: str, buyer_id: str, player_name: str, amount: int) -> TradeOutcome:
        """Validate and commit a player-for-cash trade.

        The two team updates and the trade record commit together. Validation runs
        against the snapshot taken inside the transaction, so a retry re-checks
        everything against fresh data.
        """
        check_trade_request(seller_id, buyer_id, amount)
        label = f"Trade of {player_name}"

        def attempt() -> TradeOutcome:
            outcome: Dict[str, TradeOutcome] = {}

            def write(snapshot: Dict[str, TeamRecord]) -> AtomicWrite:
                seller = snapshot[seller_id]
                buyer = snapshot[buyer_id]
                history = self.store.query_bids_by_player(player_name)
                validated = validate_trade(seller, buyer, player_name, amount, history)
                result = apply_trade(validated.seller, validated.buyer, validated.player, validated.amount)
                outcome["trade"] = result
                return AtomicWrite(teams=[result.seller, result.buyer], audit=[result.record])

            self.store.run_atomic([seller_id, buyer_id], write)
            return outcome["trade"]

        try:
            result = self._with_retry(label, attempt)
        except (ConflictError, StoreUnavailableError):
            raise
        except LedgerError as exc:
            logger.warning("%s rejected: %s", label, exc.message)
            raise
        logger.info(
            "%s traded %s to %s for %d",
            result.record.from_team,
            result.record.player,
            result.record.to_team,
            result.record.amount,
        )
        return result

    # -- bids --------------------------------------------------------------

    def place_bid(
        self,
        team_id: str,
        player_name: str,
        amount: int,
        points: Optional[int] = None,
    ) -> BidOutcome:
        """Record a won bid. Points come from the catalog unless given explicitly."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError("Bid amount must be a valid positive number.")
        if self.catalog is not None:
            catalog_player = self.catalog.require(player_name)
            player_name = catalog_player.name
            if points is None:
                points = catalog_player.points
        resolved_points = points or 0
        label = f"Bid for {player_name}"

        def attempt() -> BidOutcome:
            outcome: Dict[str, BidOutcome] = {}

            def write(snapshot: Dict[str, TeamRecord]) -> AtomicWrite:
                result = apply_bid(snapshot[team_id], player_name, amount, resolved_points)
                outcome["bid"] = result
                return AtomicWrite(teams=[result.team], audit=[result.record])

            self.store.run_atomic([team_id], write)
            return outcome["bid"]

        try:
            result = self._with_retry(label, attempt)
        except (ConflictError, StoreUnavailableError):
            raise
        except LedgerError as exc:
            logger.warning("%s rejected: %s", label, exc.message)
            raise
        logger.info("%s bought %s for %d", result.record.team_name, player_name, amount)
        return result

    # -- administration ----------------------------------------------------

    def register_team(self, name: str, cash: Optional[int] = None) -> TeamRecord:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Team name cannot be blank")
        starting = self.starting_cash if cash is None else cash
        if isinstance(starting, bool) or not isinstance(starting, int) or starting < 0:
            raise InvalidAmountError("Cash must be a non-negative number.")
        team = self.store.create_team(name=cleaned, cash=starting)
        logger.info("Registered team %s with %d cash", team.name, team.cash)
        return team

    def update_team(
        self,
        team_id: str,
        *,
        name: Optional[str] = None,
        cash: Optional[int] = None,
        points: Optional[int] = None,
    ) -> TeamRecord:
        return self._with_retry(
            f"Update of team {team_id}",
            lambda: self.store.update_team(team_id, name=name, cash=cash, points=points),
        )

    def remove_team(self, team_id: str) -> bool:
        removed = self.store.delete_team(team_id)
        if removed:
            logger.info("Removed team %s", team_id)
        return removed

    def leaderboard(self) -> list[LeaderboardEntry]:
        return build_leaderboard(self.store.list_teams(order_by="points"), self.store.list_bids())
