"""REST API for the auction ledger."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import FastAPI, HTTPException, Query, Response

from auctionledger.api.schemas import (
    BidRecordResponse,
    BidRequest,
    BidResponse,
    LeaderboardEntryResponse,
    TeamCreateRequest,
    TeamResponse,
    TeamUpdateRequest,
    TradeRecordResponse,
    TradeRequest,
    TradeResponse,
)
from auctionledger.catalog import load_player_catalog
from auctionledger.config import Settings, load_settings
from auctionledger.errors import (
    ConflictError,
    LedgerError,
    StoreUnavailableError,
    TeamNotFoundError,
)
from auctionledger.ledger import LedgerService
from auctionledger.persistence import LeagueStore

logger = logging.getLogger(__name__)


def _status_for(exc: LedgerError) -> int:
    if isinstance(exc, TeamNotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, StoreUnavailableError):
        return 503
    return 400


def _raise_http(exc: LedgerError) -> NoReturn:
    raise HTTPException(status_code=_status_for(exc), detail=exc.message) from exc


def create_app(settings: Settings | None = None, store: LeagueStore | None = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="auction ledger")
    store = store or LeagueStore(settings.db_path)
    catalog = None
    if settings.players_csv is not None:
        catalog = load_player_catalog(settings.players_csv)
        logger.info("Loaded %d players from %s", len(catalog), settings.players_csv)
    service = LedgerService(store, catalog=catalog, starting_cash=settings.starting_cash)
    app.state.store = store
    app.state.ledger = service

    def _fetch_team_or_404(team_id: str):
        try:
            team = store.get_team(team_id)
        except LedgerError as exc:
            _raise_http(exc)
        if team is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return team

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/teams", response_model=list[TeamResponse])
    async def list_teams():
        try:
            teams = store.list_teams()
        except LedgerError as exc:
            _raise_http(exc)
        return [TeamResponse.from_record(team) for team in teams]

    @app.post("/teams", response_model=TeamResponse, status_code=201)
    async def register_team(payload: TeamCreateRequest):
        try:
            team = service.register_team(payload.name, cash=payload.cash)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except LedgerError as exc:
            _raise_http(exc)
        return TeamResponse.from_record(team)

    @app.get("/teams/{team_id}", response_model=TeamResponse)
    async def get_team(team_id: str):
        return TeamResponse.from_record(_fetch_team_or_404(team_id))

    @app.patch("/teams/{team_id}", response_model=TeamResponse)
    async def update_team(team_id: str, payload: TeamUpdateRequest):
        _fetch_team_or_404(team_id)
        try:
            team = service.update_team(
                team_id,
                name=payload.name,
                cash=payload.cash,
                points=payload.points,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except LedgerError as exc:
            _raise_http(exc)
        return TeamResponse.from_record(team)

    @app.delete("/teams/{team_id}", status_code=204)
    async def delete_team(team_id: str):
        try:
            removed = service.remove_team(team_id)
        except LedgerError as exc:
            _raise_http(exc)
        if not removed:
            raise HTTPException(status_code=404, detail="Team not found")
        return Response(status_code=204)

    @app.post("/bids", response_model=BidResponse, status_code=201)
    async def place_bid(payload: BidRequest):
        try:
            outcome = service.place_bid(
                payload.team_id,
                payload.player_name,
                payload.amount,
                points=payload.points,
            )
        except LedgerError as exc:
            _raise_http(exc)
        return BidResponse(
            team=TeamResponse.from_record(outcome.team),
            record=BidRecordResponse.from_record(outcome.record),
        )

    @app.get("/bids", response_model=list[BidRecordResponse])
    async def list_bids(
        team_name: str | None = None,
        limit: int | None = Query(default=None, ge=1, le=1000),
    ):
        try:
            records = store.list_bids(team_name=team_name, limit=limit)
        except LedgerError as exc:
            _raise_http(exc)
        return [BidRecordResponse.from_record(record) for record in records]

    @app.post("/trades", response_model=TradeResponse, status_code=201)
    async def execute_trade(payload: TradeRequest):
        try:
            outcome = service.execute_trade(
                payload.from_team_id,
                payload.to_team_id,
                payload.player_name,
                payload.amount,
            )
        except LedgerError as exc:
            _raise_http(exc)
        return TradeResponse(
            seller=TeamResponse.from_record(outcome.seller),
            buyer=TeamResponse.from_record(outcome.buyer),
            record=TradeRecordResponse.from_record(outcome.record),
        )

    @app.get("/trades", response_model=list[TradeRecordResponse])
    async def list_trades(limit: int | None = Query(default=None, ge=1, le=1000)):
        resolved = limit or settings.recent_trades
        try:
            records = store.list_trades(limit=resolved)
        except LedgerError as exc:
            _raise_http(exc)
        return [TradeRecordResponse.from_record(record) for record in records]

    @app.get("/leaderboard", response_model=list[LeaderboardEntryResponse])
    async def leaderboard():
        try:
            entries = service.leaderboard()
        except LedgerError as exc:
            _raise_http(exc)
        return [
            LeaderboardEntryResponse(
                rank=entry.rank,
                team=TeamResponse.from_record(entry.team),
                bids=[BidRecordResponse.from_record(bid) for bid in entry.bids],
            )
            for entry in entries
        ]

    return app
