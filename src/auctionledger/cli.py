"""Command-line interface for running the auction ledger."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from auctionledger.catalog import load_player_catalog
from auctionledger.config import load_settings
from auctionledger.errors import LedgerError
from auctionledger.formatting import format_money
from auctionledger.ledger import LedgerService
from auctionledger.models import TeamRecord
from auctionledger.persistence import LeagueStore


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a fantasy cricket auction ledger")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (overrides AUCTION_DB_PATH)")
    parser.add_argument("--players", type=Path, default=None, help="Player catalog CSV (name,points)")
    parser.add_argument("--verbose", action="store_true", help="Log ledger activity to stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("teams", help="List registered teams")

    register = commands.add_parser("register", help="Register a new team")
    register.add_argument("name", help="Team name")
    register.add_argument("--cash", type=int, default=None, help="Starting cash (default from settings)")

    update = commands.add_parser("update", help="Edit a team's name, cash or points")
    update.add_argument("team_id")
    update.add_argument("--name", default=None)
    update.add_argument("--cash", type=int, default=None)
    update.add_argument("--points", type=int, default=None)

    remove = commands.add_parser("remove", help="Delete a team")
    remove.add_argument("team_id")

    bid = commands.add_parser("bid", help="Record a won auction bid")
    bid.add_argument("team_id")
    bid.add_argument("player", help="Player name")
    bid.add_argument("amount", type=int, help="Winning bid amount")
    bid.add_argument("--points", type=int, default=None, help="Player points (default from catalog)")

    trade = commands.add_parser("trade", help="Trade a player for cash")
    trade.add_argument("seller_id", help="Team selling the player")
    trade.add_argument("buyer_id", help="Team buying the player")
    trade.add_argument("player", help="Player name")
    trade.add_argument("amount", type=int, help="Cash paid by the buyer")

    trades = commands.add_parser("trades", help="Show recent trades")
    trades.add_argument("--limit", type=int, default=None)

    leaderboard = commands.add_parser("leaderboard", help="Show live standings")
    leaderboard.add_argument("--history", action="store_true", help="Include each team's bid history")

    serve = commands.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _describe_team(team: TeamRecord) -> str:
    return f"{team.team_id}  {team.name:<24} {format_money(team.cash):>16}  {team.points:>5} pts  {len(team.players)} players"


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = load_settings()
    db_path = args.db or settings.db_path
    players_csv = args.players or settings.players_csv

    if args.command == "serve":
        import uvicorn

        from auctionledger.api import create_app

        app = create_app(replace(settings, db_path=db_path, players_csv=players_csv))
        uvicorn.run(app, host=args.host, port=args.port)
        return

    catalog = load_player_catalog(players_csv) if players_csv else None

    try:
        store = LeagueStore(db_path)
        service = LedgerService(store, catalog=catalog, starting_cash=settings.starting_cash)
        if args.command == "teams":
            teams = store.list_teams()
            if not teams:
                print("No teams registered.")
            for team in teams:
                print(_describe_team(team))
        elif args.command == "register":
            team = service.register_team(args.name, cash=args.cash)
            print(f"Registered {team.name} ({team.team_id}) with {format_money(team.cash)}")
        elif args.command == "update":
            team = service.update_team(args.team_id, name=args.name, cash=args.cash, points=args.points)
            print(_describe_team(team))
        elif args.command == "remove":
            if not service.remove_team(args.team_id):
                raise SystemExit(f"team {args.team_id} not found")
            print(f"Removed team {args.team_id}")
        elif args.command == "bid":
            outcome = service.place_bid(args.team_id, args.player, args.amount, points=args.points)
            print(
                f"Bid submitted successfully! {outcome.record.player_name} to {outcome.team.name} "
                f"for {format_money(outcome.record.amount)}. Cash left: {format_money(outcome.team.cash)}"
            )
        elif args.command == "trade":
            outcome = service.execute_trade(args.seller_id, args.buyer_id, args.player, args.amount)
            record = outcome.record
            print(f"{record.from_team} traded {record.player} to {record.to_team} for {format_money(record.amount)}")
        elif args.command == "trades":
            records = store.list_trades(limit=args.limit or settings.recent_trades)
            if not records:
                print("No recent trades to show.")
            for record in records:
                print(
                    f"{record.timestamp:%Y-%m-%d %H:%M}  {record.from_team} traded {record.player} "
                    f"to {record.to_team} for {format_money(record.amount)}"
                )
        elif args.command == "leaderboard":
            for entry in service.leaderboard():
                team = entry.team
                print(f"{entry.rank:>3}. {team.name:<24} {team.points:>5} pts  {format_money(team.cash):>16}")
                if args.history:
                    for bid in entry.bids:
                        print(f"       {bid.player_name:<24} {format_money(bid.amount):>16}")
    except (LedgerError, ValueError) as exc:
        message = exc.message if isinstance(exc, LedgerError) else str(exc)
        raise SystemExit(message) from exc


if __name__ == "__main__":
    main()
