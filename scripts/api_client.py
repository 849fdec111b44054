"""Lightweight REST client for the auction ledger API."""

from __future__ import annotations

import argparse
import json

import httpx


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


def _check(resp: httpx.Response) -> dict | list:
    if resp.status_code >= 400:
        try:
            detail = resp.json().get("detail")
        except ValueError:
            detail = resp.text
        raise SystemExit(f"{resp.status_code}: {detail}")
    return resp.json()


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the auction ledger REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--list-teams", action="store_true", help="List teams and exit")
    parser.add_argument("--register", metavar="NAME", help="Register a team")
    parser.add_argument("--cash", type=int, default=None, help="Starting cash for --register")
    parser.add_argument(
        "--bid",
        nargs=3,
        metavar=("TEAM_ID", "PLAYER", "AMOUNT"),
        help="Record a won bid",
    )
    parser.add_argument("--points", type=int, default=None, help="Player points for --bid")
    parser.add_argument(
        "--trade",
        nargs=4,
        metavar=("SELLER_ID", "BUYER_ID", "PLAYER", "AMOUNT"),
        help="Trade a player for cash",
    )
    parser.add_argument("--recent-trades", action="store_true", help="Show the recent trades feed")
    parser.add_argument("--leaderboard", action="store_true", help="Show live standings")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_teams:
            _print_json(_check(client.get("/teams")))
        if args.register:
            _print_json(_check(client.post("/teams", json={"name": args.register, "cash": args.cash})))
        if args.bid:
            team_id, player, amount = args.bid
            payload = {"team_id": team_id, "player_name": player, "amount": amount, "points": args.points}
            _print_json(_check(client.post("/bids", json=payload)))
        if args.trade:
            seller_id, buyer_id, player, amount = args.trade
            payload = {
                "from_team_id": seller_id,
                "to_team_id": buyer_id,
                "player_name": player,
                "amount": amount,
            }
            _print_json(_check(client.post("/trades", json=payload)))
        if args.recent_trades:
            _print_json(_check(client.get("/trades")))
        if args.leaderboard:
            for entry in _check(client.get("/leaderboard")):
                team = entry["team"]
                print(f"{entry['rank']:>3}. {team['name']:<24} {team['points']:>5} pts  {team['cash_display']:>16}")


if __name__ == "__main__":
    main()
