from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from auctionledger.api import create_app
from auctionledger.config import Settings
from auctionledger.errors import ConflictError, StoreUnavailableError
from auctionledger.persistence import LeagueStore


@pytest.fixture
async def client(tmp_path: Path):
    players_csv = tmp_path / "players.csv"
    players_csv.write_text("name,points\nVirat Kohli,50\nJasprit Bumrah,45\n", encoding="utf-8")
    settings = Settings(db_path=tmp_path / "league.sqlite", players_csv=players_csv, recent_trades=2)
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _register(client: AsyncClient, name: str, cash: int | None = None) -> dict:
    resp = await client.post("/teams", json={"name": name, "cash": cash})
    assert resp.status_code == 201
    return resp.json()


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_register_and_list_teams(client: AsyncClient):
    bravo = await _register(client, "Bravo")
    await _register(client, "Alpha", 50_000_000)

    assert bravo["cash"] == 100_000_000
    assert bravo["cash_display"] == "₹10.00 Cr"
    assert bravo["points"] == 0
    assert bravo["players"] == []

    resp = await client.get("/teams")
    assert [team["name"] for team in resp.json()] == ["Alpha", "Bravo"]

    resp = await client.get(f"/teams/{bravo['team_id']}")
    assert resp.json()["name"] == "Bravo"

    resp = await client.get("/teams/missing")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_register_rejects_blank_and_negative(client: AsyncClient):
    resp = await client.post("/teams", json={"name": "   "})
    assert resp.status_code == 400

    resp = await client.post("/teams", json={"name": "Alpha", "cash": -1})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_bid_and_trade_flow(client: AsyncClient):
    alpha = await _register(client, "Alpha")
    bravo = await _register(client, "Bravo", 50_000_000)
    charlie = await _register(client, "Charlie", 50_000_000)

    resp = await client.post(
        "/bids",
        json={"team_id": alpha["team_id"], "player_name": "Virat Kohli", "amount": "20000000"},
    )
    assert resp.status_code == 201
    payload = resp.json()
    assert payload["team"]["cash"] == 80_000_000
    assert payload["team"]["points"] == 50
    assert payload["record"]["player_name"] == "Virat Kohli"

    resp = await client.post(
        "/trades",
        json={
            "from_team_id": alpha["team_id"],
            "to_team_id": bravo["team_id"],
            "player_name": "Virat Kohli",
            "amount": 5_000_000,
        },
    )
    assert resp.status_code == 201
    payload = resp.json()
    assert payload["seller"]["cash"] == 85_000_000
    assert payload["seller"]["points"] == 0
    assert payload["buyer"]["cash"] == 45_000_000
    assert payload["buyer"]["players"][0]["amount"] == 20_000_000
    assert payload["record"]["points"] == 50

    resp = await client.post(
        "/trades",
        json={
            "from_team_id": bravo["team_id"],
            "to_team_id": charlie["team_id"],
            "player_name": "Virat Kohli",
            "amount": 1_000_000,
        },
    )
    assert resp.status_code == 400
    assert "not the original owner" in resp.json()["detail"]

    resp = await client.get("/trades")
    trades = resp.json()
    assert len(trades) == 1
    assert trades[0]["amount_display"] == "₹50,00,000"

    resp = await client.get("/leaderboard")
    board = resp.json()
    assert board[0]["team"]["name"] == "Bravo"
    assert board[0]["rank"] == 1
    alpha_entry = next(entry for entry in board if entry["team"]["name"] == "Alpha")
    assert [bid["player_name"] for bid in alpha_entry["bids"]] == ["Virat Kohli"]


@pytest.mark.anyio
async def test_trade_error_statuses(client: AsyncClient):
    alpha = await _register(client, "Alpha")
    bravo = await _register(client, "Bravo")

    base = {"from_team_id": alpha["team_id"], "to_team_id": bravo["team_id"], "player_name": "Virat Kohli"}

    resp = await client.post("/trades", json={**base, "amount": -1})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please enter a valid, non-negative trade amount."

    resp = await client.post("/trades", json={**base, "to_team_id": alpha["team_id"], "amount": 0})
    assert resp.json()["detail"] == "A team cannot trade with itself."

    resp = await client.post("/trades", json={**base, "to_team_id": "missing", "amount": 0})
    assert resp.status_code == 404

    resp = await client.post("/trades", json={**base, "amount": 0})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Selected player not found in the selling team."


@pytest.mark.anyio
async def test_bid_rejections(client: AsyncClient):
    alpha = await _register(client, "Alpha", 1_000_000)

    resp = await client.post("/bids", json={"team_id": alpha["team_id"], "player_name": "Nobody", "amount": 10})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Invalid player")

    resp = await client.post(
        "/bids",
        json={"team_id": alpha["team_id"], "player_name": "Virat Kohli", "amount": 2_000_000},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Bid of ₹20,00,000 is too high. Available cash: ₹10,00,000"

    resp = await client.post("/bids", json={"team_id": "missing", "player_name": "Virat Kohli", "amount": 10})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_update_and_delete_team(client: AsyncClient):
    alpha = await _register(client, "Alpha")

    resp = await client.patch(f"/teams/{alpha['team_id']}", json={"name": "Alpha XI", "points": 12})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alpha XI"
    assert resp.json()["points"] == 12
    assert resp.json()["cash"] == 100_000_000

    resp = await client.delete(f"/teams/{alpha['team_id']}")
    assert resp.status_code == 204
    resp = await client.delete(f"/teams/{alpha['team_id']}")
    assert resp.status_code == 404
    resp = await client.patch(f"/teams/{alpha['team_id']}", json={"cash": 5})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_recent_trades_limit_and_bid_filter(client: AsyncClient):
    alpha = await _register(client, "Alpha")
    bravo = await _register(client, "Bravo")
    for player in ("Virat Kohli", "Jasprit Bumrah"):
        resp = await client.post("/bids", json={"team_id": alpha["team_id"], "player_name": player, "amount": 1_000})
        assert resp.status_code == 201
    for player in ("Virat Kohli", "Jasprit Bumrah"):
        resp = await client.post(
            "/trades",
            json={"from_team_id": alpha["team_id"], "to_team_id": bravo["team_id"], "player_name": player, "amount": 1},
        )
        assert resp.status_code == 201
    resp = await client.post("/bids", json={"team_id": bravo["team_id"], "player_name": "Virat Kohli", "amount": 5})
    assert resp.status_code == 201

    resp = await client.get("/trades", params={"limit": 1})
    assert [trade["player"] for trade in resp.json()] == ["Jasprit Bumrah"]

    resp = await client.get("/bids", params={"team_name": "Alpha"})
    assert [bid["player_name"] for bid in resp.json()] == ["Jasprit Bumrah", "Virat Kohli"]


class FailingStore(LeagueStore):
    def __init__(self, db_path: Path, error: Exception):
        super().__init__(db_path)
        self.error = error

    def run_atomic(self, team_ids, write_fn):
        raise self.error

    def list_teams(self, *, order_by: str = "name"):
        raise self.error


def _client_for(tmp_path: Path, error: Exception) -> AsyncClient:
    settings = Settings(db_path=tmp_path / "league.sqlite")
    app = create_app(settings, store=FailingStore(settings.db_path, error))
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.anyio
async def test_write_conflict_maps_to_409(tmp_path: Path):
    async with _client_for(tmp_path, ConflictError("Another update was in progress. Please try again.")) as client:
        resp = await client.post("/bids", json={"team_id": "a", "player_name": "Virat Kohli", "amount": 10})
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Another update was in progress. Please try again."

        resp = await client.post(
            "/trades",
            json={"from_team_id": "a", "to_team_id": "b", "player_name": "Virat Kohli", "amount": 10},
        )
        assert resp.status_code == 409


@pytest.mark.anyio
async def test_store_failure_maps_to_503(tmp_path: Path):
    error = StoreUnavailableError("Could not list teams: disk I/O error")
    async with _client_for(tmp_path, error) as client:
        resp = await client.get("/teams")
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Could not list teams: disk I/O error"

        resp = await client.get("/leaderboard")
        assert resp.status_code == 503

        resp = await client.post(
            "/trades",
            json={"from_team_id": "a", "to_team_id": "b", "player_name": "Virat Kohli", "amount": 10},
        )
        assert resp.status_code == 503


@pytest.mark.anyio
async def test_oversized_values_are_rejected(client: AsyncClient):
    resp = await client.post("/teams", json={"name": "Big", "cash": 10**20})
    assert resp.status_code == 422

    alpha = await _register(client, "Alpha")
    resp = await client.patch(f"/teams/{alpha['team_id']}", json={"points": 10**20})
    assert resp.status_code == 422

    resp = await client.post(
        "/bids",
        json={"team_id": alpha["team_id"], "player_name": "Virat Kohli", "amount": 10, "points": 10**20},
    )
    assert resp.status_code == 422

    resp = await client.get(f"/teams/{alpha['team_id']}")
    assert resp.json()["points"] == 0
