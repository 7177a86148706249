import random
from collections.abc import AsyncGenerator

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.game.errors import BattleInvariantError
from app.game.random_source import get_random_source
from app.main import app
from app.models.player import Player


def auth_headers(player_id: int) -> dict[str, str]:
    token = jwt.encode({"sub": str(player_id)}, settings.jwt_secret, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    async def override_db() -> AsyncGenerator[AsyncSession]:
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_random_source] = lambda: random.Random(11)

    db.add(Player(id=1, name="admin", is_admin=True, currency=500))
    db.add(Player(id=2, name="player", currency=100))
    await db.commit()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def test_healthz(client):
    response = await client.get("/")
    assert response.status_code == 200


async def test_shop_catalog_is_public(client):
    response = await client.get("/api/shop/packs")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert [pack["tier"] for pack in body["data"]] == ["small", "normal", "big", "premium", "deluxe"]


async def test_missing_token_rejected(client):
    response = await client.get("/api/players/me")

    assert response.status_code == 401
    assert response.json()["status"] == "error"


async def test_me_serializes_id_as_string(client):
    response = await client.get("/api/players/me", headers=auth_headers(2))

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "2"


async def test_seed_requires_admin(client):
    response = await client.post("/api/cards/seed", headers=auth_headers(2))
    assert response.status_code == 403


async def test_buy_pack_then_battle(client):
    seeded = await client.post("/api/cards/seed", headers=auth_headers(1))
    assert seeded.json()["data"] == {"seeded": True, "count": 37}

    bought = await client.post(
        "/api/shop/packs/purchase", json={"tier": "big"}, headers=auth_headers(1)
    )
    assert bought.status_code == 200
    assert bought.json()["data"]["new_balance"] == 410

    inventory = await client.get("/api/inventory/", headers=auth_headers(1))
    rows = inventory.json()["data"]
    assert sum(row["quantity"] for row in rows) == 7

    owned = [row["card_id"] for row in rows for _ in range(row["quantity"])][:3]
    started = await client.post(
        "/api/battles/",
        json={"cards": [{"card_id": card_id, "position": i} for i, card_id in enumerate(owned, 1)]},
        headers=auth_headers(1),
    )
    assert started.status_code == 200
    battle_id = started.json()["data"]["battle_id"]

    resolved = await client.post(f"/api/battles/{battle_id}/resolve", headers=auth_headers(1))
    assert resolved.status_code == 200
    assert len(resolved.json()["data"]["outcome"]["rounds"]) == 3


async def test_duplicate_positions_are_a_bad_request(client):
    await client.post("/api/cards/seed", headers=auth_headers(1))

    response = await client.post(
        "/api/battles/",
        json={"cards": [{"card_id": 1, "position": p} for p in (1, 1, 2)]},
        headers=auth_headers(2),
    )

    assert response.status_code == 400
    assert response.json()["status"] == "error"


async def test_out_of_range_position_fails_validation(client):
    response = await client.post(
        "/api/battles/",
        json={"cards": [{"card_id": 1, "position": p} for p in (1, 2, 4)]},
        headers=auth_headers(2),
    )
    assert response.status_code == 422


async def test_internal_game_error_is_a_server_error(client):
    def broken_random_source():
        raise BattleInvariantError("Side A exhausted its deck without a surviving card")

    app.dependency_overrides[get_random_source] = broken_random_source

    response = await client.get("/api/battles/can-battle", headers=auth_headers(2))

    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "error"
    assert body["message"] == "Side A exhausted its deck without a surviving card"


async def test_challenger_can_cancel_over_http(client):
    await client.post("/api/cards/seed", headers=auth_headers(1))
    await client.post("/api/shop/packs/purchase", json={"tier": "small"}, headers=auth_headers(1))
    await client.post("/api/shop/packs/purchase", json={"tier": "small"}, headers=auth_headers(2))

    created = await client.post(
        "/api/pvp-challenges/", json={"opponent_id": 2}, headers=auth_headers(1)
    )
    assert created.status_code == 200
    challenge_id = created.json()["data"]["id"]

    refused = await client.post(
        f"/api/pvp-challenges/{challenge_id}/cancel", headers=auth_headers(2)
    )
    assert refused.status_code == 403

    cancelled = await client.post(
        f"/api/pvp-challenges/{challenge_id}/cancel", headers=auth_headers(1)
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["data"]["status"] == "cancelled"
