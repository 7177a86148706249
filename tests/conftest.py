"""Shared pytest fixtures.

``DB_URL`` has to be set before anything under ``app`` is imported, since the
settings object and the engine are created at import time.
"""

import os

os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-32-bytes-of-key")

import random
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import create_tables
from app.core.enums import CardRarity
from app.game.catalog import InMemoryCardCatalog
from tests.helpers import ScriptedRandom, make_card


@pytest.fixture
def seeded_rng() -> random.Random:
    """RNG with a fixed seed for reproducible statistical tests."""
    return random.Random(1234)


@pytest.fixture
def first_option_rng() -> ScriptedRandom:
    """Every draw is 0, so every coin flip picks side A / the first option."""
    return ScriptedRandom([0.0])


@pytest.fixture
def catalog() -> InMemoryCardCatalog:
    return InMemoryCardCatalog(
        [
            make_card(1, CardRarity.COMMON, 2, 1),
            make_card(2, CardRarity.COMMON, 1, 3),
            make_card(3, CardRarity.COMMON, 2, 2),
            make_card(4, CardRarity.UNCOMMON, 4, 3),
            make_card(5, CardRarity.UNCOMMON, 3, 3),
            make_card(6, CardRarity.RARE, 6, 4),
            make_card(7, CardRarity.LEGENDARY, 8, 6),
        ]
    )


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession]:
    engine = create_async_engine(
        "sqlite+aiosqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    await create_tables(engine)

    async with AsyncSession(
        engine, autocommit=False, autoflush=False, expire_on_commit=False
    ) as session:
        yield session

    await engine.dispose()
