"""
tests.conftest

Shared fixtures: per-test SQLite database with seeded roles.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from teamtacles_api.db.init_db import init_db, seed_roles
from teamtacles_api.db.session import create_engine, create_sessionmaker
from teamtacles_api.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'teamtacles.db'}",
        jwt_secret="test-secret",
        task_service_base_url="http://tasks.test",
    )


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    factory = create_sessionmaker(engine)
    await seed_roles(factory)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as s:
        yield s
