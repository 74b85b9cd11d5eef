"""
teamtacles_api.db.init_db

Schema bootstrap.

Responsibilities:
- Create tables if they don't exist.
- Seed the closed role set so role lookups by name always resolve.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from teamtacles_api.auth.models import RoleName
from teamtacles_api.db.base import Base
from teamtacles_api.db.models import Role


async def init_db(engine: AsyncEngine) -> None:
    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_roles(session_factory: async_sessionmaker[AsyncSession]) -> list[RoleName]:
    """
    Insert any missing `RoleName` rows. Returns the names that were added.
    """

    async with session_factory() as session:
        existing = set((await session.execute(select(Role.name))).scalars().all())
        missing = [name for name in RoleName if name not in existing]
        for name in missing:
            session.add(Role(name=name))
        await session.commit()
        return missing


# --- Module Notes -----------------------------------------------------------
# Both helpers are idempotent and run on every startup.
