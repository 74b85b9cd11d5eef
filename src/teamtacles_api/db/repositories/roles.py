"""
teamtacles_api.db.repositories.roles

Repository for `Role` rows.

Responsibilities:
- Resolve a `RoleName` to its seeded row.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamtacles_api.auth.models import RoleName
from teamtacles_api.db.models import Role


class RoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_name(self, name: RoleName) -> Role | None:
        stmt = select(Role).where(Role.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()


# --- Module Notes -----------------------------------------------------------
# Rows are created by `db.init_db.seed_roles`; a missing row means an unseeded schema.
