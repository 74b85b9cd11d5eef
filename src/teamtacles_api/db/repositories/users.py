"""
teamtacles_api.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Create and fetch users (by id, username, email, or a batch of ids).
- Uniqueness probes used by registration.
- Paged listing for administrators.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamtacles_api.db.models import MAX_ROW_ID, Role, User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, username: str, email: str, password_hash: str, roles: list[Role]
    ) -> User:
        user = User(username=username, email=email, password_hash=password_hash, roles=roles)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int, *, for_update: bool = False) -> User | None:
        if not 0 < user_id <= MAX_ROW_ID:
            return None
        return await self._session.get(User, user_id, with_for_update=for_update)

    async def get_many(self, user_ids: Iterable[int]) -> list[User]:
        # Ids outside the INTEGER range match nothing; callers report them as missing.
        ids = {uid for uid in user_ids if 0 < uid <= MAX_ROW_ID}
        if not ids:
            return []
        stmt = select(User).where(User.id.in_(ids)).order_by(User.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def find_by_login(self, login: str) -> User | None:
        # Login accepts either the username or the email address.
        stmt = select(User).where(or_(User.username == login, User.email == login))
        return (await self._session.execute(stmt)).scalars().first()

    async def username_exists(self, username: str) -> bool:
        stmt = select(exists().where(User.username == username))
        return bool((await self._session.execute(stmt)).scalar())

    async def email_exists(self, email: str) -> bool:
        stmt = select(exists().where(User.email == email))
        return bool((await self._session.execute(stmt)).scalar())

    async def list_all(self, *, offset: int, limit: int) -> tuple[list[User], int]:
        total = (await self._session.execute(select(func.count(User.id)))).scalar_one()
        stmt = select(User).order_by(User.id).offset(offset).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all()), int(total)
