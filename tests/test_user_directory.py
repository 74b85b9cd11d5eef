"""
tests.test_user_directory

Registration rules and the full-replacement role exchange.
"""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from teamtacles_api.db.repositories.users import UserRepo
from teamtacles_api.errors import DomainError, ErrorKind
from teamtacles_api.schemas import UserRegisterRequest
from teamtacles_api.services.user_directory import UserDirectory
from tests.factories import make_user


def _register(username: str = "neo", email: str = "neo@example.com", **overrides: str):
    body = {
        "username": username,
        "email": email,
        "password": "matrix1",
        "password_confirm": "matrix1",
        **overrides,
    }
    return UserRegisterRequest.model_validate(body)


@pytest.mark.asyncio
async def test_register_assigns_user_role_and_hashes_password(session: AsyncSession) -> None:
    directory = UserDirectory(session=session)

    view = await directory.register(_register())

    assert view.username == "neo"
    assert view.roles == ["USER"]
    user = await directory.authenticate("neo", "matrix1")
    assert user is not None
    assert user.password_hash != "matrix1"
    assert await directory.authenticate("neo@example.com", "matrix1") is not None
    assert await directory.authenticate("neo", "wrong") is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"username": "taken", "email": "fresh@example.com"},
        {"username": "fresh", "email": "taken@example.com"},
        {"username": "fresh", "email": "fresh@example.com", "password_confirm": "other"},
    ],
    ids=["duplicate-username", "duplicate-email", "password-mismatch"],
)
async def test_register_conflicts(session: AsyncSession, request_kwargs: dict[str, str]) -> None:
    await make_user(session, "taken")
    directory = UserDirectory(session=session)

    with pytest.raises(DomainError) as exc_info:
        await directory.register(_register(**request_kwargs))
    assert exc_info.value.kind is ErrorKind.conflict


@pytest.mark.asyncio
async def test_register_race_on_unique_username_is_conflict(
    session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    await make_user(session, "taken")

    async def _absent(self: UserRepo, value: str) -> bool:
        return False

    # Both probes miss, as when another request inserts between check and commit.
    monkeypatch.setattr(UserRepo, "username_exists", _absent)
    monkeypatch.setattr(UserRepo, "email_exists", _absent)
    directory = UserDirectory(session=session)

    with pytest.raises(DomainError) as exc_info:
        await directory.register(_register("taken", "fresh@example.com"))
    assert exc_info.value.kind is ErrorKind.conflict

    page = await directory.list_users(page=1, size=10)
    assert [u.username for u in page.items] == ["taken"]


@pytest.mark.asyncio
async def test_exchange_role_replaces_whole_role_set(session: AsyncSession) -> None:
    user = await make_user(session, "trinity")
    assert user.role_names == {"USER"}
    directory = UserDirectory(session=session)

    view = await directory.exchange_role(user.id, "admin")

    assert view.roles == ["ADMIN"]
    refreshed = await directory.list_users(page=1, size=10)
    assert [u.roles for u in refreshed.items if u.id == user.id] == [["ADMIN"]]


@pytest.mark.asyncio
async def test_exchange_role_unknown_user_is_not_found(session: AsyncSession) -> None:
    with pytest.raises(DomainError) as exc_info:
        await UserDirectory(session=session).exchange_role(4242, "ADMIN")
    assert exc_info.value.kind is ErrorKind.not_found


@pytest.mark.asyncio
async def test_exchange_role_unknown_role_is_invalid(session: AsyncSession) -> None:
    user = await make_user(session, "morpheus")

    with pytest.raises(DomainError) as exc_info:
        await UserDirectory(session=session).exchange_role(user.id, "superuser")
    assert exc_info.value.kind is ErrorKind.invalid_request
    assert user.role_names == {"USER"}


@pytest.mark.asyncio
async def test_ensure_admin_is_idempotent(session: AsyncSession) -> None:
    directory = UserDirectory(session=session)

    admin = {"username": "root", "email": "root@example.com", "password": "pw123"}
    first = await directory.ensure_admin(**admin)
    second = await directory.ensure_admin(**admin)

    assert first.id == second.id
    assert first.role_names == {"ADMIN"}
    page = await directory.list_users(page=1, size=10)
    assert page.total == 1
