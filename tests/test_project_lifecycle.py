"""
tests.test_project_lifecycle

ProjectLifecycle against a real SQLite schema with a stub task gateway.
"""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from teamtacles_api.auth.models import RoleName
from teamtacles_api.db.models import Project
from teamtacles_api.errors import DomainError, ErrorKind
from teamtacles_api.schemas import ProjectPatchRequest, ProjectRequest
from teamtacles_api.services.project_lifecycle import ProjectLifecycle
from tests.factories import StubTasks, make_user, principal_of


@pytest.mark.asyncio
async def test_creator_member_outsider_admin_scenario(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    member = await make_user(session, "mike")
    outsider = await make_user(session, "otto")
    admin = await make_user(session, "ada", RoleName.admin)
    tasks = StubTasks()
    svc = ProjectLifecycle(session=session, tasks=tasks)

    created = await svc.create(
        ProjectRequest(name="Apollo", description="moonshot", team=[member.id]),
        principal_of(creator),
    )
    assert created.creator.id == creator.id
    assert [u.id for u in created.team] == [member.id]
    assert created.status == "ACTIVE"

    # view
    assert (await svc.get_by_id(created.id, principal_of(member))).name == "Apollo"
    assert (await svc.get_by_id(created.id, principal_of(admin))).name == "Apollo"
    with pytest.raises(DomainError) as exc_info:
        await svc.get_by_id(created.id, principal_of(outsider))
    assert exc_info.value.kind is ErrorKind.forbidden

    # modify: team membership alone is not enough
    for who in (member, outsider):
        with pytest.raises(DomainError) as exc_info:
            await svc.partial_update(
                created.id, ProjectPatchRequest(name="Hijacked"), principal_of(who)
            )
        assert exc_info.value.kind is ErrorKind.forbidden
    renamed = await svc.partial_update(
        created.id, ProjectPatchRequest(name="Apollo 11"), principal_of(admin)
    )
    assert renamed.name == "Apollo 11"

    # delete
    with pytest.raises(DomainError) as exc_info:
        await svc.delete(created.id, principal_of(outsider), "outsider-token")
    assert exc_info.value.kind is ErrorKind.forbidden
    assert tasks.calls == []

    await svc.delete(created.id, principal_of(creator), "creator-token")
    assert tasks.calls == [(created.id, "creator-token")]
    with pytest.raises(DomainError) as exc_info:
        await svc.get_by_id(created.id, principal_of(admin))
    assert exc_info.value.kind is ErrorKind.not_found


@pytest.mark.asyncio
async def test_admin_can_delete_any_project(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    admin = await make_user(session, "ada", RoleName.admin)
    svc = ProjectLifecycle(session=session, tasks=StubTasks())

    created = await svc.create(ProjectRequest(name="Gemini"), principal_of(creator))
    await svc.delete(created.id, principal_of(admin), "admin-token")

    assert await session.get(Project, created.id) is None


@pytest.mark.asyncio
async def test_missing_project_is_not_found_for_everyone(session: AsyncSession) -> None:
    admin = await make_user(session, "ada", RoleName.admin)
    svc = ProjectLifecycle(session=session, tasks=StubTasks())

    for call in (
        svc.get_by_id(999, principal_of(admin)),
        svc.update(999, ProjectRequest(name="x"), principal_of(admin)),
        svc.partial_update(999, ProjectPatchRequest(name="x"), principal_of(admin)),
        svc.delete(999, principal_of(admin), "t"),
    ):
        with pytest.raises(DomainError) as exc_info:
            await call
        assert exc_info.value.kind is ErrorKind.not_found


@pytest.mark.asyncio
async def test_repeated_get_returns_identical_view(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    svc = ProjectLifecycle(session=session, tasks=StubTasks())
    created = await svc.create(ProjectRequest(name="Mercury"), principal_of(creator))

    first = await svc.get_by_id(created.id, principal_of(creator))
    second = await svc.get_by_id(created.id, principal_of(creator))

    assert first == second
    assert first == created


@pytest.mark.asyncio
async def test_partial_update_leaves_absent_fields_untouched(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    member = await make_user(session, "mike")
    svc = ProjectLifecycle(session=session, tasks=StubTasks())
    created = await svc.create(
        ProjectRequest(name="Skylab", description="station", team=[member.id]),
        principal_of(creator),
    )

    patched = await svc.partial_update(
        created.id, ProjectPatchRequest(name="Skylab II"), principal_of(creator)
    )

    assert patched.name == "Skylab II"
    assert patched.description == "station"
    assert [u.id for u in patched.team] == [member.id]


@pytest.mark.asyncio
async def test_partial_update_explicit_null_description_clears_it(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    svc = ProjectLifecycle(session=session, tasks=StubTasks())
    created = await svc.create(
        ProjectRequest(name="Skylab", description="station"), principal_of(creator)
    )

    patched = await svc.partial_update(
        created.id, ProjectPatchRequest.model_validate({"description": None}), principal_of(creator)
    )

    assert patched.name == "Skylab"
    assert patched.description is None


@pytest.mark.asyncio
async def test_full_update_replaces_all_fields(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    member = await make_user(session, "mike")
    svc = ProjectLifecycle(session=session, tasks=StubTasks())
    created = await svc.create(
        ProjectRequest(name="Vostok", description="first", team=[member.id]),
        principal_of(creator),
    )

    updated = await svc.update(created.id, ProjectRequest(name="Voskhod"), principal_of(creator))

    assert updated.name == "Voskhod"
    assert updated.description is None
    assert updated.team == []
    assert updated.creator == created.creator


@pytest.mark.asyncio
async def test_unknown_team_member_is_invalid_request(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    svc = ProjectLifecycle(session=session, tasks=StubTasks())

    with pytest.raises(DomainError) as exc_info:
        await svc.create(ProjectRequest(name="Ghost", team=[12345]), principal_of(creator))
    assert exc_info.value.kind is ErrorKind.invalid_request


@pytest.mark.asyncio
async def test_creator_is_not_stored_in_team(session: AsyncSession) -> None:
    creator = await make_user(session, "carol")
    svc = ProjectLifecycle(session=session, tasks=StubTasks())

    created = await svc.create(
        ProjectRequest(name="Solo", team=[creator.id]), principal_of(creator)
    )

    assert created.team == []
    assert created.creator.id == creator.id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind",
    [
        ErrorKind.service_unavailable,
        ErrorKind.access_denied,
        ErrorKind.remote_operation_failed,
        ErrorKind.network_error,
    ],
)
async def test_gateway_failure_keeps_local_project(
    session_factory: async_sessionmaker[AsyncSession], kind: ErrorKind
) -> None:
    async with session_factory() as session:
        creator = await make_user(session, "carol")
        principal = principal_of(creator)
        tasks = StubTasks(error=DomainError(kind, "remote said no"))
        svc = ProjectLifecycle(session=session, tasks=tasks)
        created = await svc.create(ProjectRequest(name="Apollo 13"), principal)

        with pytest.raises(DomainError) as exc_info:
            await svc.delete(created.id, principal, "tok")
        assert exc_info.value.kind is kind
        assert tasks.calls == [(created.id, "tok")]

    # Fresh session: the row must still be there.
    async with session_factory() as session:
        assert await session.get(Project, created.id) is not None
        view = await ProjectLifecycle(session=session, tasks=StubTasks()).get_by_id(
            created.id, principal
        )
        assert view.name == "Apollo 13"


@pytest.mark.asyncio
async def test_listing_for_non_admin_is_creator_or_member_only(session: AsyncSession) -> None:
    alice = await make_user(session, "alice")
    bob = await make_user(session, "bob")
    carl = await make_user(session, "carl")
    admin = await make_user(session, "ada", RoleName.admin)
    svc = ProjectLifecycle(session=session, tasks=StubTasks())

    own = [
        await svc.create(ProjectRequest(name=f"alice-{i}"), principal_of(alice)) for i in range(3)
    ]
    shared = await svc.create(ProjectRequest(name="bob-shared", team=[alice.id]), principal_of(bob))
    private = await svc.create(ProjectRequest(name="carl-private"), principal_of(carl))

    first = await svc.list_for_principal(principal_of(alice), page=1, size=3)
    second = await svc.list_for_principal(principal_of(alice), page=2, size=3)

    assert first.total == 4
    assert first.pages == 2
    assert not first.last
    assert second.last
    ids = [p.id for p in first.items + second.items]
    assert ids == sorted([p.id for p in own] + [shared.id])
    assert private.id not in ids

    # Stable across calls on unchanged data.
    again = await svc.list_for_principal(principal_of(alice), page=1, size=3)
    assert again == first

    everything = await svc.list_for_principal(principal_of(admin), page=1, size=50)
    assert everything.total == 5
    assert private.id in [p.id for p in everything.items]
