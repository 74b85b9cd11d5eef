"""
teamtacles_api.services.project_lifecycle

Project lifecycle service (authorization gate + transaction owner).

Responsibilities:
- Create, read, list, update and partially update projects.
- Gate every operation on a loaded project through `AccessPolicy`.
- Delete projects in two phases: remote task cascade first, local row second.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from teamtacles_api.auth.models import Principal
from teamtacles_api.auth.policy import AccessPolicy, default_policy
from teamtacles_api.clients.task_service import TaskServiceGateway
from teamtacles_api.db.models import Project, User
from teamtacles_api.db.repositories.projects import ProjectRepo
from teamtacles_api.db.repositories.users import UserRepo
from teamtacles_api.errors import DomainError, forbidden, invalid_request, not_found
from teamtacles_api.observability.logging import get_logger
from teamtacles_api.schemas import Page, ProjectPatchRequest, ProjectRequest, ProjectView

log = get_logger(__name__)


class ProjectLifecycle:
    def __init__(
        self,
        *,
        session: AsyncSession,
        tasks: TaskServiceGateway,
        policy: AccessPolicy = default_policy,
    ) -> None:
        self._session = session
        self._tasks = tasks
        self._policy = policy

        self._projects = ProjectRepo(session)
        self._users = UserRepo(session)

    async def create(self, request: ProjectRequest, principal: Principal) -> ProjectView:
        creator = await self._users.get(principal.user_id)
        if creator is None:
            raise not_found("User not found")

        team = await self._resolve_team(request.team, creator_id=creator.id)
        project = await self._projects.create(
            name=request.name,
            description=request.description,
            creator=creator,
            team=team,
        )
        await self._session.commit()
        log.info("project_created", project_id=project.id, creator_id=creator.id)
        return ProjectView.of(project)

    async def get_by_id(self, project_id: int, principal: Principal) -> ProjectView:
        project = await self._load(project_id)
        if not self._policy.can_view(principal, project):
            raise forbidden("You do not have permission to view this project")
        return ProjectView.of(project)

    async def list_for_principal(
        self, principal: Principal, *, page: int, size: int
    ) -> Page[ProjectView]:
        offset = (page - 1) * size
        if self._policy.can_administer(principal):
            projects, total = await self._projects.list_all(offset=offset, limit=size)
        else:
            projects, total = await self._projects.list_visible_to(
                principal.user_id, offset=offset, limit=size
            )
        return Page[ProjectView].build(
            items=[ProjectView.of(p) for p in projects], page=page, size=size, total=total
        )

    async def update(
        self, project_id: int, request: ProjectRequest, principal: Principal
    ) -> ProjectView:
        project = await self._load_for_modify(project_id, principal)
        project.name = request.name
        project.description = request.description
        project.team = await self._resolve_team(request.team, creator_id=project.creator_id)
        return await self._save(project, principal, fields=["name", "description", "team"])

    async def partial_update(
        self, project_id: int, patch: ProjectPatchRequest, principal: Principal
    ) -> ProjectView:
        project = await self._load_for_modify(project_id, principal)
        changes: dict[str, Any] = patch.changes()
        if "name" in changes:
            project.name = changes["name"]
        if "description" in changes:
            project.description = changes["description"]
        if "team" in changes:
            project.team = await self._resolve_team(changes["team"], creator_id=project.creator_id)
        return await self._save(project, principal, fields=sorted(changes))

    async def delete(self, project_id: int, principal: Principal, auth_token: str) -> None:
        """
        Phase 1 removes the project's tasks on the task service; phase 2 removes
        the local row. Any gateway failure aborts before phase 2, so the project
        id stays valid for an external retry. A crash between the phases leaves a
        project whose tasks are already gone; that window is not closed here.
        """

        project = await self._load_for_modify(project_id, principal)
        try:
            await self._tasks.delete_all_tasks_from_project(project.id, auth_token)
        except DomainError as e:
            await self._session.rollback()
            log.warning(
                "project_delete_aborted",
                project_id=project_id,
                actor_id=principal.user_id,
                kind=e.kind.value,
            )
            raise

        await self._projects.delete(project)
        await self._session.commit()
        log.info("project_deleted", project_id=project_id, actor_id=principal.user_id)

    async def _load(self, project_id: int, *, for_update: bool = False) -> Project:
        project = await self._projects.get(project_id, for_update=for_update)
        if project is None:
            raise not_found("Project not found")
        return project

    async def _load_for_modify(self, project_id: int, principal: Principal) -> Project:
        project = await self._load(project_id, for_update=True)
        if not self._policy.can_modify(principal, project):
            raise forbidden("Only the project creator or an administrator may modify this project")
        return project

    async def _save(
        self, project: Project, principal: Principal, *, fields: list[str]
    ) -> ProjectView:
        project.touch()
        await self._session.commit()
        log.info(
            "project_updated",
            project_id=project.id,
            actor_id=principal.user_id,
            fields=fields,
        )
        return ProjectView.of(project)

    async def _resolve_team(self, user_ids: Iterable[int], *, creator_id: int) -> list[User]:
        # The creator is implicitly privileged and never stored as a team member.
        wanted = {uid for uid in user_ids if uid != creator_id}
        users = await self._users.get_many(wanted)
        missing = wanted - {u.id for u in users}
        if missing:
            raise invalid_request(f"Unknown team member id(s): {sorted(missing)}")
        return users


# --- Module Notes -----------------------------------------------------------
# Authorization always happens after the load: a missing project is NOT_FOUND for
# everyone, an existing one the caller may not see is FORBIDDEN.
