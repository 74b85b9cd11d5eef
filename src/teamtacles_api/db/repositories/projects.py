"""
teamtacles_api.db.repositories.projects

Repository for `Project` entities.

Responsibilities:
- Key-based project CRUD.
- Paged queries: all projects, and projects visible to one user
  (created by them or listing them in the team).
"""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from teamtacles_api.db.models import MAX_ROW_ID, Project, ProjectStatus, User, project_team


class ProjectRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        description: str | None,
        creator: User,
        team: list[User],
    ) -> Project:
        project = Project(
            name=name,
            description=description,
            creator=creator,
            team=team,
            status=ProjectStatus.active,
        )
        self._session.add(project)
        await self._session.flush()
        return project

    async def get(self, project_id: int, *, for_update: bool = False) -> Project | None:
        if not 0 < project_id <= MAX_ROW_ID:
            return None
        return await self._session.get(Project, project_id, with_for_update=for_update)

    async def delete(self, project: Project) -> None:
        # Team association rows go with the project; member users are untouched.
        await self._session.delete(project)
        await self._session.flush()

    async def list_all(self, *, offset: int, limit: int) -> tuple[list[Project], int]:
        return await self._page(select(Project), offset=offset, limit=limit)

    async def list_visible_to(
        self, user_id: int, *, offset: int, limit: int
    ) -> tuple[list[Project], int]:
        if not 0 < user_id <= MAX_ROW_ID:
            return [], 0
        member_of = select(project_team.c.project_id).where(project_team.c.user_id == user_id)
        stmt = select(Project).where(
            or_(Project.creator_id == user_id, Project.id.in_(member_of))
        )
        return await self._page(stmt, offset=offset, limit=limit)

    async def _page(
        self, stmt: Select[tuple[Project]], *, offset: int, limit: int
    ) -> tuple[list[Project], int]:
        # Ordering by primary key keeps pages stable across calls on unchanged data.
        total = (
            await self._session.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()
        rows = await self._session.execute(
            stmt.order_by(Project.id).offset(offset).limit(limit)
        )
        return list(rows.scalars().all()), int(total)
