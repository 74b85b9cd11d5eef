"""
teamtacles_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide settings, DB sessions and the task service gateway.
- Build per-request services from those resources.
- Resolve pagination query parameters against configured limits.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from teamtacles_api.auth.deps import get_access_policy
from teamtacles_api.auth.policy import AccessPolicy
from teamtacles_api.clients.task_service import TaskServiceGateway
from teamtacles_api.services.project_lifecycle import ProjectLifecycle
from teamtacles_api.services.user_directory import UserDirectory
from teamtacles_api.settings import Settings, get_settings


def settings_dep(request: Request) -> Settings:
    # The app factory pins its own settings; fall back to the env-driven instance.
    return getattr(request.app.state, "settings", None) or get_settings()


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the lifespan of `teamtacles_api.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def task_http_from_app(request: Request) -> httpx.AsyncClient:
    return request.app.state.task_http  # type: ignore[attr-defined]


def task_gateway(http: httpx.AsyncClient = Depends(task_http_from_app)) -> TaskServiceGateway:
    return TaskServiceGateway(http=http)


def project_lifecycle(
    session: AsyncSession = Depends(db_session),
    tasks: TaskServiceGateway = Depends(task_gateway),
    policy: AccessPolicy = Depends(get_access_policy),
) -> ProjectLifecycle:
    return ProjectLifecycle(session=session, tasks=tasks, policy=policy)


def user_directory(session: AsyncSession = Depends(db_session)) -> UserDirectory:
    return UserDirectory(session=session)


# Keeps `(page - 1) * size` well inside the database INTEGER range.
MAX_PAGE = 1_000_000_000


@dataclass(frozen=True, slots=True)
class PageParams:
    page: int
    size: int


def page_params(
    page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number (starts at 1)"),
    size: int | None = Query(None, ge=1, description="Items per page"),
    settings: Settings = Depends(settings_dep),
) -> PageParams:
    resolved = min(size or settings.default_page_size, settings.max_page_size)
    return PageParams(page=page, size=resolved)


# --- Module Notes -----------------------------------------------------------
# Tests build the app with explicit `Settings` and swap `app.state.task_http` to
# point the gateway at an `httpx.MockTransport`.
