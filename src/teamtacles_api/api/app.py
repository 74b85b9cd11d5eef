"""
teamtacles_api.api.app

FastAPI app factory for the TeamTacles service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine, task service HTTP client).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from teamtacles_api import __version__
from teamtacles_api.api.errors import install_error_handlers
from teamtacles_api.api.routers.auth import router as auth_router
from teamtacles_api.api.routers.health import router as health_router
from teamtacles_api.api.routers.projects import router as projects_router
from teamtacles_api.api.routers.users import router as users_router
from teamtacles_api.clients.task_service import create_http_client
from teamtacles_api.db.init_db import init_db, seed_roles
from teamtacles_api.db.session import create_engine, create_sessionmaker
from teamtacles_api.observability.logging import configure_logging, get_logger
from teamtacles_api.observability.middleware import RequestContextMiddleware
from teamtacles_api.services.user_directory import UserDirectory
from teamtacles_api.settings import Settings, get_settings

log = get_logger(__name__)


def create_app(*, settings: Settings, task_http: httpx.AsyncClient | None = None) -> FastAPI:
    """
    `task_http` replaces the task service client built from settings (tests pass
    one backed by `httpx.MockTransport`). A client passed in is not closed here.
    """

    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.task_http = task_http if task_http is not None else create_http_client(settings)

        await init_db(engine)
        added = await seed_roles(app.state.sessionmaker)
        if added:
            log.info("roles_seeded", roles=[r.value for r in added])
        await _bootstrap_admin(app, settings)
        try:
            yield
        finally:
            if task_http is None:
                await app.state.task_http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="TeamTacles API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    # Auth dependencies resolve settings via `get_settings`; pin them to this app's.
    app.dependency_overrides[get_settings] = lambda: settings

    install_error_handlers(app)
    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(projects_router)
    return app


async def _bootstrap_admin(app: FastAPI, settings: Settings) -> None:
    username = settings.bootstrap_admin_username
    email = settings.bootstrap_admin_email
    password = settings.bootstrap_admin_password
    if not (username and email and password):
        return
    async with app.state.sessionmaker() as session:
        await UserDirectory(session=session).ensure_admin(
            username=username, email=email, password=password
        )


# --- Module Notes -----------------------------------------------------------
# Business logic stays in services; this file only composes them.
