"""
teamtacles_api.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Liveness probe (`/healthz`).
- Readiness probe (`/readyz`): DB reachable and the role table seeded.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from teamtacles_api.api.deps import db_session
from teamtacles_api.auth.models import RoleName
from teamtacles_api.db.models import Role

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz", response_model=None)
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, object] | JSONResponse:
    roles = (await session.execute(select(func.count(Role.id)))).scalar_one()
    if roles < len(RoleName):
        # Role lookups by name would fail (registration, role exchange).
        return JSONResponse(
            {"status": "not_ready", "roles": roles}, status_code=HTTP_503_SERVICE_UNAVAILABLE
        )
    return {"status": "ready", "roles": roles}
