"""
teamtacles_api.api.routers.auth

Login endpoint.

Responsibilities:
- Exchange username/email + password for a bearer token carrying the user's roles.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.status import HTTP_401_UNAUTHORIZED

from teamtacles_api.api.deps import settings_dep, user_directory
from teamtacles_api.auth.jwt import JwtConfig, issue_token
from teamtacles_api.schemas import LoginRequest
from teamtacles_api.services.user_directory import UserDirectory
from teamtacles_api.settings import Settings

router = APIRouter(prefix="/api/auth", tags=["auth"])


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    users: UserDirectory = Depends(user_directory),
    settings: Settings = Depends(settings_dep),
) -> TokenResponse:
    user = await users.authenticate(body.login, body.password)
    if user is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    ttl = timedelta(minutes=settings.jwt_ttl_minutes)
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=str(user.id),
        roles=sorted(user.role_names),
        ttl=ttl,
    )
    return TokenResponse(access_token=token, expires_in=int(ttl.total_seconds()))
