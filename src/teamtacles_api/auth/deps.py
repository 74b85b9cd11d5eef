"""
teamtacles_api.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Expose the raw bearer token for calls forwarded to the task service.
- Guard administrator-only routes.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from teamtacles_api.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from teamtacles_api.auth.models import Principal
from teamtacles_api.auth.policy import AccessPolicy, default_policy
from teamtacles_api.settings import Settings, get_settings

_bearer = HTTPBearer(auto_error=False)


def get_access_policy() -> AccessPolicy:
    return default_policy


def get_bearer_token(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return creds.credentials


def get_principal(
    token: str = Depends(get_bearer_token),
    settings: Settings = Depends(get_settings),
) -> Principal:
    try:
        # Authn: validate signature and registered claims (iss/aud/exp/sub...).
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=token)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    # Normalize identity into our internal type.
    subject = str(payload.get("sub", ""))
    roles_raw = payload.get("roles", [])
    if not subject.isdigit():
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    if not isinstance(roles_raw, list):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token roles")

    roles: frozenset[str] = frozenset(str(r).upper() for r in roles_raw)
    return Principal(user_id=int(subject), roles=roles)


def require_admin(
    principal: Principal = Depends(get_principal),
    policy: AccessPolicy = Depends(get_access_policy),
) -> Principal:
    if not policy.can_administer(principal):
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Administrator role required")
    return principal


# --- Module Notes -----------------------------------------------------------
# Project-level checks (creator/team/admin) are not dependencies: they need the
# loaded project and run inside `services.project_lifecycle`.
