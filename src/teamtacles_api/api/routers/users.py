"""
teamtacles_api.api.routers.users

User endpoints.

Responsibilities:
- Public registration.
- Administrator-only role exchange and user listing.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from teamtacles_api.api.deps import PageParams, page_params, user_directory
from teamtacles_api.auth.deps import require_admin
from teamtacles_api.schemas import Page, RoleExchangeRequest, UserRegisterRequest, UserView
from teamtacles_api.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("/register", response_model=UserView, status_code=HTTP_201_CREATED)
async def register_user(
    body: UserRegisterRequest,
    users: UserDirectory = Depends(user_directory),
) -> UserView:
    """
    Register a new user with the USER role.

    - **409**: username or email taken, or password confirmation mismatch
    """
    return await users.register(body)


@router.patch(
    "/{user_id}/role",
    response_model=UserView,
    dependencies=[Depends(require_admin)],
)
async def exchange_role(
    user_id: int,
    body: RoleExchangeRequest,
    users: UserDirectory = Depends(user_directory),
) -> UserView:
    """
    Replace the user's roles with the single role named in the body (admin only).
    """
    return await users.exchange_role(user_id, body.role)


@router.get("", response_model=Page[UserView], dependencies=[Depends(require_admin)])
async def list_users(
    paging: PageParams = Depends(page_params),
    users: UserDirectory = Depends(user_directory),
) -> Page[UserView]:
    return await users.list_users(page=paging.page, size=paging.size)
