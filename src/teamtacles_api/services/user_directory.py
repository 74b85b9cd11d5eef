"""
teamtacles_api.services.user_directory

User and role management service.

Responsibilities:
- Register users (uniqueness + password confirmation, USER role assigned).
- Exchange a user's role set for a single new role (administrators only;
  the admin check is done by the router dependency).
- List users for administrators and check login credentials.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teamtacles_api.auth.models import RoleName
from teamtacles_api.auth.passwords import hash_password, verify_password
from teamtacles_api.db.models import Role, User
from teamtacles_api.db.repositories.roles import RoleRepo
from teamtacles_api.db.repositories.users import UserRepo
from teamtacles_api.errors import conflict, invalid_request, not_found
from teamtacles_api.observability.logging import get_logger
from teamtacles_api.schemas import Page, UserRegisterRequest, UserView

log = get_logger(__name__)


class UserDirectory:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._roles = RoleRepo(session)

    async def register(self, request: UserRegisterRequest) -> UserView:
        if await self._users.username_exists(request.username):
            raise conflict("Username/email already exists")
        if await self._users.email_exists(request.email):
            raise conflict("Username/email already exists")
        if request.password != request.password_confirm:
            raise conflict("Password and confirmation don't match")

        role = await self._role(RoleName.user)
        try:
            user = await self._users.create(
                username=request.username,
                email=request.email,
                password_hash=hash_password(request.password),
                roles=[role],
            )
            await self._session.commit()
        except IntegrityError:
            # A concurrent registration took the username or email after the checks above.
            await self._session.rollback()
            raise conflict("Username/email already exists") from None
        log.info("user_registered", user_id=user.id)
        return UserView.of(user)

    async def exchange_role(self, user_id: int, role_name: str) -> UserView:
        """
        Replace the user's entire role set with the single named role.

        This is a full replacement, not an addition: a USER promoted to ADMIN
        ends up with {ADMIN} only. Whether augmenting was intended is an open
        product question.
        """

        user = await self._users.get(user_id, for_update=True)
        if user is None:
            raise not_found("User not found")
        try:
            name = RoleName(role_name.strip().upper())
        except ValueError:
            raise invalid_request(f"Unknown role '{role_name}'") from None

        previous = sorted(user.role_names)
        user.roles = [await self._role(name)]
        await self._session.commit()
        log.info("role_exchanged", user_id=user.id, previous=previous, current=name.value)
        return UserView.of(user)

    async def list_users(self, *, page: int, size: int) -> Page[UserView]:
        users, total = await self._users.list_all(offset=(page - 1) * size, limit=size)
        return Page[UserView].build(
            items=[UserView.of(u) for u in users], page=page, size=size, total=total
        )

    async def authenticate(self, login: str, password: str) -> User | None:
        user = await self._users.find_by_login(login)
        if user is None or not verify_password(password, user.password_hash):
            log.info("login_failed")
            return None
        return user

    async def ensure_admin(self, *, username: str, email: str, password: str) -> User:
        """
        Create the bootstrap administrator unless a user with that username exists.
        An existing user is returned unchanged.
        """

        existing = await self._users.find_by_login(username)
        if existing is not None:
            return existing
        user = await self._users.create(
            username=username,
            email=email,
            password_hash=hash_password(password),
            roles=[await self._role(RoleName.admin)],
        )
        await self._session.commit()
        log.info("bootstrap_admin_created", user_id=user.id)
        return user

    async def _role(self, name: RoleName) -> Role:
        role = await self._roles.get_by_name(name)
        if role is None:
            raise not_found(f"Role {name.value} not found")
        return role


# --- Module Notes -----------------------------------------------------------
# Tokens carry a role snapshot; a role exchange applies from the user's next login.
