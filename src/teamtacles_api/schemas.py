"""
teamtacles_api.schemas

Request and view models shared by the API layer and services.

Responsibilities:
- Validate inbound bodies (field lengths, required fields, explicit nulls).
- Define the views services return, independent of ORM objects.
- Provide the page envelope used by every listing endpoint.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from teamtacles_api.db.models import Project, User

T = TypeVar("T")


# --- Views -----------------------------------------------------------------


class UserSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    username: str

    @classmethod
    def of(cls, user: User) -> UserSummary:
        return cls(id=user.id, username=user.username)


class UserView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str
    roles: list[str]

    @classmethod
    def of(cls, user: User) -> UserView:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=sorted(user.role_names),
        )


class ProjectView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str | None
    status: str
    creator: UserSummary
    team: list[UserSummary]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(cls, project: Project) -> ProjectView:
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            status=project.status.value,
            creator=UserSummary.of(project.creator),
            team=[UserSummary.of(u) for u in sorted(project.team, key=lambda u: u.id)],
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


class Page(BaseModel, Generic[T]):
    items: list[T]
    page: int
    size: int
    total: int
    pages: int
    last: bool

    @classmethod
    def build(cls, *, items: list[T], page: int, size: int, total: int) -> Page[T]:
        pages = math.ceil(total / size) if total else 0
        return cls(items=items, page=page, size=size, total=total, pages=pages, last=page >= pages)


# --- Requests --------------------------------------------------------------


class UserRegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=5, max_length=72)
    password_confirm: str = Field(min_length=1, max_length=72)


class RoleExchangeRequest(BaseModel):
    role: str = Field(min_length=1, max_length=32)


class LoginRequest(BaseModel):
    login: str = Field(min_length=1, max_length=254, description="Username or email")
    password: str = Field(min_length=1, max_length=72)


class ProjectRequest(BaseModel):
    """
    Body for create and full update (PUT). Omitted `team` means an empty team.
    """

    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=200)
    team: list[int] = Field(default_factory=list)


class ProjectPatchRequest(BaseModel):
    """
    Body for partial update (PATCH). Only fields present in the body are applied.
    """

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=200)
    team: list[int] | None = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> ProjectPatchRequest:
        for field in ("name", "team"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"'{field}' cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        # Presence decides: unset fields are absent, explicit nulls are kept.
        return self.model_dump(exclude_unset=True)


# --- Module Notes -----------------------------------------------------------
# Views are frozen so equal underlying rows produce equal (==) views.
