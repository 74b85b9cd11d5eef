"""
teamtacles_api.db.models

Core persistence schema.

Responsibilities:
- Define ORM models:
  - User: registered identity with a role set
  - Role: one row per closed `RoleName`
  - Project: creator-owned project with a team of member users
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamtacles_api.auth.models import RoleName
from teamtacles_api.db.base import Base


# Largest value a SQLite INTEGER primary key can hold; larger ids cannot exist.
MAX_ROW_ID = 2**63 - 1


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class ProjectStatus(enum.StrEnum):
    # Deleted projects are removed, so ACTIVE is the only persisted state.
    active = "ACTIVE"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

project_team = Table(
    "project_team",
    Base.metadata,
    Column("project_id", ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[RoleName] = mapped_column(Enum(RoleName), nullable=False, unique=True)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    # Eager "selectin" loading: async sessions cannot lazy-load on attribute access.
    roles: Mapped[list[Role]] = relationship(secondary=user_roles, lazy="selectin")

    @property
    def role_names(self) -> frozenset[str]:
        return frozenset(r.name.value for r in self.roles)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus), nullable=False, default=ProjectStatus.active
    )

    # Creator is fixed at creation; nothing updates this column afterwards.
    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    creator: Mapped[User] = relationship(lazy="selectin")
    team: Mapped[list[User]] = relationship(
        secondary=project_team, lazy="selectin", order_by=User.id
    )

    @property
    def member_ids(self) -> frozenset[int]:
        return frozenset(u.id for u in self.team)

    def touch(self) -> None:
        self.updated_at = _utcnow()


# --- Module Notes -----------------------------------------------------------
# `Project.creator_id` / `Project.member_ids` are the only facts the access
# policy reads (see `auth.policy`).
