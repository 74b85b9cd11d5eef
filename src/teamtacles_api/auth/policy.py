"""
teamtacles_api.auth.policy

Project access policy.

Responsibilities:
- Decide whether a principal may view or modify a project, or act as an administrator.

Decisions are pure functions of the principal's id/roles and the project's
creator id and team member ids. A denied permission is `False`, never an exception.
"""

from __future__ import annotations

from typing import Protocol

from teamtacles_api.auth.models import Principal, RoleName


class OwnedResource(Protocol):
    @property
    def creator_id(self) -> int: ...

    @property
    def member_ids(self) -> frozenset[int]: ...


class AccessPolicy:
    def __init__(self, *, admin_role: str = RoleName.admin.value) -> None:
        self._admin_role = admin_role

    def can_administer(self, principal: Principal) -> bool:
        return self._admin_role in principal.roles

    def can_modify(self, principal: Principal, resource: OwnedResource) -> bool:
        # Team membership alone never grants modification.
        return principal.user_id == resource.creator_id or self.can_administer(principal)

    def can_view(self, principal: Principal, resource: OwnedResource) -> bool:
        return (
            principal.user_id == resource.creator_id
            or principal.user_id in resource.member_ids
            or self.can_administer(principal)
        )


default_policy = AccessPolicy()


# --- Module Notes -----------------------------------------------------------
# Every ProjectLifecycle operation calls into this object before touching state;
# router-level admin guards (`auth.deps.require_admin`) reuse `can_administer`.
