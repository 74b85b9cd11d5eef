"""
teamtacles_api.auth.models

Auth domain models.

Responsibilities:
- Define the closed role names (`RoleName`).
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class RoleName(enum.StrEnum):
    # Closed set; role names in tokens and requests resolve against these values.
    user = "USER"
    admin = "ADMIN"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity: the user id from the token subject and the
    role names granted when the token was issued.
    """

    user_id: int
    roles: frozenset[str]


# --- Module Notes -----------------------------------------------------------
# Role checks go through `auth.policy.AccessPolicy`; keep this model data-only.
