"""
teamtacles_api.errors

Domain error taxonomy.

Responsibilities:
- Define the closed set of failure kinds services and clients may report.
- Provide a single exception type carrying that discriminant.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.StrEnum):
    # Values are part of the public error body; treat as stable API contract.
    not_found = "NOT_FOUND"
    forbidden = "FORBIDDEN"
    conflict = "CONFLICT"
    invalid_request = "INVALID_REQUEST"
    access_denied = "ACCESS_DENIED"
    service_unavailable = "SERVICE_UNAVAILABLE"
    remote_operation_failed = "REMOTE_OPERATION_FAILED"
    network_error = "NETWORK_ERROR"
    unmapped = "UNMAPPED"


# Kinds produced by the task service gateway; the local caller did not cause them.
REMOTE_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.access_denied,
        ErrorKind.service_unavailable,
        ErrorKind.remote_operation_failed,
        ErrorKind.network_error,
    }
)


class DomainError(Exception):
    """
    Raised by services and clients; the API layer maps `kind` to an HTTP status.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def is_remote(self) -> bool:
        return self.kind in REMOTE_KINDS

    def __repr__(self) -> str:
        return f"DomainError(kind={self.kind.value!r}, message={self.message!r})"


def not_found(message: str) -> DomainError:
    return DomainError(ErrorKind.not_found, message)


def forbidden(message: str) -> DomainError:
    return DomainError(ErrorKind.forbidden, message)


def conflict(message: str) -> DomainError:
    return DomainError(ErrorKind.conflict, message)


def invalid_request(message: str) -> DomainError:
    return DomainError(ErrorKind.invalid_request, message)


# --- Module Notes -----------------------------------------------------------
# Status-code mapping lives in `api.errors`; nothing below the API layer knows HTTP.
