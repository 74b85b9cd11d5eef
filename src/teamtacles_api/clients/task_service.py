"""
teamtacles_api.clients.task_service

HTTP client boundary to the remote task service.

Responsibilities:
- Delete every task of a project on the task service, forwarding the caller's
  bearer token so the remote side applies its own authorization.
- Translate remote/transport failures into `DomainError` kinds.
- Build the shared `httpx.AsyncClient` with explicit connect/read timeouts.
"""

from __future__ import annotations

import httpx

from teamtacles_api.errors import DomainError, ErrorKind
from teamtacles_api.observability.logging import get_logger
from teamtacles_api.settings import Settings

log = get_logger(__name__)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    # An unbounded call would pin a request handler on one slow delete.
    timeout = httpx.Timeout(
        connect=settings.task_service_connect_timeout_seconds,
        read=settings.task_service_read_timeout_seconds,
        write=settings.task_service_read_timeout_seconds,
        pool=settings.task_service_connect_timeout_seconds,
    )
    return httpx.AsyncClient(base_url=settings.task_service_base_url, timeout=timeout)


def classify_status(status_code: int) -> ErrorKind | None:
    """
    Map a task service response status to an error kind (None means success).
    """

    if 200 <= status_code < 300:
        return None
    if status_code in (403, 404):
        # Remote denial or already-gone tasks both read as a permission failure;
        # the local project still exists.
        return ErrorKind.access_denied
    if status_code == 503:
        return ErrorKind.service_unavailable
    if status_code >= 500:
        return ErrorKind.remote_operation_failed
    return ErrorKind.network_error


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.access_denied: "Permission denied to delete tasks for project {project_id}",
    ErrorKind.service_unavailable: "The task service is temporarily unavailable",
    ErrorKind.remote_operation_failed: "The task service failed to complete the deletion request",
    ErrorKind.network_error: "Network communication error with the task service",
}


class TaskServiceGateway:
    """
    Single-shot client: no retries. Retry policy belongs to the caller.
    """

    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def delete_all_tasks_from_project(self, project_id: int, bearer_token: str) -> None:
        url = f"/api/project/{project_id}/tasks"
        try:
            r = await self._http.delete(url, headers={"Authorization": f"Bearer {bearer_token}"})
        except httpx.HTTPError as e:
            # Connect refusals, timeouts and protocol errors all land here.
            log.warning(
                "task_service_transport_error",
                project_id=project_id,
                error=type(e).__name__,
            )
            raise self._error(ErrorKind.network_error, project_id) from e

        kind = classify_status(r.status_code)
        if kind is None:
            log.info("task_service_tasks_deleted", project_id=project_id, status=r.status_code)
            return
        log.warning(
            "task_service_delete_failed",
            project_id=project_id,
            status=r.status_code,
            kind=kind.value,
        )
        raise self._error(kind, project_id)

    @staticmethod
    def _error(kind: ErrorKind, project_id: int) -> DomainError:
        return DomainError(kind, _MESSAGES[kind].format(project_id=project_id))


# --- Module Notes -----------------------------------------------------------
# The httpx client is process-wide (created in the app lifespan); the gateway is
# a cheap per-request wrapper around it (see `api.deps.task_gateway`).
