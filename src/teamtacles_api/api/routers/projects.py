"""
teamtacles_api.api.routers.projects

Project endpoints.

Responsibilities:
- Expose project create/read/list/update/partial-update/delete.
- Pass the authenticated principal (and, for delete, the caller's bearer token)
  to `ProjectLifecycle`, which performs all authorization checks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from teamtacles_api.api.deps import PageParams, page_params, project_lifecycle
from teamtacles_api.auth.deps import get_bearer_token, get_principal
from teamtacles_api.auth.models import Principal
from teamtacles_api.schemas import Page, ProjectPatchRequest, ProjectRequest, ProjectView
from teamtacles_api.services.project_lifecycle import ProjectLifecycle

router = APIRouter(prefix="/api/project", tags=["projects"])


@router.post("", response_model=ProjectView, status_code=HTTP_201_CREATED)
async def create_project(
    body: ProjectRequest,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(project_lifecycle),
) -> ProjectView:
    """
    Create a project; the caller becomes its creator.
    """
    return await projects.create(body, principal)


# Declared before "/{project_id}" so "all" is not parsed as an id.
@router.get("/all", response_model=Page[ProjectView])
async def list_projects(
    paging: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(project_lifecycle),
) -> Page[ProjectView]:
    """
    Administrators see every project; everyone else sees projects they created
    or are a team member of. Ordered by id.
    """
    return await projects.list_for_principal(principal, page=paging.page, size=paging.size)


@router.get("/{project_id}", response_model=ProjectView)
async def get_project(
    project_id: int,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(project_lifecycle),
) -> ProjectView:
    return await projects.get_by_id(project_id, principal)


@router.put("/{project_id}", response_model=ProjectView)
async def update_project(
    project_id: int,
    body: ProjectRequest,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(project_lifecycle),
) -> ProjectView:
    """
    Replace name, description and team (creator or administrator only).
    """
    return await projects.update(project_id, body, principal)


@router.patch("/{project_id}", response_model=ProjectView)
async def partial_update_project(
    project_id: int,
    body: ProjectPatchRequest,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(project_lifecycle),
) -> ProjectView:
    """
    Apply only the fields present in the body (creator or administrator only).
    """
    return await projects.partial_update(project_id, body, principal)


@router.delete("/{project_id}", status_code=HTTP_204_NO_CONTENT, response_class=Response)
async def delete_project(
    project_id: int,
    principal: Principal = Depends(get_principal),
    token: str = Depends(get_bearer_token),
    projects: ProjectLifecycle = Depends(project_lifecycle),
) -> Response:
    """
    Delete the project's tasks on the task service, then the project itself.

    - **502**: task service denied the request, failed, or was unreachable
    - **503**: task service temporarily unavailable (project kept; retry later)
    """
    await projects.delete(project_id, principal, token)
    return Response(status_code=HTTP_204_NO_CONTENT)
