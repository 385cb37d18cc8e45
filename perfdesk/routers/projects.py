from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.schemas import ApiResponse
from perfdesk.database import get_db
from perfdesk.routers.auth_deps import get_request_context
from perfdesk.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    TaskCreate,
    TaskUpdate,
)
from perfdesk.services.project_service import ProjectService

router = APIRouter(
    prefix="/projects",
    tags=["projects"]
)


@router.get("", response_model=ApiResponse[List[ProjectResponse]])
def list_projects(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    projects = ProjectService(db).list(ctx)
    return ApiResponse.ok([ProjectResponse.model_validate(p) for p in projects])


@router.post("", response_model=ApiResponse[ProjectResponse], status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    project = ProjectService(db).create(ctx, payload.model_dump())
    return ApiResponse.ok(ProjectResponse.model_validate(project))


@router.patch("/{project_id}", response_model=ApiResponse[ProjectResponse])
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    project = ProjectService(db).update(ctx, project_id, payload.model_dump(exclude_unset=True))
    return ApiResponse.ok(ProjectResponse.model_validate(project))


@router.post(
    "/{project_id}/tasks",
    response_model=ApiResponse[ProjectResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_task(
    project_id: int,
    payload: TaskCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    project = ProjectService(db).add_task(ctx, project_id, payload.model_dump())
    return ApiResponse.ok(ProjectResponse.model_validate(project))


@router.patch("/{project_id}/tasks/{task_id}", response_model=ApiResponse[ProjectResponse])
def update_task(
    project_id: int,
    task_id: int,
    payload: TaskUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    project = ProjectService(db).update_task(
        ctx, project_id, task_id, payload.model_dump(exclude_unset=True)
    )
    return ApiResponse.ok(ProjectResponse.model_validate(project))


@router.delete("/{project_id}/tasks/{task_id}", response_model=ApiResponse[ProjectResponse])
def delete_task(
    project_id: int,
    task_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    project = ProjectService(db).delete_task(ctx, project_id, task_id)
    return ApiResponse.ok(ProjectResponse.model_validate(project))
