from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.schemas import ApiResponse
from perfdesk.database import get_db
from perfdesk.routers.auth_deps import require_admin
from perfdesk.schemas.auth import UserCreate, UserResponse
from perfdesk.services.employee_service import EmployeeService

router = APIRouter(
    prefix="/employees",
    tags=["employees"]
)


@router.get("", response_model=ApiResponse[List[UserResponse]])
def list_employees(
    ctx: RequestContext = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    users = EmployeeService(db).list()
    return ApiResponse.ok([UserResponse.model_validate(u) for u in users])


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: UserCreate,
    ctx: RequestContext = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    user = EmployeeService(db).create(ctx, payload.model_dump())
    return ApiResponse.ok(UserResponse.model_validate(user))
