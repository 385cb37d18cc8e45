import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from perfdesk.core.config import settings
from perfdesk.core.context import RequestContext
from perfdesk.core.limiter import limiter
from perfdesk.core.schemas import ApiResponse
from perfdesk.database import get_db
from perfdesk.models.user import User
from perfdesk.repositories import UserRepository
from perfdesk.routers.auth_deps import get_current_user, get_request_context
from perfdesk.schemas.auth import LoginRequest, ProfileUpdate, Token, UserResponse
from perfdesk.services import auth as auth_service
from perfdesk.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/login", response_model=ApiResponse[Token])
@limiter.limit(settings.login_rate_limit)
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_email(login_data.email)
    if not user or not auth_service.verify_password(login_data.password, user.hashed_password):
        logger.info(f"Failed login for {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")

    access_token = auth_service.create_access_token(data={
        "sub": user.email,
        "user_id": user.id,
        "role": user.role.value,
    })
    logger.info(f"User {user.id} logged in")
    return ApiResponse.ok(Token(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    ))


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse.ok(UserResponse.model_validate(current_user))


@router.patch("/me", response_model=ApiResponse[UserResponse])
def update_me(
    payload: ProfileUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    user = EmployeeService(db).update_profile(ctx, payload.model_dump(exclude_unset=True))
    return ApiResponse.ok(UserResponse.model_validate(user))
