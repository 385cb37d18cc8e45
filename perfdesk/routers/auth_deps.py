"""
Authentication dependencies.
Resolve the bearer token into a User and an explicit RequestContext.
"""
import logging
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.database import get_db
from perfdesk.models.user import User
from perfdesk.services import auth as auth_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """
    Extracts and validates the current user from the JWT token.
    """
    payload = auth_service.decode_access_token(token)

    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise _unauthorized("Could not validate credentials")

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise _unauthorized("TOKEN_EXPIRED")

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise _unauthorized("Invalid token type")

    email = payload.get("sub")
    if email is None:
        logger.warning("Authentication failed: Missing subject (email) in token")
        raise _unauthorized("Missing subject in token")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.warning(f"Authentication failed: User {email} not found in database")
        raise _unauthorized("User not found")
    if not user.is_active:
        logger.warning(f"Authentication failed: User {email} is inactive")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive"
        )
    return user


def get_request_context(current_user: User = Depends(get_current_user)) -> RequestContext:
    return RequestContext(user_id=current_user.id, role=current_user.role)


def require_admin() -> Callable:
    """
    Dependency factory for admin-only endpoints.

    Usage:
        @router.get("/admin-only")
        def admin_endpoint(ctx: RequestContext = Depends(require_admin())):
            ...
    """
    def admin_checker(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not ctx.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Admin role required."
            )
        return ctx
    return admin_checker
