from typing import Any, Dict, List, Mapping

from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from perfdesk.models.user import User, UserRole
from perfdesk.repositories import UserRepository
from perfdesk.services import auth as auth_service
from perfdesk.services.base import BaseService

# Role and email stay with admins
PROFILE_FIELDS = frozenset({"name", "department", "position"})


class EmployeeService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.users = UserRepository(db)

    def list(self) -> List[User]:
        return self.users.find(order_by=[User.created_at.desc(), User.id.desc()])

    def create(self, ctx: RequestContext, data: Dict[str, Any]) -> User:
        data = dict(data)
        if data.get("role") == UserRole.SUPER_ADMIN and ctx.role != UserRole.SUPER_ADMIN:
            raise AuthorizationError("Only super admins can create super admins")
        if self.users.get_by_email(data["email"]) is not None:
            raise ConflictError("An account with this email already exists.")

        password = data.pop("password")
        user = User(hashed_password=auth_service.get_password_hash(password), **data)
        user = self.users.create(user)
        self.log_info(f"Employee {user.id} created by user {ctx.user_id}", role=user.role.value)
        return user

    def update_profile(self, ctx: RequestContext, changes: Mapping[str, Any]) -> User:
        """A user editing their own directory entry."""
        user = self.users.get(ctx.user_id)
        if user is None:
            raise NotFoundError("User", ctx.user_id)
        accepted = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        user = self.users.update(user, accepted)
        self.log_info(f"User {user.id} updated their profile", fields=sorted(accepted))
        return user
