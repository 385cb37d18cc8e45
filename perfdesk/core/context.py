from dataclasses import dataclass

from perfdesk.models.user import ADMIN_ROLES, UserRole


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller, passed explicitly into every service operation."""
    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def owns(self, record) -> bool:
        return record.owner_id == self.user_id
