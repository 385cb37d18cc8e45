"""
User Model with role-based access.
"""
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean
from sqlalchemy.sql import func
import enum
from perfdesk.database import Base


class UserRole(str, enum.Enum):
    """
    User roles.

    - SUPER_ADMIN / ADMIN: admin-equivalent, may assign, review and delete records
    - HQ_STAFF / FIELD_STAFF / EMPLOYEE: self-service access to their own records
    """
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    HQ_STAFF = "hq_staff"
    FIELD_STAFF = "field_staff"
    EMPLOYEE = "employee"


ADMIN_ROLES = (UserRole.SUPER_ADMIN, UserRole.ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.EMPLOYEE,
        nullable=False,
    )
    department = Column(String, nullable=True)
    position = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
